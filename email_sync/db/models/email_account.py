"""ORM model for connected mailboxes."""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from email_sync.db.base import Base, IdMixin, TimestampMixin

PROVIDER_GMAIL = "GMAIL"


class EmailAccount(Base, IdMixin, TimestampMixin):
    """One row per connected mailbox.

    sync_cursor is the provider history id reached by the last successful sync;
    it is null until the first full sync completes. An inactive account always
    carries an error_message.
    """

    __tablename__ = "email_accounts"

    organization_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    provider: Mapped[str] = mapped_column(String(32), nullable=False, default=PROVIDER_GMAIL)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)
    sync_enabled: Mapped[bool] = mapped_column(nullable=False, default=True)
    sync_cursor: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    last_sync_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
