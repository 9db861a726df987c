"""ORM model for conversation threads."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from email_sync.db.base import Base, IdMixin, TimestampMixin


class EmailThread(Base, IdMixin, TimestampMixin):
    """One row per remote thread. Keyed by (email_account_id, provider_thread_id)."""

    __tablename__ = "email_threads"
    __table_args__ = (
        UniqueConstraint("email_account_id", "provider_thread_id", name="uq_thread_account_provider_id"),
    )

    organization_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    email_account_id: Mapped[str] = mapped_column(
        ForeignKey("email_accounts.id"), nullable=False, index=True
    )
    provider_thread_id: Mapped[str] = mapped_column(String(256), nullable=False)
    subject: Mapped[str] = mapped_column(String(1024), nullable=False)
    snippet: Mapped[str] = mapped_column(Text, nullable=False, default="")
    participant_emails: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # Weak link: lookup only, no cascade
    client_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, index=True)
    is_read: Mapped[bool] = mapped_column(nullable=False, default=True)
    is_starred: Mapped[bool] = mapped_column(nullable=False, default=False)
    is_archived: Mapped[bool] = mapped_column(nullable=False, default=False)
    last_message_at: Mapped[datetime] = mapped_column(nullable=False, index=True)
