"""ORM model for messages within a thread."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from email_sync.db.base import Base, IdMixin, TimestampMixin

DIRECTION_INBOUND = "INBOUND"
DIRECTION_OUTBOUND = "OUTBOUND"


class EmailMessage(Base, IdMixin, TimestampMixin):
    """One row per remote message. Content is immutable once written; only is_read is refreshed."""

    __tablename__ = "email_messages"
    __table_args__ = (
        UniqueConstraint("thread_id", "provider_message_id", name="uq_message_thread_provider_id"),
    )

    thread_id: Mapped[str] = mapped_column(ForeignKey("email_threads.id"), nullable=False, index=True)
    provider_message_id: Mapped[str] = mapped_column(String(256), nullable=False)
    from_email: Mapped[str] = mapped_column(String(320), nullable=False)
    from_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    to_emails: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    to_names: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cc_emails: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    bcc_emails: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    subject: Mapped[str] = mapped_column(String(1024), nullable=False)
    body_html: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    body_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    direction: Mapped[str] = mapped_column(String(16), nullable=False)
    is_read: Mapped[bool] = mapped_column(nullable=False, default=True)
    has_attachments: Mapped[bool] = mapped_column(nullable=False, default=False)
    in_reply_to: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    references: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    sent_at: Mapped[datetime] = mapped_column(nullable=False, index=True)
