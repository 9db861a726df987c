"""Email message repository: create-once, refresh read state."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from email_sync.db import Database
from email_sync.db.models.email_message import EmailMessage


def upsert_message(
    db: Database,
    thread_id: str,
    provider_message_id: str,
    *,
    from_email: str,
    from_name: Optional[str],
    to_emails: list[str],
    to_names: list[str],
    cc_emails: list[str],
    subject: str,
    body_html: Optional[str],
    body_text: Optional[str],
    direction: str,
    is_read: bool,
    has_attachments: bool,
    in_reply_to: Optional[str],
    references: list[str],
    sent_at: datetime,
) -> bool:
    """Insert the message if (thread_id, provider_message_id) is new; else refresh is_read only.

    Returns True if the row was created.
    """
    if _refresh_read_state(db, thread_id, provider_message_id, is_read):
        return False
    try:
        with db.session() as session:
            session.add(
                EmailMessage(
                    thread_id=thread_id,
                    provider_message_id=provider_message_id,
                    from_email=from_email,
                    from_name=from_name,
                    to_emails=list(to_emails),
                    to_names=list(to_names),
                    cc_emails=list(cc_emails),
                    bcc_emails=[],
                    subject=subject,
                    body_html=body_html,
                    body_text=body_text,
                    direction=direction,
                    is_read=is_read,
                    has_attachments=has_attachments,
                    in_reply_to=in_reply_to,
                    references=list(references),
                    sent_at=sent_at,
                )
            )
        return True
    except IntegrityError:
        # Written by an overlapping run between the lookup and the insert
        _refresh_read_state(db, thread_id, provider_message_id, is_read)
        return False


def _refresh_read_state(db: Database, thread_id: str, provider_message_id: str, is_read: bool) -> bool:
    with db.session() as session:
        row = session.scalars(
            select(EmailMessage)
            .where(EmailMessage.thread_id == thread_id)
            .where(EmailMessage.provider_message_id == provider_message_id)
        ).first()
        if row is None:
            return False
        row.is_read = is_read
        return True


def list_for_thread(db: Database, thread_id: str) -> list[EmailMessage]:
    """All messages of a thread, oldest first."""
    with db.session() as session:
        rows = list(
            session.scalars(
                select(EmailMessage)
                .where(EmailMessage.thread_id == thread_id)
                .order_by(EmailMessage.sent_at, EmailMessage.id)
            ).all()
        )
        for row in rows:
            session.expunge(row)
        return rows


def latest_for_threads(db: Database, thread_ids: list[str]) -> dict[str, EmailMessage]:
    """Map thread id -> most recent message."""
    if not thread_ids:
        return {}
    latest: dict[str, EmailMessage] = {}
    with db.session() as session:
        rows = session.scalars(
            select(EmailMessage)
            .where(EmailMessage.thread_id.in_(thread_ids))
            .order_by(EmailMessage.sent_at.desc(), EmailMessage.id)
        ).all()
        for row in rows:
            if row.thread_id not in latest:
                latest[row.thread_id] = row
        for row in latest.values():
            session.expunge(row)
    return latest
