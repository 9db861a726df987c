"""Inbox read queries and manual client linking over synced threads."""

from typing import Optional

from email_sync.db import Database
from email_sync.db.repositories import client_repo, message_repo, thread_repo
from email_sync.errors import ClientNotFoundError, ThreadNotFoundError
from email_sync.models.inbox import MessageSummary, MessageView, ThreadDetail, ThreadListItem, ThreadPage
from email_sync.utils.logger import get_logger

logger = get_logger("email_sync.inbox")


def list_threads(
    db: Database,
    organization_id: str,
    filter_name: str = thread_repo.FILTER_ALL,
    search: Optional[str] = None,
    client_id: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> ThreadPage:
    """Page of threads for the inbox view, newest activity first."""
    rows, total = thread_repo.list_threads(db, organization_id, filter_name, search, client_id, limit, offset)
    ids = [row.id for row in rows]
    counts = thread_repo.message_counts(db, ids)
    latest = message_repo.latest_for_threads(db, ids)
    items = []
    for row in rows:
        last = latest.get(row.id)
        items.append(
            ThreadListItem(
                id=row.id,
                subject=row.subject,
                snippet=row.snippet,
                participant_emails=row.participant_emails,
                is_read=row.is_read,
                is_starred=row.is_starred,
                is_archived=row.is_archived,
                last_message_at=row.last_message_at,
                client_id=row.client_id,
                message_count=counts.get(row.id, 0),
                latest_message=MessageSummary(
                    id=last.id,
                    from_email=last.from_email,
                    from_name=last.from_name,
                    direction=last.direction,
                    has_attachments=last.has_attachments,
                    sent_at=last.sent_at,
                )
                if last is not None
                else None,
            )
        )
    return ThreadPage(
        threads=items,
        total=total,
        unread_count=thread_repo.count_threads(db, organization_id, unread_only=True),
    )


def get_thread(db: Database, organization_id: str, thread_id: str) -> ThreadDetail:
    """Thread with all messages, oldest first. Raises ThreadNotFoundError."""
    row = thread_repo.get_thread(db, organization_id, thread_id)
    if row is None:
        raise ThreadNotFoundError(f"Thread not found: {thread_id}")
    return ThreadDetail(
        id=row.id,
        subject=row.subject,
        participant_emails=row.participant_emails,
        is_read=row.is_read,
        is_starred=row.is_starred,
        is_archived=row.is_archived,
        client_id=row.client_id,
        messages=[
            MessageView(
                id=m.id,
                from_email=m.from_email,
                from_name=m.from_name,
                to_emails=m.to_emails,
                cc_emails=m.cc_emails,
                subject=m.subject,
                body_html=m.body_html,
                body_text=m.body_text,
                direction=m.direction,
                is_read=m.is_read,
                has_attachments=m.has_attachments,
                sent_at=m.sent_at,
            )
            for m in message_repo.list_for_thread(db, row.id)
        ],
    )


def link_thread_to_client(db: Database, organization_id: str, thread_id: str, client_id: Optional[str]) -> None:
    """Link a thread to a tenant client, or unlink with None."""
    if client_id is not None and client_repo.get_client(db, organization_id, client_id) is None:
        raise ClientNotFoundError(f"Client not found: {client_id}")
    if not thread_repo.set_client(db, organization_id, thread_id, client_id):
        raise ThreadNotFoundError(f"Thread not found: {thread_id}")
    logger.info("inbox.thread_linked", thread_id=thread_id, client_id=client_id)
