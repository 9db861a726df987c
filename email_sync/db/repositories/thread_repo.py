"""Email thread repository: idempotent upsert, counts and inbox listing."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Text, cast, func, or_, select
from sqlalchemy.exc import IntegrityError

from email_sync.db import Database
from email_sync.db.models.email_message import EmailMessage
from email_sync.db.models.email_thread import EmailThread

FILTER_ALL = "all"
FILTER_UNREAD = "unread"
FILTER_STARRED = "starred"
FILTER_ARCHIVED = "archived"
THREAD_FILTERS = (FILTER_ALL, FILTER_UNREAD, FILTER_STARRED, FILTER_ARCHIVED)


def get_by_provider_id(db: Database, account_id: str, provider_thread_id: str) -> Optional[EmailThread]:
    with db.session() as session:
        row = session.scalars(
            select(EmailThread)
            .where(EmailThread.email_account_id == account_id)
            .where(EmailThread.provider_thread_id == provider_thread_id)
        ).first()
        if row is not None:
            session.expunge(row)
        return row


def upsert_thread(
    db: Database,
    organization_id: str,
    account_id: str,
    provider_thread_id: str,
    *,
    subject: str,
    snippet: str,
    participant_emails: list[str],
    client_id: Optional[str],
    is_read: bool,
    is_starred: bool,
    is_archived: bool,
    last_message_at: datetime,
) -> tuple[str, bool]:
    """Create or update the thread keyed by (account_id, provider_thread_id).

    Returns (thread id, created). On update an existing client link is never
    replaced by None. A concurrent insert of the same key is retried as an update.
    """
    values = dict(
        subject=subject,
        snippet=snippet,
        participant_emails=list(participant_emails),
        is_read=is_read,
        is_starred=is_starred,
        is_archived=is_archived,
        last_message_at=last_message_at,
    )
    try:
        return _upsert_once(db, organization_id, account_id, provider_thread_id, client_id, values)
    except IntegrityError:
        return _upsert_once(db, organization_id, account_id, provider_thread_id, client_id, values)


def _upsert_once(
    db: Database,
    organization_id: str,
    account_id: str,
    provider_thread_id: str,
    client_id: Optional[str],
    values: dict,
) -> tuple[str, bool]:
    with db.session() as session:
        row = session.scalars(
            select(EmailThread)
            .where(EmailThread.email_account_id == account_id)
            .where(EmailThread.provider_thread_id == provider_thread_id)
        ).first()
        if row is None:
            row = EmailThread(
                organization_id=organization_id,
                email_account_id=account_id,
                provider_thread_id=provider_thread_id,
                client_id=client_id,
                **values,
            )
            session.add(row)
            session.flush()
            return row.id, True
        for key, value in values.items():
            setattr(row, key, value)
        if client_id is not None:
            row.client_id = client_id
        return row.id, False


def set_client(db: Database, organization_id: str, thread_id: str, client_id: Optional[str]) -> bool:
    """Manually link (or unlink with None) a thread. Returns False if the thread is not the tenant's."""
    with db.session() as session:
        row = session.scalars(
            select(EmailThread)
            .where(EmailThread.id == thread_id)
            .where(EmailThread.organization_id == organization_id)
        ).first()
        if row is None:
            return False
        row.client_id = client_id
        return True


def count_threads(db: Database, organization_id: str, unread_only: bool = False) -> int:
    """Tenant thread count; unread_only counts unread threads still in the inbox."""
    with db.session() as session:
        q = select(func.count(EmailThread.id)).where(EmailThread.organization_id == organization_id)
        if unread_only:
            q = q.where(EmailThread.is_read == False).where(EmailThread.is_archived == False)  # noqa: E712
        return session.scalar(q) or 0


def count_by_account(db: Database, organization_id: str) -> dict[str, int]:
    """Map account id -> thread count for a tenant (accounts without threads are absent)."""
    with db.session() as session:
        q = (
            select(EmailThread.email_account_id, func.count(EmailThread.id))
            .where(EmailThread.organization_id == organization_id)
            .group_by(EmailThread.email_account_id)
        )
        return {account_id: count for account_id, count in session.execute(q).all()}


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _apply_filter(q, filter_name: str):
    if filter_name == FILTER_UNREAD:
        return q.where(EmailThread.is_read == False).where(EmailThread.is_archived == False)  # noqa: E712
    if filter_name == FILTER_STARRED:
        return q.where(EmailThread.is_starred == True).where(EmailThread.is_archived == False)  # noqa: E712
    if filter_name == FILTER_ARCHIVED:
        return q.where(EmailThread.is_archived == True)  # noqa: E712
    return q.where(EmailThread.is_archived == False)  # noqa: E712


def list_threads(
    db: Database,
    organization_id: str,
    filter_name: str = FILTER_ALL,
    search: Optional[str] = None,
    client_id: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[EmailThread], int]:
    """Page of tenant threads, newest activity first, plus the total matching count."""
    if filter_name not in THREAD_FILTERS:
        raise ValueError(f"Unknown thread filter: {filter_name!r}")
    q = _apply_filter(select(EmailThread).where(EmailThread.organization_id == organization_id), filter_name)
    if client_id:
        q = q.where(EmailThread.client_id == client_id)
    with db.session() as session:
        if search:
            needle = _escape_like(search.strip().lower())
            pattern = f"%{needle}%"
            # participant_emails is JSON; match the exact quoted address inside the serialized list
            participant_match = cast(EmailThread.participant_emails, Text).like(f'%"{needle}"%', escape="\\")
            q = q.where(
                or_(
                    func.lower(EmailThread.subject).like(pattern, escape="\\"),
                    func.lower(EmailThread.snippet).like(pattern, escape="\\"),
                    participant_match,
                )
            )
        total = session.scalar(select(func.count()).select_from(q.subquery())) or 0
        rows = list(
            session.scalars(
                q.order_by(EmailThread.last_message_at.desc(), EmailThread.id).limit(limit).offset(offset)
            ).all()
        )
        for row in rows:
            session.expunge(row)
        return rows, total


def get_thread(db: Database, organization_id: str, thread_id: str) -> Optional[EmailThread]:
    with db.session() as session:
        row = session.scalars(
            select(EmailThread)
            .where(EmailThread.id == thread_id)
            .where(EmailThread.organization_id == organization_id)
        ).first()
        if row is not None:
            session.expunge(row)
        return row


def message_counts(db: Database, thread_ids: list[str]) -> dict[str, int]:
    """Map thread id -> number of stored messages."""
    if not thread_ids:
        return {}
    with db.session() as session:
        q = (
            select(EmailMessage.thread_id, func.count(EmailMessage.id))
            .where(EmailMessage.thread_id.in_(thread_ids))
            .group_by(EmailMessage.thread_id)
        )
        return {thread_id: count for thread_id, count in session.execute(q).all()}
