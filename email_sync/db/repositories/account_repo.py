"""Email account repository: lookups and sync-state writes."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select

from email_sync.db import Database
from email_sync.db.models.email_account import PROVIDER_GMAIL, EmailAccount


def _detach(session, row):
    if row is not None:
        session.flush()
        session.refresh(row)
        session.expunge(row)
    return row


def create_account(
    db: Database,
    organization_id: str,
    email: str,
    provider: str = PROVIDER_GMAIL,
    sync_enabled: bool = True,
) -> EmailAccount:
    """Insert a connected mailbox. OAuth connect happens elsewhere; this only records it."""
    with db.session() as session:
        row = EmailAccount(
            organization_id=organization_id,
            email=email,
            provider=provider,
            is_active=True,
            sync_enabled=sync_enabled,
        )
        session.add(row)
        return _detach(session, row)


def get_account(db: Database, account_id: str) -> Optional[EmailAccount]:
    """Return the account row, or None."""
    with db.session() as session:
        return _detach(session, session.get(EmailAccount, account_id))


def list_accounts(db: Database, organization_id: str) -> list[EmailAccount]:
    """All accounts of a tenant, in creation order."""
    with db.session() as session:
        q = (
            select(EmailAccount)
            .where(EmailAccount.organization_id == organization_id)
            .order_by(EmailAccount.created_at, EmailAccount.id)
        )
        rows = list(session.scalars(q).all())
        for row in rows:
            session.expunge(row)
        return rows


def list_sync_candidates(
    db: Database, organization_id: str, account_id: Optional[str] = None
) -> list[EmailAccount]:
    """Active, sync-enabled accounts of a tenant (optionally one account), in a stable order."""
    with db.session() as session:
        q = (
            select(EmailAccount)
            .where(EmailAccount.organization_id == organization_id)
            .where(EmailAccount.is_active == True)  # noqa: E712
            .where(EmailAccount.sync_enabled == True)  # noqa: E712
        )
        if account_id:
            q = q.where(EmailAccount.id == account_id)
        q = q.order_by(EmailAccount.created_at, EmailAccount.id)
        rows = list(session.scalars(q).all())
        for row in rows:
            session.expunge(row)
        return rows


def first_account_email(db: Database, organization_id: str) -> Optional[str]:
    """Address of the tenant's first connected mailbox, or None."""
    with db.session() as session:
        q = (
            select(EmailAccount.email)
            .where(EmailAccount.organization_id == organization_id)
            .order_by(EmailAccount.created_at, EmailAccount.id)
        )
        return session.scalars(q).first()


def _update(db: Database, account_id: str, **values) -> bool:
    with db.session() as session:
        row = session.get(EmailAccount, account_id)
        if row is None:
            return False
        for key, value in values.items():
            setattr(row, key, value)
        return True


def deactivate(db: Database, account_id: str, error_message: str) -> bool:
    """Mark the account inactive with the reason. Returns True if a row was updated."""
    return _update(db, account_id, is_active=False, error_message=error_message)


def record_sync_success(db: Database, account_id: str, sync_cursor: Optional[str]) -> bool:
    """Advance the cursor, stamp last_sync_at and clear the error."""
    return _update(
        db,
        account_id,
        last_sync_at=datetime.now(timezone.utc),
        sync_cursor=sync_cursor,
        error_message=None,
    )


def record_sync_error(db: Database, account_id: str, error_message: str) -> bool:
    """Record a transient failure. is_active is left as is."""
    return _update(db, account_id, error_message=error_message)


def set_sync_enabled(db: Database, account_id: str, enabled: bool) -> bool:
    """Pause or resume syncing for an account."""
    return _update(db, account_id, sync_enabled=enabled)
