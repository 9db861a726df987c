"""Read-only sync health snapshot for a tenant."""

from email_sync.db import Database
from email_sync.db.repositories import account_repo, thread_repo
from email_sync.models.sync import AccountSyncStatus, SyncStatus


def get_sync_status(db: Database, organization_id: str) -> SyncStatus:
    """Per-account state and thread counts plus tenant totals. No writes, no provider calls."""
    accounts = account_repo.list_accounts(db, organization_id)
    per_account = thread_repo.count_by_account(db, organization_id)
    return SyncStatus(
        accounts=[
            AccountSyncStatus(
                id=a.id,
                email=a.email,
                provider=a.provider,
                is_active=a.is_active,
                sync_enabled=a.sync_enabled,
                last_sync_at=a.last_sync_at,
                error_message=a.error_message,
                thread_count=per_account.get(a.id, 0),
            )
            for a in accounts
        ],
        total_threads=thread_repo.count_threads(db, organization_id),
        unread_threads=thread_repo.count_threads(db, organization_id, unread_only=True),
    )
