"""Mailbox synchronization: reconcilers, per-account syncer, tenant coordinator, status."""

from email_sync.sync.client_matcher import match_client
from email_sync.sync.coordinator import OrganizationSyncCoordinator
from email_sync.sync.orchestrator import AccountLocks, AccountSyncer
from email_sync.sync.reconciler import reconcile_message, reconcile_thread
from email_sync.sync.status import get_sync_status

__all__ = [
    "AccountLocks",
    "AccountSyncer",
    "OrganizationSyncCoordinator",
    "get_sync_status",
    "match_client",
    "reconcile_message",
    "reconcile_thread",
]
