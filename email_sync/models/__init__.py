"""Data models: sync options/results and inbox views."""

from email_sync.models.inbox import MessageSummary, MessageView, ThreadDetail, ThreadListItem, ThreadPage
from email_sync.models.sync import (
    AccountSyncStatus,
    SyncOptions,
    SyncResult,
    SyncStatus,
    ThreadFetchResult,
    ThreadFound,
    ThreadNotFound,
    ThreadOutcome,
    ThreadReconciled,
    ThreadSkipped,
)

__all__ = [
    "AccountSyncStatus",
    "SyncOptions",
    "SyncResult",
    "SyncStatus",
    "ThreadFetchResult",
    "ThreadFound",
    "ThreadNotFound",
    "ThreadOutcome",
    "ThreadReconciled",
    "ThreadSkipped",
    "MessageSummary",
    "MessageView",
    "ThreadDetail",
    "ThreadListItem",
    "ThreadPage",
]
