"""PhotoProOS email sync: incremental Gmail-style mailbox synchronization into a relational store."""

from email_sync.db import Database
from email_sync.models.sync import SyncOptions, SyncResult, SyncStatus
from email_sync.service import EmailSyncService

__all__ = [
    "Database",
    "EmailSyncService",
    "SyncOptions",
    "SyncResult",
    "SyncStatus",
]
