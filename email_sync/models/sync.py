"""Sync options, per-account results, status snapshot and thread outcomes."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from email_sync.config import SYNC_MAX_THREADS
from email_sync.mail_provider.gmail_models import GmailThread


class SyncOptions(BaseModel):
    """Per-call sync options."""

    max_threads: int = Field(SYNC_MAX_THREADS, gt=0)
    full_sync: bool = False
    account_id: Optional[str] = None  # tenant-wide runs only: narrow to one account


class SyncResult(BaseModel):
    """Outcome of one account sync (not persisted)."""

    success: bool
    account_id: str
    email: str
    threads_processed: int = 0
    messages_processed: int = 0
    new_threads: int = 0
    updated_threads: int = 0
    error: Optional[str] = None

    @classmethod
    def failed(cls, account_id: str, email: str, error: str) -> "SyncResult":
        return cls(success=False, account_id=account_id, email=email, error=error)


class AccountSyncStatus(BaseModel):
    id: str
    email: str
    provider: str
    is_active: bool
    sync_enabled: bool
    last_sync_at: Optional[datetime] = None
    error_message: Optional[str] = None
    thread_count: int = 0


class SyncStatus(BaseModel):
    """Tenant-wide sync health snapshot."""

    accounts: list[AccountSyncStatus]
    total_threads: int
    unread_threads: int


# Remote fetch: a thread can vanish between listing and fetch


class ThreadFound(BaseModel):
    thread: GmailThread


class ThreadNotFound(BaseModel):
    provider_thread_id: str
    reason: str


ThreadFetchResult = Union[ThreadFound, ThreadNotFound]


# Reconciliation outcome for one thread


class ThreadReconciled(BaseModel):
    thread_id: str
    is_new: bool
    messages_count: int  # messages created by this call


class ThreadSkipped(BaseModel):
    provider_thread_id: str
    reason: str


ThreadOutcome = Union[ThreadReconciled, ThreadSkipped]
