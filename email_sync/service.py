"""Entry points for schedulers and API handlers."""

import asyncio
from typing import Optional

from email_sync import inbox
from email_sync.config import SYNC_ACCOUNT_TIMEOUT_SECONDS
from email_sync.db import Database
from email_sync.mail_provider.protocol import MailProvider
from email_sync.models.inbox import ThreadDetail, ThreadPage
from email_sync.models.sync import SyncOptions, SyncResult, SyncStatus
from email_sync.sync.coordinator import OrganizationSyncCoordinator
from email_sync.sync.orchestrator import AccountSyncer
from email_sync.sync.status import get_sync_status


class EmailSyncService:
    """Facade over one Database handle and one MailProvider.

    Keep a single instance per process: it owns the per-account lock registry.
    """

    def __init__(
        self,
        db: Database,
        provider: MailProvider,
        account_timeout_seconds: Optional[float] = SYNC_ACCOUNT_TIMEOUT_SECONDS,
    ):
        self.db = db
        self.provider = provider
        self.syncer = AccountSyncer(db, provider)
        self.coordinator = OrganizationSyncCoordinator(db, self.syncer, timeout_seconds=account_timeout_seconds)

    async def sync_organization_emails(
        self, organization_id: str, options: Optional[SyncOptions] = None
    ) -> list[SyncResult]:
        return await self.coordinator.sync_organization(organization_id, options)

    async def sync_email_account(self, account_id: str, options: Optional[SyncOptions] = None) -> SyncResult:
        """Sync one account; raises on failure."""
        return await self.syncer.sync_account(account_id, options)

    async def get_email_sync_status(self, organization_id: str) -> SyncStatus:
        return await asyncio.to_thread(get_sync_status, self.db, organization_id)

    async def list_threads(self, organization_id: str, **kwargs) -> ThreadPage:
        return await asyncio.to_thread(inbox.list_threads, self.db, organization_id, **kwargs)

    async def get_thread(self, organization_id: str, thread_id: str) -> ThreadDetail:
        return await asyncio.to_thread(inbox.get_thread, self.db, organization_id, thread_id)

    async def link_thread_to_client(self, organization_id: str, thread_id: str, client_id: Optional[str]) -> None:
        await asyncio.to_thread(inbox.link_thread_to_client, self.db, organization_id, thread_id, client_id)
