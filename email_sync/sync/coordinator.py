"""Tenant-wide sync: every active, sync-enabled account, one at a time, failures isolated."""

import asyncio
from typing import Optional

from email_sync.db import Database
from email_sync.db.repositories import account_repo
from email_sync.models.sync import SyncOptions, SyncResult
from email_sync.sync.orchestrator import AccountSyncer
from email_sync.utils.logger import get_logger, log_context
from email_sync.utils.tracing import get_tracer

logger = get_logger("email_sync.coordinator")


class OrganizationSyncCoordinator:
    """Runs AccountSyncer over a tenant's accounts sequentially.

    timeout_seconds bounds each account's sync; 0 or None means no deadline.
    """

    def __init__(self, db: Database, syncer: AccountSyncer, timeout_seconds: Optional[float] = None):
        self._db = db
        self._syncer = syncer
        self._timeout = timeout_seconds or None

    async def sync_organization(self, organization_id: str, options: Optional[SyncOptions] = None) -> list[SyncResult]:
        """One SyncResult per account, in processing order; a failing account never stops the loop."""
        options = options or SyncOptions()
        accounts = await asyncio.to_thread(
            account_repo.list_sync_candidates, self._db, organization_id, options.account_id
        )
        logger.info("sync.organization.start", organization_id=organization_id, accounts=len(accounts))

        results: list[SyncResult] = []
        tracer = get_tracer()
        with tracer.start_as_current_span(
            "email_sync.organization",
            attributes={"organization.id": organization_id, "accounts": len(accounts)},
        ) as span:
            for account in accounts:
                with log_context(organization_id=organization_id, account_id=account.id):
                    try:
                        results.append(
                            await self._syncer.sync_account(account.id, options, timeout_seconds=self._timeout)
                        )
                    except Exception as e:
                        logger.error("sync.organization.account_failed", email=account.email, error=str(e))
                        results.append(SyncResult.failed(account.id, account.email, str(e) or type(e).__name__))
            failed = sum(1 for r in results if not r.success)
            span.set_attribute("accounts.failed", failed)

        logger.info(
            "sync.organization.complete",
            organization_id=organization_id,
            succeeded=len(results) - failed,
            failed=failed,
        )
        return results
