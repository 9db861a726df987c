"""Per-account sync: token check, full vs incremental strategy, cursor persistence."""

import asyncio
from typing import Optional

from email_sync.config import SYNC_FALLBACK_MAX_THREADS
from email_sync.db import Database
from email_sync.db.models.email_account import EmailAccount
from email_sync.db.repositories import account_repo
from email_sync.errors import (
    AccountNotFoundError,
    AuthenticationError,
    ProviderError,
    SyncInProgressError,
    SyncTimeoutError,
)
from email_sync.mail_provider.gmail_models import LABEL_INBOX, HistoryList
from email_sync.mail_provider.protocol import MailProvider
from email_sync.models.sync import SyncOptions, SyncResult, ThreadReconciled
from email_sync.sync.reconciler import reconcile_thread
from email_sync.utils.logger import get_logger
from email_sync.utils.tracing import get_tracer

logger = get_logger("email_sync.orchestrator")

TOKEN_FAILURE_MESSAGE = "Failed to refresh access token. Please reconnect your account."


class AccountLocks:
    """In-process advisory locks: at most one sync per account at a time."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._held: set[str] = set()

    async def acquire(self, account_id: str) -> bool:
        """Take the account's token. Returns False if it is already held."""
        async with self._lock:
            if account_id in self._held:
                return False
            self._held.add(account_id)
            return True

    async def release(self, account_id: str) -> None:
        async with self._lock:
            self._held.discard(account_id)

    def is_held(self, account_id: str) -> bool:
        return account_id in self._held


def changed_thread_ids(history: HistoryList) -> list[str]:
    """Thread ids touched by added or deleted messages, de-duplicated in first-seen order.

    Label-only changes (labelsAdded/labelsRemoved) are not mapped to threads, so a
    read/unread flip with no new message is picked up only by the next full sync.
    """
    seen: dict[str, None] = {}
    for record in history.history:
        for change in record.messagesAdded:
            seen[change.message.threadId] = None
        for change in record.messagesDeleted:
            seen[change.message.threadId] = None
    return list(seen)


class _Counts:
    def __init__(self):
        self.threads_processed = 0
        self.messages_processed = 0
        self.new_threads = 0
        self.updated_threads = 0

    def add(self, outcome) -> None:
        if not isinstance(outcome, ThreadReconciled):
            return
        self.threads_processed += 1
        self.messages_processed += outcome.messages_count
        if outcome.is_new:
            self.new_threads += 1
        else:
            self.updated_threads += 1


class AccountSyncer:
    """Synchronizes one mailbox at a time into the store."""

    def __init__(self, db: Database, provider: MailProvider, locks: Optional[AccountLocks] = None):
        self._db = db
        self._provider = provider
        self.locks = locks or AccountLocks()

    async def sync_account(
        self,
        account_id: str,
        options: Optional[SyncOptions] = None,
        timeout_seconds: Optional[float] = None,
    ) -> SyncResult:
        """Sync one account.

        Raises AccountNotFoundError, SyncInProgressError, AuthenticationError (the
        account is deactivated), SyncTimeoutError or the transient error that
        interrupted the sync (recorded in the account's error_message).

        timeout_seconds bounds the provider and thread work only. The account's
        success or error row is written after that work has finished or been
        cancelled, so a late write can never overwrite the outcome.
        """
        options = options or SyncOptions()
        account = await asyncio.to_thread(account_repo.get_account, self._db, account_id)
        if account is None:
            raise AccountNotFoundError(f"Account not found: {account_id}")

        if not await self.locks.acquire(account_id):
            logger.warning("sync.account.in_progress", account_id=account_id)
            raise SyncInProgressError(f"Sync already running for account {account.email}")
        try:
            tracer = get_tracer()
            with tracer.start_as_current_span(
                "email_sync.account",
                attributes={"account.id": account_id, "sync.full": options.full_sync},
            ) as span:
                result = await self._sync_locked(account, options, timeout_seconds or None)
                span.set_attribute("sync.threads_processed", result.threads_processed)
                span.set_attribute("sync.messages_processed", result.messages_processed)
                return result
        finally:
            await self.locks.release(account_id)

    async def _sync_locked(
        self, account: EmailAccount, options: SyncOptions, timeout_seconds: Optional[float]
    ) -> SyncResult:
        log = logger.bind(account_id=account.id, organization_id=account.organization_id)
        log.info("sync.account.start", full_sync=options.full_sync, max_threads=options.max_threads)

        try:
            access_token = await self._provider.get_access_token(account.id)
        except Exception as e:
            await self._record_error(account.id, str(e) or "Sync failed")
            log.exception("sync.account.token_error")
            raise
        if not access_token:
            await asyncio.to_thread(account_repo.deactivate, self._db, account.id, TOKEN_FAILURE_MESSAGE)
            log.error("sync.account.deactivated", reason="no_access_token")
            raise AuthenticationError("Failed to get access token")

        counts = _Counts()
        pull = self._pull(account, options, counts, log)
        try:
            if timeout_seconds is None:
                cursor, strategy = await pull
            else:
                cursor, strategy = await asyncio.wait_for(pull, timeout=timeout_seconds)
        except asyncio.TimeoutError:
            message = f"Sync timed out after {timeout_seconds:g}s"
            await self._record_error(account.id, message)
            log.error("sync.account.timeout", threads_processed=counts.threads_processed)
            raise SyncTimeoutError(message) from None
        except Exception as e:
            await self._record_error(account.id, str(e) or "Sync failed")
            log.exception("sync.account.error", threads_processed=counts.threads_processed)
            raise

        try:
            await asyncio.to_thread(account_repo.record_sync_success, self._db, account.id, cursor)
        except Exception as e:
            await self._record_error(account.id, str(e) or "Sync failed")
            log.exception("sync.account.error", threads_processed=counts.threads_processed)
            raise

        log.info(
            "sync.account.complete",
            strategy=strategy,
            cursor=cursor,
            threads_processed=counts.threads_processed,
            messages_processed=counts.messages_processed,
            new_threads=counts.new_threads,
            updated_threads=counts.updated_threads,
        )
        return SyncResult(
            success=True,
            account_id=account.id,
            email=account.email,
            threads_processed=counts.threads_processed,
            messages_processed=counts.messages_processed,
            new_threads=counts.new_threads,
            updated_threads=counts.updated_threads,
        )

    async def _pull(self, account: EmailAccount, options: SyncOptions, counts: _Counts, log) -> tuple[str, str]:
        """Choose the strategy and reconcile the selected threads. Returns (new cursor, strategy)."""
        profile = await self._provider.fetch_profile(account.id)
        if profile is None:
            raise ProviderError("Failed to get mailbox profile")

        if options.full_sync or not account.sync_cursor:
            strategy = "full"
            thread_ids = await self._list_inbox_thread_ids(account.id, options.max_threads)
        else:
            strategy = "incremental"
            history = await self._provider.fetch_history(account.id, account.sync_cursor)
            if history is None or not history.history:
                strategy = "fallback"
                log.info("sync.account.history_unavailable", cursor=account.sync_cursor)
                thread_ids = await self._list_inbox_thread_ids(
                    account.id, min(options.max_threads, SYNC_FALLBACK_MAX_THREADS)
                )
            else:
                changed = changed_thread_ids(history)
                thread_ids = changed[: options.max_threads]
                if len(changed) > len(thread_ids):
                    log.warning("sync.account.history_truncated", changed=len(changed), processed=len(thread_ids))

        for provider_thread_id in thread_ids:
            counts.add(await reconcile_thread(self._db, self._provider, account, provider_thread_id))
        return profile.historyId, strategy

    async def _record_error(self, account_id: str, message: str) -> None:
        await asyncio.to_thread(account_repo.record_sync_error, self._db, account_id, message)

    async def _list_inbox_thread_ids(self, account_id: str, max_results: int) -> list[str]:
        listing = await self._provider.list_thread_summaries(account_id, max_results, [LABEL_INBOX])
        if listing is None:
            return []
        return [summary.id for summary in listing.threads[:max_results]]
