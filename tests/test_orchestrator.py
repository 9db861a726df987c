"""Tests for per-account sync: strategies, cursor handling, failure modes, lock."""

import asyncio
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from mailbox_fixtures import gmail_message, history_added, inbox_threads, mailbox, new_database

from email_sync.db.repositories import account_repo, thread_repo
from email_sync.errors import (
    AccountNotFoundError,
    AuthenticationError,
    ProviderError,
    SyncInProgressError,
    SyncTimeoutError,
)
from email_sync.mail_provider import GmailMockProvider, HistoryList
from email_sync.models.sync import SyncOptions
from email_sync.sync.orchestrator import AccountSyncer, changed_thread_ids


def _calls(provider, name):
    return [c for c in provider.calls if c[0] == name]


class TestAccountSync(unittest.TestCase):
    def setUp(self):
        self.db = new_database()
        self.account = account_repo.create_account(self.db, "org-1", "studio@biz.com")
        self.box = mailbox()
        self.provider = GmailMockProvider({self.account.id: self.box})
        self.syncer = AccountSyncer(self.db, self.provider)

    def tearDown(self):
        self.db.close()

    def _sync(self, **options):
        return asyncio.run(self.syncer.sync_account(self.account.id, SyncOptions(**options)))

    def _account(self):
        return account_repo.get_account(self.db, self.account.id)

    def test_empty_mailbox_full_sync_succeeds_and_advances_cursor(self):
        result = self._sync()
        self.assertTrue(result.success)
        self.assertEqual(
            (result.threads_processed, result.messages_processed, result.new_threads, result.updated_threads),
            (0, 0, 0, 0),
        )
        account = self._account()
        self.assertIsNotNone(account.last_sync_at)
        self.assertEqual(account.sync_cursor, "500")
        self.assertIsNone(account.error_message)

    def test_first_sync_is_full_and_counts(self):
        self.box["threads"] = inbox_threads(3)
        result = self._sync()
        self.assertEqual(result.threads_processed, 3)
        self.assertEqual(result.new_threads, 3)
        self.assertEqual(result.messages_processed, 3)
        self.assertEqual(_calls(self.provider, "fetch_history"), [])
        self.assertEqual(self._account().sync_cursor, "500")

    def test_full_sync_caps_at_max_threads(self):
        self.box["threads"] = inbox_threads(8)
        result = self._sync(max_threads=5)
        self.assertEqual(result.threads_processed, 5)

    def test_incremental_sync_processes_changed_threads_only(self):
        self.box["threads"] = inbox_threads(3)
        self._sync()
        self.box["threads"][1]["messages"].append(
            gmail_message("t1-m2", "t1", "someone@example.com", internal_date=1_800_000_000_000)
        )
        self.box["history"] = [
            history_added("600", ("t1-m2", "t1")),
            history_added("601", ("t1-m3", "t1")),
        ]
        self.box["history_id"] = "601"
        self.provider.calls.clear()

        result = self._sync()
        self.assertEqual(_calls(self.provider, "fetch_history"), [("fetch_history", self.account.id, "500")])
        self.assertEqual(_calls(self.provider, "list_thread_summaries"), [])
        self.assertEqual(result.threads_processed, 1)
        self.assertEqual(result.updated_threads, 1)
        self.assertEqual(result.messages_processed, 1)
        self.assertEqual(self._account().sync_cursor, "601")

    def test_incremental_sync_truncates_to_max_threads(self):
        self.box["threads"] = inbox_threads(4)
        self._sync()
        self.box["history"] = [history_added("700", *[(f"x{i}", f"t{i}") for i in range(4)])]
        result = self._sync(max_threads=2)
        self.assertEqual(result.threads_processed, 2)

    def test_expired_cursor_falls_back_to_bounded_listing(self):
        self.box["threads"] = inbox_threads(30)
        account_repo.record_sync_success(self.db, self.account.id, "100")
        self.box["history"] = None

        result = self._sync()
        self.assertTrue(result.success)
        self.assertEqual(result.threads_processed, 20)
        listing = _calls(self.provider, "list_thread_summaries")
        self.assertEqual(listing, [("list_thread_summaries", self.account.id, "20")])

    def test_fallback_respects_smaller_max_threads(self):
        self.box["threads"] = inbox_threads(10)
        account_repo.record_sync_success(self.db, self.account.id, "100")
        self.box["history"] = []
        self.assertEqual(self._sync(max_threads=4).threads_processed, 4)

    def test_full_sync_flag_ignores_cursor(self):
        self.box["threads"] = inbox_threads(2)
        account_repo.record_sync_success(self.db, self.account.id, "100")
        self.box["history"] = [history_added("200", ("t0-m1", "t0"))]
        result = self._sync(full_sync=True)
        self.assertEqual(result.threads_processed, 2)
        self.assertEqual(_calls(self.provider, "fetch_history"), [])

    def test_missing_token_deactivates_account(self):
        self.box["access_token"] = None
        with self.assertRaises(AuthenticationError):
            self._sync()
        account = self._account()
        self.assertFalse(account.is_active)
        self.assertIn("reconnect", account.error_message)

    def test_transient_failure_recorded_and_reraised(self):
        class FlakyProvider(GmailMockProvider):
            async def fetch_thread(self, account_id, thread_id):
                raise ConnectionError("connection reset by peer")

        self.box["threads"] = inbox_threads(1)
        syncer = AccountSyncer(self.db, FlakyProvider({self.account.id: self.box}))
        with self.assertRaises(ConnectionError):
            asyncio.run(syncer.sync_account(self.account.id))
        account = self._account()
        self.assertTrue(account.is_active)
        self.assertEqual(account.error_message, "connection reset by peer")
        self.assertIsNone(account.sync_cursor)
        self.assertIsNone(account.last_sync_at)

    def test_missing_profile_is_transient(self):
        self.box["history_id"] = None
        with self.assertRaises(ProviderError):
            self._sync()
        account = self._account()
        self.assertTrue(account.is_active)
        self.assertEqual(account.error_message, "Failed to get mailbox profile")

    def test_success_clears_previous_error(self):
        account_repo.record_sync_error(self.db, self.account.id, "boom")
        self._sync()
        self.assertIsNone(self._account().error_message)

    def test_label_change_without_thread_id_does_not_block_history(self):
        self.box["threads"] = inbox_threads(2)
        self._sync()
        self.box["history"] = [
            history_added("600", ("t1-m9", "t1")),
            {"id": "601", "labelsRemoved": [{"message": {"id": "t0-m1"}, "labelIds": ["UNREAD"]}]},
        ]
        self.box["history_id"] = "601"

        result = self._sync()
        self.assertTrue(result.success)
        self.assertEqual(result.threads_processed, 1)
        account = self._account()
        self.assertEqual(account.sync_cursor, "601")
        self.assertIsNone(account.error_message)

    def test_deadline_records_timeout_and_keeps_cursor(self):
        class SlowProvider(GmailMockProvider):
            async def fetch_thread(self, account_id, thread_id):
                await asyncio.sleep(5)
                return await super().fetch_thread(account_id, thread_id)

        self.box["threads"] = inbox_threads(1)
        account_repo.record_sync_success(self.db, self.account.id, "100")
        account_repo.record_sync_error(self.db, self.account.id, "previous")
        self.box["history"] = [history_added("200", ("t0-m1", "t0"))]
        syncer = AccountSyncer(self.db, SlowProvider({self.account.id: self.box}))

        with self.assertRaises(SyncTimeoutError):
            asyncio.run(syncer.sync_account(self.account.id, timeout_seconds=0.2))
        account = self._account()
        self.assertEqual(account.sync_cursor, "100")
        self.assertEqual(account.error_message, "Sync timed out after 0.2s")
        self.assertTrue(account.is_active)
        self.assertFalse(syncer.locks.is_held(self.account.id))

    def test_unknown_account(self):
        with self.assertRaises(AccountNotFoundError):
            asyncio.run(self.syncer.sync_account("nope"))

    def test_overlapping_sync_for_same_account_rejected(self):
        async def run():
            self.assertTrue(await self.syncer.locks.acquire(self.account.id))
            with self.assertRaises(SyncInProgressError):
                await self.syncer.sync_account(self.account.id)
            await self.syncer.locks.release(self.account.id)
            return await self.syncer.sync_account(self.account.id)

        self.assertTrue(asyncio.run(run()).success)
        self.assertFalse(self.syncer.locks.is_held(self.account.id))

    def test_threads_stay_unique_across_repeated_syncs(self):
        self.box["threads"] = inbox_threads(3)
        self._sync()
        self._sync(full_sync=True)
        self.assertEqual(thread_repo.count_threads(self.db, "org-1"), 3)


class TestChangedThreadIds(unittest.TestCase):
    def test_added_and_deleted_deduplicated_label_changes_ignored(self):
        history = HistoryList.model_validate(
            {
                "history": [
                    {"id": "1", "messagesAdded": [{"message": {"id": "a", "threadId": "t1"}}]},
                    {
                        "id": "2",
                        "messagesDeleted": [{"message": {"id": "b", "threadId": "t2"}}],
                        "labelsRemoved": [{"message": {"id": "c"}, "labelIds": ["UNREAD"]}],
                        "labelsAdded": [{"message": {"id": "e", "threadId": "t4"}, "labelIds": ["STARRED"]}],
                    },
                    {"id": "3", "messagesAdded": [{"message": {"id": "d", "threadId": "t1"}}]},
                ]
            }
        )
        self.assertEqual(changed_thread_ids(history), ["t1", "t2"])


if __name__ == "__main__":
    unittest.main()
