"""Tests for inbox listing, thread detail and manual client linking."""

import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from mailbox_fixtures import new_database

from email_sync import inbox
from email_sync.db.repositories import account_repo, client_repo, message_repo, thread_repo
from email_sync.errors import ClientNotFoundError, ThreadNotFoundError

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestInbox(unittest.TestCase):
    def setUp(self):
        self.db = new_database()
        self.account = account_repo.create_account(self.db, "org-1", "studio@biz.com")
        self.client = client_repo.create_client(self.db, "org-1", "bride@x.com", full_name="Bride")
        self.ids = {}
        self._thread("wedding", "Wedding package", ["bride@x.com", "studio@biz.com"], hours=3, client_id=self.client.id)
        self._thread("unread", "Portrait quote", ["dad@y.com"], hours=2, is_read=False)
        self._thread("starred", "Album proof", ["print@lab.com"], hours=1, is_starred=True)
        self._thread("archived", "Old invoice", ["acct@z.com"], hours=0, is_archived=True, is_read=False)
        other = account_repo.create_account(self.db, "org-2", "else@biz.com")
        thread_repo.upsert_thread(
            self.db, "org-2", other.id, "foreign", subject="Wedding elsewhere", snippet="",
            participant_emails=[], client_id=None, is_read=True, is_starred=False,
            is_archived=False, last_message_at=BASE_TIME,
        )

    def tearDown(self):
        self.db.close()

    def _thread(self, key, subject, participants, hours, client_id=None, is_read=True, is_starred=False, is_archived=False):
        thread_id, _ = thread_repo.upsert_thread(
            self.db, "org-1", self.account.id, f"p-{key}",
            subject=subject, snippet=f"{key} snippet", participant_emails=participants,
            client_id=client_id, is_read=is_read, is_starred=is_starred, is_archived=is_archived,
            last_message_at=BASE_TIME + timedelta(hours=hours),
        )
        self.ids[key] = thread_id
        return thread_id

    def _message(self, key, provider_message_id, minutes, direction="INBOUND"):
        message_repo.upsert_message(
            self.db, self.ids[key], provider_message_id,
            from_email="bride@x.com", from_name="Bride", to_emails=["studio@biz.com"], to_names=[""],
            cc_emails=[], subject="Wedding package", body_html=None, body_text=f"body {provider_message_id}",
            direction=direction, is_read=True, has_attachments=False, in_reply_to=None, references=[],
            sent_at=BASE_TIME + timedelta(minutes=minutes),
        )

    def _keys(self, page):
        by_id = {v: k for k, v in self.ids.items()}
        return [by_id[t.id] for t in page.threads]

    def test_default_listing_excludes_archived_newest_first(self):
        page = inbox.list_threads(self.db, "org-1")
        self.assertEqual(self._keys(page), ["wedding", "unread", "starred"])
        self.assertEqual(page.total, 3)
        self.assertEqual(page.unread_count, 1)

    def test_filters(self):
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", "unread")), ["unread"])
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", "starred")), ["starred"])
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", "archived")), ["archived"])
        with self.assertRaises(ValueError):
            inbox.list_threads(self.db, "org-1", "spam")

    def test_search_subject_snippet_and_participant(self):
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", search="WEDDING")), ["wedding"])
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", search="album")), ["starred"])
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", search="unread snip")), ["unread"])
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", search="dad@y.com")), ["unread"])

    def test_search_wildcards_are_literal(self):
        self._thread("discount", "50% off prints", ["promo_team@lab.com"], hours=4)
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", search="50%")), ["discount"])
        self.assertEqual(inbox.list_threads(self.db, "org-1", search="%").total, 1)
        self.assertEqual(inbox.list_threads(self.db, "org-1", search="wedd_ng").total, 0)
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", search="promo_team@lab.com")), ["discount"])
        self.assertEqual(inbox.list_threads(self.db, "org-1", search="promoxteam@lab.com").total, 0)

    def test_client_filter_and_pagination(self):
        self.assertEqual(self._keys(inbox.list_threads(self.db, "org-1", client_id=self.client.id)), ["wedding"])
        page = inbox.list_threads(self.db, "org-1", limit=2, offset=1)
        self.assertEqual(self._keys(page), ["unread", "starred"])
        self.assertEqual(page.total, 3)

    def test_list_item_carries_latest_message_and_count(self):
        self._message("wedding", "m1", 0)
        self._message("wedding", "m2", 30, direction="OUTBOUND")
        page = inbox.list_threads(self.db, "org-1", search="wedding")
        (item,) = page.threads
        self.assertEqual(item.message_count, 2)
        self.assertEqual(item.latest_message.direction, "OUTBOUND")
        other = inbox.list_threads(self.db, "org-1", "starred").threads[0]
        self.assertEqual(other.message_count, 0)
        self.assertIsNone(other.latest_message)

    def test_get_thread_messages_oldest_first(self):
        self._message("wedding", "late", 45)
        self._message("wedding", "early", 5)
        detail = inbox.get_thread(self.db, "org-1", self.ids["wedding"])
        self.assertEqual(detail.subject, "Wedding package")
        self.assertEqual([m.body_text for m in detail.messages], ["body early", "body late"])
        self.assertEqual(detail.client_id, self.client.id)

    def test_get_thread_is_tenant_scoped(self):
        with self.assertRaises(ThreadNotFoundError):
            inbox.get_thread(self.db, "org-2", self.ids["wedding"])
        with self.assertRaises(ThreadNotFoundError):
            inbox.get_thread(self.db, "org-1", "missing")

    def test_link_and_unlink(self):
        inbox.link_thread_to_client(self.db, "org-1", self.ids["unread"], self.client.id)
        self.assertEqual(inbox.get_thread(self.db, "org-1", self.ids["unread"]).client_id, self.client.id)
        inbox.link_thread_to_client(self.db, "org-1", self.ids["unread"], None)
        self.assertIsNone(inbox.get_thread(self.db, "org-1", self.ids["unread"]).client_id)

    def test_link_errors(self):
        with self.assertRaises(ClientNotFoundError):
            inbox.link_thread_to_client(self.db, "org-1", self.ids["unread"], "no-such-client")
        foreign_client = client_repo.create_client(self.db, "org-2", "x@x.com")
        with self.assertRaises(ClientNotFoundError):
            inbox.link_thread_to_client(self.db, "org-1", self.ids["unread"], foreign_client.id)
        with self.assertRaises(ThreadNotFoundError):
            inbox.link_thread_to_client(self.db, "org-1", "missing", self.client.id)


if __name__ == "__main__":
    unittest.main()
