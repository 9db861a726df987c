"""Mock Gmail provider: mailboxes from a JSON fixture (or dicts), no network."""

import json
from pathlib import Path
from typing import Any

from email_sync.mail_provider.gmail_models import (
    GmailMessage,
    GmailThread,
    HistoryList,
    HistoryRecord,
    MailboxProfile,
    MessageBody,
    MessageHeader,
    ThreadList,
    ThreadSummary,
)
from email_sync.mail_provider.mapping import extract_gmail_body, parse_gmail_headers
from email_sync.utils.logger import get_logger

logger = get_logger("email_sync.mail_provider")


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class GmailMockProvider:
    """In-memory mailboxes keyed by account id (or by an alias such as the mailbox address).

    Mailbox shape::

        {"access_token": "tok" | null,
         "history_id": "120",
         "threads": [{"id": "t1", "messages": [<Gmail message>, ...]}],
         "history": [<Gmail history record>, ...] | null}

    ``history: null`` behaves like an expired cursor. Every call is appended to ``calls``.
    """

    def __init__(self, mailboxes: dict[str, dict[str, Any]] | None = None):
        self._mailboxes: dict[str, dict[str, Any]] = mailboxes if mailboxes is not None else {}
        self._aliases: dict[str, str] = {}
        self.calls: list[tuple[str, ...]] = []
        logger.debug("mail_provider.init", mailbox_count=len(self._mailboxes))

    @classmethod
    def from_file(cls, path: Path) -> "GmailMockProvider":
        """Load {"mailboxes": {key: mailbox}} from a JSON file. Missing file -> no mailboxes."""
        if not path.exists():
            logger.warning("mail_provider.fixture_missing", path=str(path))
            return cls({})
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        mailboxes = data.get("mailboxes", data) if isinstance(data, dict) else {}
        logger.info("mail_provider.fixture_loaded", path=str(path), mailbox_count=len(mailboxes))
        return cls(mailboxes)

    def alias(self, account_id: str, mailbox_key: str) -> None:
        """Serve account_id from the mailbox stored under mailbox_key."""
        self._aliases[account_id] = mailbox_key

    def mailbox(self, account_id: str) -> dict[str, Any] | None:
        key = account_id if account_id in self._mailboxes else self._aliases.get(account_id)
        if key is None:
            return None
        return self._mailboxes.get(key)

    def _threads(self, account_id: str) -> list[dict[str, Any]]:
        box = self.mailbox(account_id)
        return list((box or {}).get("threads") or [])

    async def get_access_token(self, account_id: str) -> str | None:
        self.calls.append(("get_access_token", account_id))
        box = self.mailbox(account_id)
        if box is None:
            return None
        return box.get("access_token")

    async def list_thread_summaries(
        self, account_id: str, max_results: int, label_ids: list[str] | None = None
    ) -> ThreadList | None:
        self.calls.append(("list_thread_summaries", account_id, str(max_results)))
        if self.mailbox(account_id) is None:
            return None
        wanted = set(label_ids or [])
        threads = []
        for raw in self._threads(account_id):
            thread = GmailThread.model_validate(raw)
            labels = {label for m in thread.messages for label in m.labelIds}
            if wanted <= labels:
                threads.append(thread)
        threads.sort(key=lambda t: max((_as_int(m.internalDate) for m in t.messages), default=0), reverse=True)
        summaries = [
            ThreadSummary(id=t.id, snippet=t.messages[-1].snippet if t.messages else "")
            for t in threads[:max_results]
        ]
        logger.debug("mail_provider.list_threads", account_id=account_id, count=len(summaries))
        return ThreadList(threads=summaries)

    async def fetch_thread(self, account_id: str, thread_id: str) -> GmailThread | None:
        self.calls.append(("fetch_thread", account_id, thread_id))
        for raw in self._threads(account_id):
            if raw.get("id") == thread_id:
                return GmailThread.model_validate(raw)
        logger.debug("mail_provider.fetch_thread.miss", account_id=account_id, thread_id=thread_id)
        return None

    async def fetch_profile(self, account_id: str) -> MailboxProfile | None:
        self.calls.append(("fetch_profile", account_id))
        box = self.mailbox(account_id)
        if box is None or box.get("history_id") is None:
            return None
        return MailboxProfile(emailAddress=box.get("email"), historyId=str(box["history_id"]))

    async def fetch_history(self, account_id: str, since_cursor: str) -> HistoryList | None:
        self.calls.append(("fetch_history", account_id, since_cursor))
        box = self.mailbox(account_id)
        if box is None or box.get("history") is None:
            return None
        since = _as_int(since_cursor, default=-1)
        records = [HistoryRecord.model_validate(r) for r in box["history"]]
        if since >= 0:
            records = [r for r in records if _as_int(r.id) > since]
        return HistoryList(history=records, historyId=str(box.get("history_id") or since_cursor))

    def parse_headers(self, headers: list[MessageHeader]) -> dict[str, str]:
        return parse_gmail_headers(headers)

    def extract_body(self, message: GmailMessage) -> MessageBody:
        return extract_gmail_body(message)
