"""Mail provider protocol (Gmail-like read interface)."""

from typing import Protocol

from email_sync.mail_provider.gmail_models import (
    GmailMessage,
    GmailThread,
    HistoryList,
    MailboxProfile,
    MessageBody,
    MessageHeader,
    ThreadList,
)


class MailProvider(Protocol):
    """Read-only mailbox capabilities the synchronizer consumes. Token refresh lives behind get_access_token."""

    async def get_access_token(self, account_id: str) -> str | None:
        """Return a valid access token, or None if the account can no longer be refreshed."""
        ...

    async def list_thread_summaries(
        self, account_id: str, max_results: int, label_ids: list[str] | None = None
    ) -> ThreadList | None:
        """List recent threads carrying all label_ids, newest first, at most max_results."""
        ...

    async def fetch_thread(self, account_id: str, thread_id: str) -> GmailThread | None:
        """Fetch a thread with all its messages; None if it no longer exists."""
        ...

    async def fetch_profile(self, account_id: str) -> MailboxProfile | None:
        """Fetch the mailbox profile (latest history id)."""
        ...

    async def fetch_history(self, account_id: str, since_cursor: str) -> HistoryList | None:
        """Changes since since_cursor; None when the cursor has expired."""
        ...

    def parse_headers(self, headers: list[MessageHeader]) -> dict[str, str]:
        """Header list -> {lowercase name: value}."""
        ...

    def extract_body(self, message: GmailMessage) -> MessageBody:
        """Decoded text/plain and text/html bodies."""
        ...
