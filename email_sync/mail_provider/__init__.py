"""Mail provider: Gmail-like read interface, payload models and mock implementation."""

from email_sync.mail_provider.gmail_models import (
    LABEL_INBOX,
    LABEL_STARRED,
    LABEL_UNREAD,
    GmailMessage,
    GmailThread,
    HistoryList,
    HistoryRecord,
    MailboxProfile,
    MessageBody,
    MessageHeader,
    MessagePart,
    MessagePartBody,
    ThreadList,
    ThreadSummary,
)
from email_sync.mail_provider.gmail_mock import GmailMockProvider
from email_sync.mail_provider.mapping import extract_gmail_body, parse_gmail_headers
from email_sync.mail_provider.protocol import MailProvider

__all__ = [
    "LABEL_INBOX",
    "LABEL_STARRED",
    "LABEL_UNREAD",
    "GmailMessage",
    "GmailThread",
    "HistoryList",
    "HistoryRecord",
    "MailboxProfile",
    "MessageBody",
    "MessageHeader",
    "MessagePart",
    "MessagePartBody",
    "ThreadList",
    "ThreadSummary",
    "MailProvider",
    "GmailMockProvider",
    "extract_gmail_body",
    "parse_gmail_headers",
]
