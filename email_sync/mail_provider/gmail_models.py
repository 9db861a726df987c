"""Pydantic models for the Gmail API payload shapes (subset we need)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

LABEL_INBOX = "INBOX"
LABEL_UNREAD = "UNREAD"
LABEL_STARRED = "STARRED"


class _GmailModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class MessageHeader(_GmailModel):
    """Gmail payload header."""

    name: str
    value: str = ""


class MessagePartBody(_GmailModel):
    """Gmail part body. data is base64url; attachmentId is set for attachments."""

    attachmentId: Optional[str] = None
    data: Optional[str] = None
    size: int = 0


class MessagePart(_GmailModel):
    """Gmail MIME part; the payload itself is the root part."""

    partId: Optional[str] = None
    mimeType: str = ""
    filename: Optional[str] = None
    headers: list[MessageHeader] = []
    body: MessagePartBody = MessagePartBody()
    parts: list[MessagePart] = []


class GmailMessage(_GmailModel):
    """Gmail message resource (format=full)."""

    id: str
    threadId: Optional[str] = None
    labelIds: list[str] = []
    snippet: str = ""
    payload: MessagePart = MessagePart()
    internalDate: str = "0"  # epoch milliseconds

    def has_label(self, label: str) -> bool:
        return label in self.labelIds


class GmailThread(_GmailModel):
    """Gmail thread resource with its messages, oldest first."""

    id: str
    historyId: Optional[str] = None
    messages: list[GmailMessage] = []


class ThreadSummary(_GmailModel):
    """Entry of a threads.list response."""

    id: str
    snippet: str = ""
    historyId: Optional[str] = None


class ThreadList(_GmailModel):
    threads: list[ThreadSummary] = []
    nextPageToken: Optional[str] = None


class MailboxProfile(_GmailModel):
    """users.getProfile response; historyId is the latest cursor."""

    emailAddress: Optional[str] = None
    historyId: str


class MessageRef(_GmailModel):
    id: str
    threadId: str
    labelIds: list[str] = []


class HistoryMessageChange(_GmailModel):
    """messagesAdded / messagesDeleted entry."""

    message: MessageRef


class LabelChangeRef(_GmailModel):
    """Message named by a label change. Gmail may omit threadId here."""

    id: str
    threadId: Optional[str] = None
    labelIds: list[str] = []


class HistoryLabelChange(_GmailModel):
    """labelsAdded / labelsRemoved entry."""

    message: LabelChangeRef
    labelIds: list[str] = []


class HistoryRecord(_GmailModel):
    id: str
    messagesAdded: list[HistoryMessageChange] = []
    messagesDeleted: list[HistoryMessageChange] = []
    labelsAdded: list[HistoryLabelChange] = []
    labelsRemoved: list[HistoryLabelChange] = []


class HistoryList(_GmailModel):
    history: list[HistoryRecord] = []
    historyId: Optional[str] = None


class MessageBody(BaseModel):
    """Decoded bodies of one message; either may be missing."""

    text: Optional[str] = None
    html: Optional[str] = None
