"""Read models for inbox listing and thread detail."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class MessageSummary(BaseModel):
    """Latest message of a thread, for list rows."""

    id: str
    from_email: str
    from_name: Optional[str] = None
    direction: str
    has_attachments: bool
    sent_at: datetime


class ThreadListItem(BaseModel):
    id: str
    subject: str
    snippet: str
    participant_emails: list[str]
    is_read: bool
    is_starred: bool
    is_archived: bool
    last_message_at: datetime
    client_id: Optional[str] = None
    message_count: int = 0
    latest_message: Optional[MessageSummary] = None


class ThreadPage(BaseModel):
    threads: list[ThreadListItem]
    total: int
    unread_count: int


class MessageView(BaseModel):
    id: str
    from_email: str
    from_name: Optional[str] = None
    to_emails: list[str]
    cc_emails: list[str]
    subject: str
    body_html: Optional[str] = None
    body_text: Optional[str] = None
    direction: str
    is_read: bool
    has_attachments: bool
    sent_at: datetime


class ThreadDetail(BaseModel):
    id: str
    subject: str
    participant_emails: list[str]
    is_read: bool
    is_starred: bool
    is_archived: bool
    client_id: Optional[str] = None
    messages: list[MessageView]
