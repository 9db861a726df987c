"""Builders for Gmail-shaped payloads and mailboxes used by the sync tests."""

import sys
from pathlib import Path
from typing import Any, Optional

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from email_sync.db import Database
from email_sync.mail_provider.mapping import encode_body_data

MEMORY_DB_URL = "sqlite:///:memory:"


def new_database() -> Database:
    return Database(MEMORY_DB_URL).init()


def gmail_message(
    message_id: str,
    thread_id: str,
    sender: str,
    to: str = "",
    subject: Optional[str] = "Hello",
    labels: Optional[list[str]] = None,
    internal_date: int = 1_700_000_000_000,
    text: Optional[str] = None,
    html: Optional[str] = None,
    cc: Optional[str] = None,
    snippet: str = "",
    extra_headers: Optional[dict[str, str]] = None,
    parts: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    headers = [{"name": "From", "value": sender}]
    if to:
        headers.append({"name": "To", "value": to})
    if cc:
        headers.append({"name": "Cc", "value": cc})
    if subject is not None:
        headers.append({"name": "Subject", "value": subject})
    for name, value in (extra_headers or {}).items():
        headers.append({"name": name, "value": value})

    body_parts = list(parts or [])
    if text is not None:
        body_parts.insert(0, {"mimeType": "text/plain", "body": {"data": encode_body_data(text), "size": len(text)}})
    if html is not None:
        body_parts.append({"mimeType": "text/html", "body": {"data": encode_body_data(html), "size": len(html)}})

    return {
        "id": message_id,
        "threadId": thread_id,
        "labelIds": list(labels if labels is not None else ["INBOX"]),
        "snippet": snippet,
        "internalDate": str(internal_date),
        "payload": {"mimeType": "multipart/mixed", "headers": headers, "parts": body_parts},
    }


def gmail_thread(thread_id: str, *messages: dict[str, Any]) -> dict[str, Any]:
    return {"id": thread_id, "messages": list(messages)}


def mailbox(
    threads: Optional[list[dict[str, Any]]] = None,
    access_token: Optional[str] = "token",
    history_id: Optional[str] = "500",
    history: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """history=None means the provider reports an expired cursor."""
    return {
        "access_token": access_token,
        "history_id": history_id,
        "threads": list(threads or []),
        "history": history,
    }


def history_added(record_id: str, *refs: tuple[str, str]) -> dict[str, Any]:
    """History record adding (message_id, thread_id) pairs."""
    return {
        "id": record_id,
        "messagesAdded": [{"message": {"id": mid, "threadId": tid}} for mid, tid in refs],
    }


def inbox_threads(count: int, prefix: str = "t", sender: str = "someone@example.com") -> list[dict[str, Any]]:
    return [
        gmail_thread(
            f"{prefix}{i}",
            gmail_message(f"{prefix}{i}-m1", f"{prefix}{i}", sender, to="studio@biz.com", internal_date=1_700_000_000_000 + i),
        )
        for i in range(count)
    ]
