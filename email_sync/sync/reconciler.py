"""Thread and message reconciliation: remote Gmail thread -> local rows.

Thread-level flags come from the whole message set:

- ``is_read`` is False iff any message carries UNREAD
- ``is_starred`` is True iff any message carries STARRED
- ``is_archived`` is True iff no message carries INBOX

Message content is written once; a resync only refreshes ``is_read``.
"""

import asyncio
from datetime import datetime, timezone

from email_sync.db import Database
from email_sync.db.models.email_account import EmailAccount
from email_sync.db.models.email_message import DIRECTION_INBOUND, DIRECTION_OUTBOUND
from email_sync.db.repositories import message_repo, thread_repo
from email_sync.mail_provider.gmail_models import LABEL_INBOX, LABEL_STARRED, LABEL_UNREAD, GmailMessage
from email_sync.mail_provider.protocol import MailProvider
from email_sync.models.sync import (
    ThreadFetchResult,
    ThreadFound,
    ThreadNotFound,
    ThreadOutcome,
    ThreadReconciled,
    ThreadSkipped,
)
from email_sync.sync.addresses import (
    extract_display_name,
    extract_email_address,
    has_attachments,
    parse_address_list,
)
from email_sync.sync.client_matcher import match_client
from email_sync.utils.logger import get_logger

logger = get_logger("email_sync.reconciler")

NO_SUBJECT = "(No subject)"
SNIPPET_MAX_CHARS = 200


def internal_date_to_datetime(internal_date: str) -> datetime:
    """Gmail internalDate (epoch milliseconds) -> aware UTC datetime."""
    try:
        millis = int(internal_date)
    except (TypeError, ValueError):
        millis = 0
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def thread_participants(provider: MailProvider, messages: list[GmailMessage]) -> list[str]:
    """Lower-cased sender and recipient (to, cc) addresses across all messages, first-seen order."""
    seen: dict[str, None] = {}
    for msg in messages:
        headers = provider.parse_headers(msg.payload.headers)
        sender = extract_email_address(headers.get("from", ""))
        if sender:
            seen[sender.lower()] = None
        for field in ("to", "cc"):
            emails, _ = parse_address_list(headers.get(field))
            for email in emails:
                seen[email.lower()] = None
    return list(seen)


async def fetch_remote_thread(provider: MailProvider, account_id: str, provider_thread_id: str) -> ThreadFetchResult:
    thread = await provider.fetch_thread(account_id, provider_thread_id)
    if thread is None:
        return ThreadNotFound(provider_thread_id=provider_thread_id, reason="thread not found")
    if not thread.messages:
        return ThreadNotFound(provider_thread_id=provider_thread_id, reason="thread has no messages")
    return ThreadFound(thread=thread)


async def reconcile_thread(
    db: Database,
    provider: MailProvider,
    account: EmailAccount,
    provider_thread_id: str,
) -> ThreadOutcome:
    """Upsert one local thread and its messages from the remote thread.

    A thread that vanished or is empty is skipped, not an error.
    """
    fetched = await fetch_remote_thread(provider, account.id, provider_thread_id)
    if isinstance(fetched, ThreadNotFound):
        logger.info("sync.thread.skipped", provider_thread_id=provider_thread_id, reason=fetched.reason)
        return ThreadSkipped(provider_thread_id=provider_thread_id, reason=fetched.reason)

    messages = fetched.thread.messages
    first_message = messages[0]
    last_message = messages[-1]
    headers = provider.parse_headers(first_message.payload.headers)

    participants = thread_participants(provider, messages)
    client_id = await match_client(db, account.organization_id, participants, account_email=account.email)

    last_body = provider.extract_body(last_message)
    snippet = (last_body.text or "")[:SNIPPET_MAX_CHARS] or last_message.snippet or ""

    thread_id, created = await asyncio.to_thread(
        thread_repo.upsert_thread,
        db,
        account.organization_id,
        account.id,
        provider_thread_id,
        subject=headers.get("subject") or NO_SUBJECT,
        snippet=snippet,
        participant_emails=participants,
        client_id=client_id,
        is_read=not any(m.has_label(LABEL_UNREAD) for m in messages),
        is_starred=any(m.has_label(LABEL_STARRED) for m in messages),
        is_archived=not any(m.has_label(LABEL_INBOX) for m in messages),
        last_message_at=internal_date_to_datetime(last_message.internalDate),
    )

    messages_count = 0
    for message in messages:
        if await reconcile_message(db, provider, thread_id, message, account):
            messages_count += 1

    logger.debug(
        "sync.thread.reconciled",
        provider_thread_id=provider_thread_id,
        thread_id=thread_id,
        is_new=created,
        new_messages=messages_count,
    )
    return ThreadReconciled(thread_id=thread_id, is_new=created, messages_count=messages_count)


async def reconcile_message(
    db: Database,
    provider: MailProvider,
    thread_id: str,
    message: GmailMessage,
    account: EmailAccount,
) -> bool:
    """Persist one remote message. Returns True if it was newly created.

    Safe to repeat: an existing message only gets its read state refreshed.
    """
    headers = provider.parse_headers(message.payload.headers)
    body = provider.extract_body(message)

    from_header = headers.get("from", "")
    from_email = extract_email_address(from_header) or ""
    to_emails, to_names = parse_address_list(headers.get("to"))
    cc_emails, _ = parse_address_list(headers.get("cc"))
    direction = DIRECTION_OUTBOUND if from_email.lower() == account.email.lower() else DIRECTION_INBOUND
    references = (headers.get("references") or "").split()

    return await asyncio.to_thread(
        message_repo.upsert_message,
        db,
        thread_id,
        message.id,
        from_email=from_email,
        from_name=extract_display_name(from_header),
        to_emails=to_emails,
        to_names=to_names,
        cc_emails=cc_emails,
        subject=headers.get("subject") or NO_SUBJECT,
        body_html=body.html,
        body_text=body.text,
        direction=direction,
        is_read=not message.has_label(LABEL_UNREAD),
        has_attachments=has_attachments(message.payload),
        in_reply_to=headers.get("in-reply-to"),
        references=references,
        sent_at=internal_date_to_datetime(message.internalDate),
    )
