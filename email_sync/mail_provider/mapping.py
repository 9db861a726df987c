"""Gmail payload helpers: header map and body extraction."""

import base64
import binascii

from email_sync.mail_provider.gmail_models import GmailMessage, MessageBody, MessageHeader, MessagePart


def parse_gmail_headers(headers: list[MessageHeader]) -> dict[str, str]:
    """Lower-cased header name -> value. The first occurrence of a repeated header wins."""
    parsed: dict[str, str] = {}
    for h in headers:
        key = h.name.lower()
        if key not in parsed:
            parsed[key] = h.value
    return parsed


def decode_body_data(data: str | None) -> str | None:
    """Decode Gmail base64url body data (padding optional)."""
    if not data:
        return None
    padded = data + "=" * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        return None


def _walk_parts(part: MessagePart):
    yield part
    for child in part.parts:
        yield from _walk_parts(child)


def extract_gmail_body(message: GmailMessage) -> MessageBody:
    """First text/plain and first text/html body in the part tree. Attachments are skipped."""
    text = None
    html = None
    for part in _walk_parts(message.payload):
        if part.body.attachmentId or part.filename:
            continue
        mime = part.mimeType.lower()
        if mime == "text/plain" and text is None:
            text = decode_body_data(part.body.data)
        elif mime == "text/html" and html is None:
            html = decode_body_data(part.body.data)
    return MessageBody(text=text, html=html)


def encode_body_data(content: str) -> str:
    """Inverse of decode_body_data, used to build fixtures."""
    return base64.urlsafe_b64encode(content.encode("utf-8")).decode("ascii").rstrip("=")
