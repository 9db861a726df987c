"""Header address parsing and attachment detection (pure functions)."""

import re
from typing import Optional

from email_sync.mail_provider.gmail_models import MessagePart

_ANGLE_ADDRESS = re.compile(r"<([^>]+)>")
_DISPLAY_NAME = re.compile(r"^([^<]+)<")
_QUOTES = re.compile(r"^[\"']|[\"']$")


def extract_email_address(value: str) -> Optional[str]:
    """'Name <a@b.com>' -> 'a@b.com'; a bare address is returned stripped; otherwise None."""
    match = _ANGLE_ADDRESS.search(value)
    if match:
        return match.group(1).strip() or None
    if "@" in value:
        return value.strip()
    return None


def extract_display_name(value: str) -> Optional[str]:
    """'"Jane Doe" <a@b.com>' -> 'Jane Doe'. None when there is no name before the address."""
    match = _DISPLAY_NAME.match(value)
    if not match:
        return None
    name = _QUOTES.sub("", match.group(1).strip()).strip()
    return name or None


def split_address_list(value: str) -> list[str]:
    """Split a To/Cc header on commas that are outside quotes and angle brackets."""
    items: list[str] = []
    current: list[str] = []
    in_quotes = False
    in_angle = False
    for ch in value:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "<" and not in_quotes:
            in_angle = True
        elif ch == ">" and not in_quotes:
            in_angle = False
        if ch == "," and not in_quotes and not in_angle:
            items.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    items.append("".join(current).strip())
    return [item for item in items if item]


def parse_address_list(value: Optional[str]) -> tuple[list[str], list[str]]:
    """Parallel (emails, names) lists; entries without an address are dropped, missing names are ''."""
    emails: list[str] = []
    names: list[str] = []
    for entry in split_address_list(value or ""):
        email = extract_email_address(entry)
        if email:
            emails.append(email)
            names.append(extract_display_name(entry) or "")
    return emails, names


def has_attachments(payload: MessagePart) -> bool:
    """True if the payload, a child part or a grandchild part declares an attachmentId.

    Deeper parts are not inspected.
    """
    if payload.body.attachmentId:
        return True
    for part in payload.parts:
        if part.body.attachmentId:
            return True
        for subpart in part.parts:
            if subpart.body.attachmentId:
                return True
    return False
