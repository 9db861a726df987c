"""Resolve a thread's participants to at most one tenant client."""

import asyncio
from typing import Iterable, Optional

from email_sync.db import Database
from email_sync.db.repositories import account_repo, client_repo
from email_sync.utils.logger import get_logger

logger = get_logger("email_sync.client_matcher")


def exclude_own_address(candidate_emails: Iterable[str], own_email: Optional[str]) -> list[str]:
    """Lower-cased, de-duplicated candidates without the mailbox's own address."""
    own = own_email.lower() if own_email else None
    seen: dict[str, None] = {}
    for email in candidate_emails:
        if not email:
            continue
        lowered = email.lower()
        if lowered != own:
            seen[lowered] = None
    return list(seen)


async def match_client(
    db: Database,
    organization_id: str,
    candidate_emails: Iterable[str],
    account_email: Optional[str] = None,
) -> Optional[str]:
    """Client id for the first tenant client whose email is a candidate, or None.

    account_email is the synced mailbox's address; when omitted the tenant's first
    connected mailbox is excluded instead. With several matching clients the store's
    order picks the winner.
    """
    if account_email is None:
        account_email = await asyncio.to_thread(account_repo.first_account_email, db, organization_id)
    candidates = exclude_own_address(candidate_emails, account_email)
    if not candidates:
        return None
    client_id = await asyncio.to_thread(client_repo.find_id_by_emails, db, organization_id, candidates)
    logger.debug(
        "client_matcher.lookup",
        organization_id=organization_id,
        candidates=len(candidates),
        matched=client_id is not None,
    )
    return client_id
