"""Shared CLI helpers: console, logger, store handle, mock provider, service wiring."""

from pathlib import Path

from rich.console import Console

from email_sync.config import DATABASE_URL, MOCK_MAILBOX_PATH
from email_sync.db import Database
from email_sync.db.repositories import account_repo
from email_sync.mail_provider import GmailMockProvider
from email_sync.service import EmailSyncService
from email_sync.utils.logger import get_logger

console = Console()
logger = get_logger("email_sync.cli")


def open_database(url: str | None = None) -> Database:
    db = Database(url or DATABASE_URL).init()
    logger.debug("db.opened", url=db.url)
    return db


def get_mock_provider(db: Database, organization_id: str, mailbox_path: Path | None = None) -> GmailMockProvider:
    """Fixture-backed provider; each tenant account is served from the mailbox keyed by its address."""
    provider = GmailMockProvider.from_file(mailbox_path or MOCK_MAILBOX_PATH)
    for account in account_repo.list_accounts(db, organization_id):
        provider.alias(account.id, account.email)
    return provider


def build_service(db: Database, organization_id: str, mailbox_path: Path | None = None) -> EmailSyncService:
    return EmailSyncService(db, get_mock_provider(db, organization_id, mailbox_path))
