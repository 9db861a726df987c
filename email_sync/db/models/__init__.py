"""Re-export all ORM models so Base.metadata has all tables."""

from email_sync.db.models.client import Client
from email_sync.db.models.email_account import EmailAccount
from email_sync.db.models.email_message import DIRECTION_INBOUND, DIRECTION_OUTBOUND, EmailMessage
from email_sync.db.models.email_thread import EmailThread

__all__ = [
    "Client",
    "EmailAccount",
    "EmailThread",
    "EmailMessage",
    "DIRECTION_INBOUND",
    "DIRECTION_OUTBOUND",
]
