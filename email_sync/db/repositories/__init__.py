"""DB repositories: plain functions taking the Database handle first."""

from email_sync.db.repositories import account_repo, client_repo, message_repo, thread_repo

__all__ = [
    "account_repo",
    "client_repo",
    "message_repo",
    "thread_repo",
]
