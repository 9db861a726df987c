"""
Error hierarchy for mailbox synchronization.

Only AuthenticationError deactivates an account. Every other sync failure is
transient: it is recorded on the account and the account stays eligible for
the next scheduled run.
"""


class EmailSyncError(Exception):
    """Base class for all email sync errors."""
    pass


class AccountNotFoundError(EmailSyncError):
    """Raised when the requested email account does not exist."""
    pass


class AuthenticationError(EmailSyncError):
    """Raised when no valid access token can be obtained for an account."""
    pass


class ProviderError(EmailSyncError):
    """Raised when the mailbox provider returns missing or unusable data."""
    pass


class SyncInProgressError(EmailSyncError):
    """Raised when a sync for the same account is already running."""
    pass


class SyncTimeoutError(EmailSyncError):
    """Raised when an account sync exceeds its deadline."""
    pass


class ThreadNotFoundError(EmailSyncError):
    """Raised when a thread does not exist in the tenant's inbox."""
    pass


class ClientNotFoundError(EmailSyncError):
    """Raised when linking a thread to a client the tenant does not have."""
    pass
