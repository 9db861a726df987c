"""Utility modules."""

from email_sync.utils.logger import get_logger, log_context
from email_sync.utils.tracing import get_tracer, init_tracing, shutdown_tracing

__all__ = [
    "get_logger",
    "log_context",
    "init_tracing",
    "get_tracer",
    "shutdown_tracing",
]
