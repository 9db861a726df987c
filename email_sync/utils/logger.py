"""structlog setup for the sync service: colored console plus a JSONL file."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

from email_sync.config import LOG_FILE, LOG_LEVEL, VERBOSE_LOGGING

# SQL echo and exporter retries are noise at INFO
_QUIET_LOGGERS = ("sqlalchemy", "sqlalchemy.engine", "urllib3", "opentelemetry")

_configured = False


def _level() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _handler(handler: logging.Handler, renderer, level: int, pre_chain: list) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = _level()
    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(_handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=True), level, shared))
    root.addHandler(
        _handler(logging.FileHandler(LOG_FILE, encoding="utf-8"), structlog.processors.JSONRenderer(), level, shared)
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared
        + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "email_sync"):
    """Structured logger for a module; configures logging on first use."""
    _configure_logging()
    return structlog.get_logger(name)


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Attach context fields (account_id, command, ...) to every record logged inside the block."""
    with structlog.contextvars.bound_contextvars(**context):
        yield
