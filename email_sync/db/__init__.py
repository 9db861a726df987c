"""Database package: the Database handle (engine + session factory)."""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from email_sync.config import DATABASE_URL
from email_sync.db.base import Base

# Import all models so Base.metadata has all tables
from email_sync.db.models import (  # noqa: F401
    Client,
    EmailAccount,
    EmailMessage,
    EmailThread,
)


def _get_engine(url: str) -> Engine:
    """Create engine with check_same_thread=False for use from worker threads."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False, pool_pre_ping=True)
    if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
        # One shared connection, otherwise each thread would see its own empty database
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=False, connect_args={"check_same_thread": False})


class Database:
    """Store handle. Construct once at process start, init(), pass it around, close() on shutdown."""

    def __init__(self, url: str | None = None):
        self.url = url or DATABASE_URL
        self._init_lock = threading.Lock()
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    def init(self) -> "Database":
        """Create engine and tables. Safe to call more than once."""
        with self._init_lock:
            if self._session_factory is not None:
                return self
            self._engine = _get_engine(self.url)
            Base.metadata.create_all(bind=self._engine)
            self._session_factory = sessionmaker(bind=self._engine, autocommit=False, autoflush=False)
        return self

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager yielding a DB session. Commits on success, rolls back on error."""
        if self._session_factory is None:
            self.init()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose the engine. A later session() call re-opens it."""
        with self._init_lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def __enter__(self) -> "Database":
        return self.init()

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["Base", "Database"]
