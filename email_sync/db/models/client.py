"""ORM model for business contacts. Only the columns used for thread matching."""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from email_sync.db.base import Base, IdMixin, TimestampMixin


class Client(Base, IdMixin, TimestampMixin):
    """A tenant's contact; threads link to it by participant email."""

    __tablename__ = "clients"

    organization_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    company: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
