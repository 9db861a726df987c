"""Client repository: contact lookup by email for thread matching."""

from typing import Iterable, Optional

from sqlalchemy import func, select

from email_sync.db import Database
from email_sync.db.models.client import Client


def create_client(
    db: Database,
    organization_id: str,
    email: str,
    full_name: Optional[str] = None,
    company: Optional[str] = None,
) -> Client:
    with db.session() as session:
        row = Client(organization_id=organization_id, email=email, full_name=full_name, company=company)
        session.add(row)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def get_client(db: Database, organization_id: str, client_id: str) -> Optional[Client]:
    """Return the tenant's client by id, or None."""
    with db.session() as session:
        row = session.scalars(
            select(Client).where(Client.id == client_id).where(Client.organization_id == organization_id)
        ).first()
        if row is not None:
            session.expunge(row)
        return row


def find_id_by_emails(db: Database, organization_id: str, emails: Iterable[str]) -> Optional[str]:
    """Id of the first tenant client whose email is in emails (case-insensitive), or None."""
    lowered = sorted({e.lower() for e in emails if e})
    if not lowered:
        return None
    with db.session() as session:
        q = (
            select(Client.id)
            .where(Client.organization_id == organization_id)
            .where(func.lower(Client.email).in_(lowered))
        )
        return session.scalars(q).first()
