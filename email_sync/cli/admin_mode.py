"""Admin commands: create tables, register mailboxes and clients."""

import typer

from email_sync.db.repositories import account_repo, client_repo

from .shared import console, logger, open_database


def init_db() -> None:
    """Create the database tables."""
    db = open_database()
    try:
        console.print(f"[green]Database ready: {db.url}[/green]")
        logger.info("init_db.complete", url=db.url)
    finally:
        db.close()


def add_account(
    organization_id: str = typer.Argument(..., help="Tenant id"),
    email: str = typer.Argument(..., help="Mailbox address"),
    provider: str = typer.Option("GMAIL", "--provider", help="Provider identifier"),
) -> None:
    """Register a connected mailbox for a tenant."""
    db = open_database()
    try:
        account = account_repo.create_account(db, organization_id, email, provider=provider)
        console.print(f"[green]Account {account.id} ({account.email})[/green]")
        logger.info("add_account.complete", account_id=account.id, organization_id=organization_id)
    finally:
        db.close()


def add_client(
    organization_id: str = typer.Argument(..., help="Tenant id"),
    email: str = typer.Argument(..., help="Client email"),
    name: str = typer.Option(None, "--name", "-n", help="Full name"),
    company: str = typer.Option(None, "--company", help="Company"),
) -> None:
    """Register a client so synced threads can link to it."""
    db = open_database()
    try:
        client = client_repo.create_client(db, organization_id, email, full_name=name, company=company)
        console.print(f"[green]Client {client.id} ({client.email})[/green]")
        logger.info("add_client.complete", client_id=client.id, organization_id=organization_id)
    finally:
        db.close()
