"""Status and inbox listing commands (read-only)."""

import typer
from rich.table import Table

from email_sync import inbox
from email_sync.db.repositories.thread_repo import FILTER_ALL, THREAD_FILTERS
from email_sync.sync.status import get_sync_status

from .shared import console, logger, open_database


def status(organization_id: str = typer.Argument(..., help="Tenant id")) -> None:
    """Print per-account sync health and tenant thread totals."""
    db = open_database()
    try:
        snapshot = get_sync_status(db, organization_id)
    finally:
        db.close()
    table = Table(title=f"Email sync status: {organization_id}")
    table.add_column("Account", style="cyan")
    table.add_column("Provider")
    table.add_column("Active", justify="center")
    table.add_column("Sync", justify="center")
    table.add_column("Last sync")
    table.add_column("Threads", justify="right")
    table.add_column("Error", style="red")
    for a in snapshot.accounts:
        table.add_row(
            a.email,
            a.provider,
            "yes" if a.is_active else "no",
            "on" if a.sync_enabled else "paused",
            a.last_sync_at.isoformat() if a.last_sync_at else "never",
            str(a.thread_count),
            a.error_message or "",
        )
    console.print(table)
    console.print(f"Total threads: {snapshot.total_threads}  Unread: {snapshot.unread_threads}")
    logger.info("status.printed", organization_id=organization_id, accounts=len(snapshot.accounts))


def threads(
    organization_id: str = typer.Argument(..., help="Tenant id"),
    filter_name: str = typer.Option(FILTER_ALL, "--filter", "-f", help=f"One of: {', '.join(THREAD_FILTERS)}"),
    search: str = typer.Option(None, "--search", "-s", help="Subject/snippet text or participant address"),
    limit: int = typer.Option(20, "--limit", "-l", min=1),
    offset: int = typer.Option(0, "--offset", min=0),
) -> None:
    """List synced threads."""
    if filter_name not in THREAD_FILTERS:
        console.print(f"[red]Unknown filter {filter_name!r}[/red]")
        raise typer.Exit(1)
    db = open_database()
    try:
        page = inbox.list_threads(db, organization_id, filter_name, search, limit=limit, offset=offset)
    finally:
        db.close()
    table = Table(title=f"Threads ({page.total} total, {page.unread_count} unread)")
    table.add_column("Last activity")
    table.add_column("Subject", style="cyan")
    table.add_column("From")
    table.add_column("Msgs", justify="right")
    table.add_column("Flags")
    for t in page.threads:
        flags = "".join(
            [
                "U" if not t.is_read else "",
                "*" if t.is_starred else "",
                "A" if t.is_archived else "",
                "C" if t.client_id else "",
            ]
        )
        sender = t.latest_message.from_email if t.latest_message else ""
        table.add_row(t.last_message_at.isoformat(), t.subject, sender, str(t.message_count), flags)
    console.print(table)
