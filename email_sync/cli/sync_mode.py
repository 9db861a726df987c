"""Sync command: run a tenant-wide or single-account sync against the mock mailboxes."""

import asyncio
from pathlib import Path

import typer
from rich.table import Table

from email_sync.config import MOCK_MAILBOX_PATH, SYNC_MAX_THREADS
from email_sync.errors import EmailSyncError
from email_sync.models.sync import SyncOptions, SyncResult
from email_sync.utils.logger import log_context

from .shared import build_service, console, logger, open_database


def _results_table(results: list[SyncResult]) -> Table:
    table = Table(title="Sync results")
    table.add_column("Account", style="cyan")
    table.add_column("Status")
    table.add_column("Threads", justify="right")
    table.add_column("Messages", justify="right")
    table.add_column("New", justify="right")
    table.add_column("Updated", justify="right")
    table.add_column("Error", style="red")
    for r in results:
        table.add_row(
            r.email,
            "[green]ok[/green]" if r.success else "[red]failed[/red]",
            str(r.threads_processed),
            str(r.messages_processed),
            str(r.new_threads),
            str(r.updated_threads),
            r.error or "",
        )
    return table


def sync(
    organization_id: str = typer.Argument(..., help="Tenant id"),
    account_id: str = typer.Option(None, "--account", "-a", help="Sync only this account"),
    full: bool = typer.Option(False, "--full", help="Force a full sync"),
    max_threads: int = typer.Option(SYNC_MAX_THREADS, "--max-threads", "-m", min=1, help="Threads per account"),
    mailboxes: Path = typer.Option(MOCK_MAILBOX_PATH, "--mailboxes", help="Mock mailbox fixture (JSON)"),
) -> None:
    """Sync every active account of a tenant (or one account) and print the results."""
    log = logger.bind(command="sync", organization_id=organization_id)
    log.info("sync.start", account_id=account_id, full=full, max_threads=max_threads)
    options = SyncOptions(max_threads=max_threads, full_sync=full)
    db = open_database()
    with log_context(command="sync"):
        try:
            service = build_service(db, organization_id, mailboxes)
            if account_id:
                try:
                    results = [asyncio.run(service.sync_email_account(account_id, options))]
                except EmailSyncError as e:
                    console.print(f"[red]Sync failed: {e}[/red]")
                    log.error("sync.failed", error=str(e))
                    raise typer.Exit(1) from e
            else:
                results = asyncio.run(service.sync_organization_emails(organization_id, options))
        finally:
            db.close()

    if not results:
        console.print("[yellow]No active, sync-enabled accounts.[/yellow]")
        log.info("sync.no_accounts")
        return
    console.print(_results_table(results))
    log.info("sync.complete", accounts=len(results), failed=sum(1 for r in results if not r.success))
