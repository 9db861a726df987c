"""CLI commands: one module per area (admin, sync, status)."""

from typer import Typer

from email_sync.cli import admin_mode, status_mode, sync_mode
from email_sync.utils.tracing import init_tracing

init_tracing()

app = Typer(help="PhotoProOS email sync")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command(name="init-db")(admin_mode.init_db)
    app.command(name="add-account")(admin_mode.add_account)
    app.command(name="add-client")(admin_mode.add_client)
    app.command()(sync_mode.sync)
    app.command()(status_mode.status)
    app.command()(status_mode.threads)


register_commands()
