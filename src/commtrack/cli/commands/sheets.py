"""Spreadsheet sync commands."""

import click

from commtrack.cli.error_handling import handle_domain_error
from commtrack.config import Settings
from commtrack.domain.errors import DomainError
from commtrack.domain.sheet_sync import SheetBackend, SheetSyncService


def get_sheet_backend(ctx: click.Context) -> SheetBackend:
    """Return the injected sheet backend, or build one from settings.

    Raises:
        ConfigurationError: If the spreadsheet ID or token is not set
    """
    backend = ctx.obj.get("sheet_backend")
    if backend is not None:
        return backend

    from commtrack.integrations.google_sheets import GoogleSheetsBackend

    settings: Settings = ctx.obj.get("settings") or Settings.from_env()
    spreadsheet_id, token = settings.require_sheets()
    return GoogleSheetsBackend(spreadsheet_id, token, settings.sheet_range)


def _sync_service(ctx: click.Context) -> SheetSyncService:
    try:
        return SheetSyncService(ctx.obj["db"], get_sheet_backend(ctx))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


def sync_option(func):
    """Attach the --sync flag to a command that changes local transactions."""
    return click.option(
        "--sync",
        is_flag=True,
        help="Also update the configured spreadsheet",
    )(func)


def sync_spreadsheet(ctx: click.Context, transaction_id: str | None = None) -> None:
    """Mirror a local change to the spreadsheet.

    A new transaction is appended as one row; any other change rewrites the
    sheet, since rows carry no stable position.
    """
    service = _sync_service(ctx)
    try:
        if transaction_id is not None:
            service.append(transaction_id)
            click.echo("Appended to the spreadsheet")
        else:
            count = service.push()
            click.echo(f"Pushed {count} transaction(s) to the spreadsheet")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@click.group()
def sheets_group():
    """Sync transactions with a Google spreadsheet.

    Needs COMMTRACK_SPREADSHEET_ID and COMMTRACK_SHEETS_TOKEN (an OAuth
    access token with the spreadsheets scope). The range defaults to
    Transactions!A2:Z and can be changed with COMMTRACK_SHEET_RANGE.
    """
    pass


@sheets_group.command("push")
@click.pass_context
def push(ctx):
    """Overwrite the spreadsheet with all local transactions."""
    service = _sync_service(ctx)
    try:
        count = service.push()
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Pushed {count} transaction(s) to the spreadsheet")


@sheets_group.command("pull")
@click.option("--yes", is_flag=True, help="Replace local transactions without asking")
@click.pass_context
def pull(ctx, yes: bool):
    """Replace all local transactions with the spreadsheet contents."""
    service = _sync_service(ctx)
    if not yes and not click.confirm("This replaces every local transaction. Continue?"):
        click.echo("Pull cancelled.")
        return
    try:
        count = service.pull()
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Pulled {count} transaction(s) from the spreadsheet")


@sheets_group.command("append")
@click.argument("transaction_id")
@click.pass_context
def append(ctx, transaction_id: str):
    """Append one local transaction to the spreadsheet."""
    service = _sync_service(ctx)
    try:
        service.append(transaction_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Appended transaction {transaction_id} to the spreadsheet")


def register_commands(cli: click.Group) -> None:
    """Register sheets commands with main CLI."""
    cli.add_command(sheets_group, name="sheets")
