"""Main CLI entry point."""

import logging

import click

from commtrack.config import Settings
from commtrack.database.factories import create_sqlite_database

# Import and register all commands at module level
from commtrack.cli.commands import add, export, scan, sheets, summary, transaction

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides COMMTRACK_DB_PATH environment variable)",
    envvar="COMMTRACK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log calculation and sync details")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Commtrack - Commission tracking for real estate agents.

    Calculate gross and net commission for Keller Williams and Bennion
    Deville Homes transactions, keep a local record of them and sync it
    with a Google spreadsheet.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    ctx.obj.setdefault("settings", Settings.from_env())

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_sqlite_database(database_path=db_path, settings=ctx.obj["settings"])
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
export.register_commands(cli)
sheets.register_commands(cli)
scan.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
