"""CSV export command."""

import io

import click

from commtrack.cli.error_handling import handle_domain_error
from commtrack.domain.csv_export import CSVExportService, default_export_name
from commtrack.domain.errors import DomainError


@click.command("export")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, allow_dash=True),
    help="Output file, or '-' for stdout (default: real-estate-transactions-<today>.csv)",
)
@click.option("--year", type=int, help="Closing year")
@click.option("--client-type", help="Buyer or Seller")
@click.option("--brokerage", help="KW or BDH")
@click.option("--property-type", help="Residential, Commercial or Land")
@click.pass_context
def export(
    ctx,
    output: str | None,
    year: int | None,
    client_type: str | None,
    brokerage: str | None,
    property_type: str | None,
):
    """Export transactions to a CSV file.

    Writes one quoted row per transaction with the descriptive fields and the
    commission totals, newest closing first.

    Examples:
        commtrack export
        commtrack export --year 2024 --brokerage KW -o kw-2024.csv
        commtrack export -o - --client-type Buyer
    """
    service = CSVExportService(ctx.obj["db"])
    filters = dict(
        year=year,
        client_type=client_type,
        brokerage=brokerage,
        property_type=property_type,
    )

    path = output or default_export_name()
    try:
        if output == "-":
            buffer = io.StringIO()
            service.export_to_stream(buffer, **filters)
            click.echo(buffer.getvalue(), nl=False)
            return
        count = service.export_to_file(path, **filters)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    except OSError as e:
        click.echo(f"Error: Cannot write {path}: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Exported {count} transaction(s) to {path}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export)
