"""Summary commands."""

import click

from commtrack.cli.error_handling import handle_domain_error
from commtrack.domain.errors import DomainError
from commtrack.domain.summary import SummaryService, format_money


@click.command("summary")
@click.option("--year", type=int, help="Closing year (default: all years)")
@click.option("--client-type", help="Buyer or Seller")
@click.option("--brokerage", help="KW or BDH")
@click.option("--property-type", help="Residential, Commercial or Land")
@click.pass_context
def summary(
    ctx,
    year: int | None,
    client_type: str | None,
    brokerage: str | None,
    property_type: str | None,
):
    """Show commission totals, monthly figures and insights.

    Examples:
        commtrack summary
        commtrack summary --year 2024 --brokerage KW
        commtrack summary --client-type Buyer
    """
    db = ctx.obj["db"]
    service = SummaryService(db)

    try:
        transactions = service.get_filtered_transactions(
            year=year,
            client_type=client_type,
            brokerage=brokerage,
            property_type=property_type,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    totals = service.build_summary(transactions)
    heading = f"Commission Summary ({year})" if year else "Commission Summary"
    click.echo(f"\n{heading}")
    click.echo("=" * 60)
    click.echo(f"{'Total GCI:':<24} {format_money(totals.total_gci):>16}")
    click.echo(f"{'Total NCI:':<24} {format_money(totals.total_nci):>16}")
    click.echo(f"{'Transactions:':<24} {totals.total_transactions:>16}")
    click.echo(f"{'Average NCI:':<24} {format_money(totals.average_nci):>16}")
    click.echo(f"{'Total Volume:':<24} {format_money(totals.total_volume):>16}")
    click.echo(f"{'Referral Fees Paid:':<24} {format_money(totals.total_referral_fees):>16}")

    monthly = service.build_monthly_totals(transactions)
    if monthly:
        click.echo(f"\n{'Month':<10} {'GCI':>14} {'NCI':>14} {'Count':>6}")
        click.echo("-" * 47)
        for month in monthly:
            click.echo(
                f"{month.label:<10} {format_money(month.gci):>14} "
                f"{format_money(month.nci):>14} {month.transactions:>6}"
            )

    insights = service.build_insights(transactions)
    if insights:
        click.echo("\nInsights")
        click.echo("-" * 47)
        for insight in insights:
            detail = f" ({insight.detail})" if insight.detail else ""
            click.echo(f"{insight.label + ':':<20} {insight.value}{detail}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
