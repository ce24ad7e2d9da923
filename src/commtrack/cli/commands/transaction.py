"""Transaction management commands."""

import click

from commtrack.cli.commands.sheets import sync_option, sync_spreadsheet
from commtrack.cli.error_handling import handle_domain_error
from commtrack.cli.record_options import (
    apply_fields,
    collect_fields,
    echo_breakdown,
    echo_details,
    record_options,
)
from commtrack.domain.errors import DomainError
from commtrack.domain.summary import format_money
from commtrack.domain.transaction import SORT_ORDERS, TransactionService
from commtrack.utils.date_parser import format_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--year", type=int, help="Closing year")
@click.option("--client-type", help="Buyer or Seller")
@click.option("--brokerage", help="KW or BDH")
@click.option("--property-type", help="Residential, Commercial or Land")
@click.option(
    "--sort",
    type=click.Choice(SORT_ORDERS),
    default="newest",
    show_default=True,
    help="Closing date order",
)
@click.pass_context
def list_transactions(
    ctx,
    year: int | None,
    client_type: str | None,
    brokerage: str | None,
    property_type: str | None,
    sort: str,
):
    """View transactions with optional filters.

    Transactions without a closing date are listed last.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        transactions = service.list_transactions(
            year=year,
            client_type=client_type,
            brokerage=brokerage,
            property_type=property_type,
            sort=sort,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 130)
    click.echo(
        f"{'ID':<32} {'Closing':<11} {'Type':<17} {'Brk':<4} {'Address':<26} "
        f"{'Price':>14} {'GCI':>11} {'NCI':>11}"
    )
    click.echo("-" * 130)

    for txn in transactions:
        click.echo(
            f"{txn.id:<32} {format_date(txn.closing_date):<11} {txn.transaction_type.value:<17} "
            f"{txn.brokerage.value:<4} {txn.address[:26]:<26} {format_money(txn.closed_price):>14} "
            f"{format_money(txn.gci):>11} {format_money(txn.nci):>11}"
        )

    total_gci = sum(txn.gci for txn in transactions)
    total_nci = sum(txn.nci for txn in transactions)
    click.echo("-" * 130)
    click.echo(
        f"{'TOTAL':<32} GCI: {format_money(total_gci)} | NCI: {format_money(total_nci)} | "
        f"Count: {len(transactions)}"
    )


@transaction_group.command("show")
@click.argument("transaction_id")
@click.pass_context
def show_transaction(ctx, transaction_id: str) -> None:
    """Show a transaction and its commission breakdown."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        txn = service.require_transaction(transaction_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    echo_details(txn)


@transaction_group.command("update")
@click.argument("transaction_id")
@record_options
@sync_option
@click.pass_context
def update_transaction(
    ctx, transaction_id: str, assignments: tuple[str, ...], sync: bool, **options
) -> None:
    """Update a transaction.

    The stored record is re-opened with its saved values. Setting an input
    recalculates only the values that depend on it; setting a derived field
    overrides it.

    Examples:
        commtrack transaction update 3f2a... --closed-price 510000
        commtrack transaction update 3f2a... --set hoa_transfer=250
        commtrack transaction update 3f2a... --address "12 Palm Way"
        commtrack transaction update 3f2a... --status Closed --sync
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        fields = collect_fields(options, assignments)
        if not fields:
            raise click.UsageError("Nothing to update; pass at least one field option or --set")
        session = service.open_session(transaction_id)
        apply_fields(session, fields)
        service.save_session(session, transaction_id)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")
    echo_breakdown(service.get_transaction(transaction_id))
    if sync:
        sync_spreadsheet(ctx)


@transaction_group.command("delete")
@click.argument("transaction_id")
@sync_option
@click.pass_context
def delete_transaction(ctx, transaction_id: str, sync: bool) -> None:
    """Delete a transaction.

    Examples:
        commtrack transaction delete 3f2a...
        commtrack transaction delete 3f2a... --sync
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    # Get transaction info for display
    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    label = txn.address or format_money(txn.nci)
    if not click.confirm(f"Are you sure you want to delete transaction {transaction_id} ({label})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    if sync:
        sync_spreadsheet(ctx)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
