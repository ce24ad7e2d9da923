"""Shared options and output for commands that edit a transaction."""

from decimal import Decimal

import click

from commtrack.cli.error_handling import parse_assignment
from commtrack.domain.commission import brokerage_fee_lines
from commtrack.domain.edit_session import EditSession
from commtrack.domain.entities import Transaction
from commtrack.domain.summary import format_money
from commtrack.utils.date_parser import format_date

# (option, attribute, help) in the order values are applied
RECORD_OPTIONS = (
    ("--type", "transaction_type", "Sale, 'Referral Received' or 'Referral Paid'"),
    ("--brokerage", "brokerage", "KW (Keller Williams) or BDH (Bennion Deville Homes)"),
    ("--property-type", "property_type", "Residential, Commercial or Land"),
    ("--client-type", "client_type", "Buyer or Seller"),
    ("--status", "status", "Closed, Pending or Active"),
    ("--source", "source", "Lead source"),
    ("--address", "address", "Property address"),
    ("--city", "city", "Property city"),
    ("--referring-agent", "referring_agent", "Referring agent name"),
    ("--list-date", "list_date", "List date (YYYY-MM-DD or 'today', 'yesterday')"),
    ("--closing-date", "closing_date", "Closing date (YYYY-MM-DD or 'today', 'yesterday')"),
    ("--list-price", "list_price", "List price"),
    ("--closed-price", "closed_price", "Closed price"),
    ("--commission-pct", "commission_pct", "Commission percentage (e.g. 3 or 2.5%)"),
    ("--referral-pct", "referral_pct", "Referral percentage paid out"),
    ("--referral-fee-received", "referral_fee_received", "Flat referral fee received"),
)


def format_percent(pct: Decimal) -> str:
    """Format a percentage with at most four decimals and no trailing zeros."""
    return f"{pct.quantize(Decimal('0.0001')).normalize():f}"


def record_options(func):
    """Attach the transaction field options and the repeatable --set option."""
    func = click.option(
        "--set",
        "assignments",
        multiple=True,
        metavar="FIELD=VALUE",
        help="Set any field, e.g. --set eo=50 or --set nci=9000 to override (repeatable)",
    )(func)
    for option, attr, help_text in reversed(RECORD_OPTIONS):
        func = click.option(option, attr, default=None, help=help_text)(func)
    return func


def collect_fields(options: dict, assignments: tuple[str, ...]) -> list[tuple[str, str]]:
    """Return (field, value) pairs: named options first, then --set values in order.

    Raises:
        click.BadParameter: If a --set value is not FIELD=VALUE
    """
    fields = [
        (attr, options[attr])
        for _, attr, _ in RECORD_OPTIONS
        if options.get(attr) is not None
    ]
    fields.extend(parse_assignment(text) for text in assignments)
    return fields


def apply_fields(session: EditSession, fields: list[tuple[str, str]]) -> Transaction:
    """Apply field values to an edit session in order.

    Raises:
        ValidationError: If a field is unknown or a value is not recognized
    """
    for name, value in fields:
        session.set_field(name, value)
    return session.record


def echo_breakdown(txn: Transaction) -> None:
    """Print the commission calculation for a transaction."""
    click.echo(f"  Type: {txn.transaction_type.value}")
    click.echo(f"  Brokerage: {txn.brokerage.full_name}")
    if txn.transaction_type.uses_closed_price:
        click.echo(f"  Closed Price: {format_money(txn.closed_price)}")
        click.echo(f"  Commission: {format_percent(txn.commission_pct)}%")
    else:
        click.echo(f"  Referral Fee Received: {format_money(txn.referral_fee_received)}")
    click.echo(f"  GCI: {format_money(txn.gci)}")
    if txn.referral_dollar:
        click.echo(f"  Referral ({format_percent(txn.referral_pct)}%): -{format_money(txn.referral_dollar)}")
    click.echo(f"  Adjusted GCI: {format_money(txn.adjusted_gci)}")
    click.echo("  Brokerage Fees:")
    for label, amount in brokerage_fee_lines(txn):
        if amount:
            click.echo(f"    {label}: {format_money(amount)}")
    click.echo(f"  Total Brokerage Fees: {format_money(txn.total_brokerage_fees)}")
    click.echo(f"  NCI: {format_money(txn.nci)}")


def echo_details(txn: Transaction) -> None:
    """Print the descriptive fields and the calculation of a transaction."""
    click.echo(f"Transaction {txn.id}")
    if txn.address:
        location = f"{txn.address}, {txn.city}" if txn.city else txn.address
        click.echo(f"  Address: {location}")
    click.echo(f"  Client: {txn.client_type.value} ({txn.property_type.value})")
    click.echo(f"  Status: {txn.status.value}")
    if txn.source:
        click.echo(f"  Source: {txn.source}")
    if txn.referring_agent:
        click.echo(f"  Referring Agent: {txn.referring_agent}")
    if txn.list_date:
        click.echo(f"  List Date: {format_date(txn.list_date)}")
    if txn.closing_date:
        click.echo(f"  Closing Date: {format_date(txn.closing_date)}")
    if txn.list_price:
        click.echo(f"  List Price: {format_money(txn.list_price)}")
    echo_breakdown(txn)
    if txn.assistant_bonus:
        click.echo(f"  Assistant Bonus: {format_money(txn.assistant_bonus)}")
