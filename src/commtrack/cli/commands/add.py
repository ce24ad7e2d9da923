"""Add and calculate transaction commands."""

import click

from commtrack.cli.commands.sheets import sync_option, sync_spreadsheet
from commtrack.cli.error_handling import handle_domain_error
from commtrack.cli.record_options import apply_fields, collect_fields, echo_breakdown, record_options
from commtrack.domain.edit_session import EditSession
from commtrack.domain.errors import DomainError
from commtrack.domain.transaction import TransactionService


def _build_session(ctx, options: dict, assignments: tuple[str, ...]) -> EditSession:
    session = EditSession.new()
    try:
        apply_fields(session, collect_fields(options, assignments))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    return session


@click.command("add")
@record_options
@sync_option
@click.pass_context
def add_transaction(ctx, assignments: tuple[str, ...], sync: bool, **options):
    """Add a transaction and calculate its commission.

    Fields are applied in order: the named options first, then each --set.
    Setting a derived field (gci, referral_dollar, adjusted_gci, royalty,
    company_dollar, pre_split_deduction, total_brokerage_fees, nci) overrides
    it until an input it depends on is set.

    Examples:
        commtrack add --brokerage KW --closed-price 500000 --commission-pct 3 --set eo=50
        commtrack add --type "Referral Received" --referral-fee-received 2500
        commtrack add --brokerage BDH --closed-price 500000 --commission-pct 3 --set nci=11000
        commtrack add --brokerage KW --closed-price 500000 --commission-pct 3 --sync
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    session = _build_session(ctx, options, assignments)
    try:
        transaction_id = transaction_service.save_session(session)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    txn = transaction_service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    if txn.address:
        click.echo(f"  Address: {txn.address}")
    echo_breakdown(txn)

    if sync:
        sync_spreadsheet(ctx, transaction_id)


@click.command("calc")
@record_options
@click.pass_context
def calculate_transaction(ctx, assignments: tuple[str, ...], **options):
    """Calculate a commission without saving it.

    Takes the same options as 'add'.

    Examples:
        commtrack calc --closed-price 500000 --commission-pct 3 --referral-pct 25
    """
    session = _build_session(ctx, options, assignments)
    if session.pinned:
        click.echo(f"Overridden: {', '.join(sorted(session.pinned))}")
    echo_breakdown(session.record)


def register_commands(cli):
    """Register add and calc commands with main CLI."""
    cli.add_command(add_transaction)
    cli.add_command(calculate_transaction)
