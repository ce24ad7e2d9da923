"""Commission calculation engine.

Turns a transaction's inputs into GCI, adjusted GCI, brokerage fees and NCI.
The engine is a pure function: it never mutates its argument and keeps no
state between calls. Which derived values must be left alone (typed in by
the user, or loaded from storage and not yet invalidated) is passed in
explicitly as the ``held`` set; the engine takes held values as given and
computes everything else around them.
"""

import logging
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from commtrack.domain.brokerage import normalize_brokerage, normalize_transaction_type
from commtrack.domain.entities import ZERO, Brokerage, Transaction

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

KW_ROYALTY_PCT = Decimal("6")
KW_COMPANY_DOLLAR_PCT = Decimal("10")
BDH_PRE_SPLIT_PCT = Decimal("6")


def to_cents(amount: Decimal) -> Decimal:
    """Round a monetary amount to cents, half away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, pct: Decimal) -> Decimal:
    """Return ``pct`` percent of ``amount``, rounded to cents."""
    return to_cents(amount * pct / HUNDRED)


def infer_percent(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``whole``; 0 when ``whole`` is 0."""
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def bdh_agent_split(adjusted_gci: Decimal, pre_split_deduction: Decimal, split_pct: Decimal) -> Decimal:
    """Agent's share of adjusted GCI after the Bennion Deville pre-split deduction."""
    return percent_of(adjusted_gci - pre_split_deduction, split_pct)


def calculate(
    txn: Transaction,
    held: Iterable[str] = frozenset(),
    drivers: Optional[Iterable[str]] = None,
) -> Transaction:
    """Compute all derived commission fields of a transaction.

    Args:
        txn: Transaction with inputs populated
        held: Names of derived fields whose current value must be kept.
        drivers: Held fields that back-compute their percentage: ``gci``
            yields ``commission_pct`` and ``referral_dollar`` yields
            ``referral_pct`` on Sale and Referral Paid records. Defaults to
            every held field, so holding ``gci`` alone infers the rate.

    Returns:
        New Transaction with derived fields populated

    Raises:
        InvalidBrokerageError: If the brokerage has no known fee schedule
        ValidationError: If the transaction type is unknown
    """
    held = frozenset(held)
    drivers = held if drivers is None else frozenset(drivers) & held
    transaction_type = normalize_transaction_type(txn.transaction_type)
    brokerage = normalize_brokerage(txn.brokerage)

    commission_pct = txn.commission_pct
    referral_pct = txn.referral_pct

    if transaction_type.uses_closed_price:
        if "gci" in held:
            gci = txn.gci
            if "gci" in drivers:
                commission_pct = infer_percent(gci, txn.closed_price)
        else:
            gci = percent_of(txn.closed_price, commission_pct)

        if "referral_dollar" in held:
            referral_dollar = txn.referral_dollar
            if "referral_dollar" in drivers:
                referral_pct = infer_percent(referral_dollar, gci)
        else:
            referral_dollar = percent_of(gci, referral_pct)
    else:
        # Referral received: a flat fee, price and percentages play no part
        gci = txn.gci if "gci" in held else txn.referral_fee_received
        referral_dollar = ZERO

    adjusted_gci = txn.adjusted_gci if "adjusted_gci" in held else gci - referral_dollar

    royalty = txn.royalty
    company_dollar = txn.company_dollar
    pre_split_deduction = txn.pre_split_deduction

    if brokerage is Brokerage.KELLER_WILLIAMS:
        if "royalty" not in held:
            royalty = percent_of(adjusted_gci, KW_ROYALTY_PCT)
        if "company_dollar" not in held:
            company_dollar = percent_of(adjusted_gci, KW_COMPANY_DOLLAR_PCT)
        computed_fees = (
            txn.eo
            + royalty
            + company_dollar
            + txn.hoa_transfer
            + txn.home_warranty
            + txn.kw_cares
            + txn.kw_next_gen
            + txn.bold_scholarship
            + txn.tc_concierge
            + txn.jelmberg_team
            + txn.other_deductions
            + txn.buyers_agent_split
        )
    else:
        if "pre_split_deduction" not in held:
            pre_split_deduction = percent_of(adjusted_gci, BDH_PRE_SPLIT_PCT)
        agent_split = bdh_agent_split(adjusted_gci, pre_split_deduction, txn.bdh_split_pct)
        brokerage_portion = adjusted_gci - agent_split
        # E&O is collected on BDH sheets but is not part of their fee total
        computed_fees = (
            pre_split_deduction
            + brokerage_portion
            + txn.asf
            + txn.foundation10
            + txn.admin_fee
            + txn.other_deductions
            + txn.buyers_agent_split
        )

    total_brokerage_fees = (
        txn.total_brokerage_fees if "total_brokerage_fees" in held else computed_fees
    )
    nci = txn.nci if "nci" in held else adjusted_gci - total_brokerage_fees

    logger.debug(
        "Calculated %s/%s transaction %s: gci=%s nci=%s held=%s",
        transaction_type.value,
        brokerage.value,
        txn.id or "<new>",
        gci,
        nci,
        sorted(held),
    )

    return replace(
        txn,
        transaction_type=transaction_type,
        brokerage=brokerage,
        commission_pct=commission_pct,
        referral_pct=referral_pct,
        net_volume=txn.closed_price,
        gci=gci,
        referral_dollar=referral_dollar,
        adjusted_gci=adjusted_gci,
        royalty=royalty,
        company_dollar=company_dollar,
        pre_split_deduction=pre_split_deduction,
        total_brokerage_fees=total_brokerage_fees,
        nci=nci,
    )


def brokerage_fee_lines(txn: Transaction) -> list[tuple[str, Decimal]]:
    """Return the labelled amounts that make up a transaction's brokerage fees.

    Lines follow the transaction's brokerage schedule. If the fee total was
    overridden the lines will not add up to it.
    """
    brokerage = normalize_brokerage(txn.brokerage)
    if brokerage is Brokerage.KELLER_WILLIAMS:
        lines = [
            ("E&O", txn.eo),
            ("Royalty", txn.royalty),
            ("Company Dollar", txn.company_dollar),
            ("HOA Transfer", txn.hoa_transfer),
            ("Home Warranty", txn.home_warranty),
            ("KW Cares", txn.kw_cares),
            ("KW NextGen", txn.kw_next_gen),
            ("BOLD Scholarship", txn.bold_scholarship),
            ("TC Concierge", txn.tc_concierge),
            ("Jelmberg Team", txn.jelmberg_team),
        ]
    else:
        agent_split = bdh_agent_split(txn.adjusted_gci, txn.pre_split_deduction, txn.bdh_split_pct)
        lines = [
            ("Pre-Split Deduction", txn.pre_split_deduction),
            (f"Brokerage Portion ({txn.bdh_split_pct}% agent split)", txn.adjusted_gci - agent_split),
            ("ASF", txn.asf),
            ("Foundation 10", txn.foundation10),
            ("Admin Fee", txn.admin_fee),
        ]
    lines.append(("Other Deductions", txn.other_deductions))
    lines.append(("Buyer's Agent Split", txn.buyers_agent_split))
    return lines
