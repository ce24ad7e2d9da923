"""Spreadsheet row layout for transactions.

Each transaction occupies one row of 26 cells in a fixed column order. The
row carries the commission totals but not the individual deductions, so a
row read back is a summary of the record rather than a full copy. The codec
never runs the commission engine: derived values travel as plain cells.
"""

import logging
from decimal import Decimal
from typing import Sequence

from commtrack.domain.brokerage import NORMALIZERS
from commtrack.domain.commission import KW_COMPANY_DOLLAR_PCT, KW_ROYALTY_PCT, to_cents
from commtrack.domain.entities import NUMERIC_DEFAULTS, Brokerage, Transaction
from commtrack.utils.amount_parser import parse_amount
from commtrack.utils.date_parser import format_date, parse_optional_date

logger = logging.getLogger(__name__)

SHEET_COLUMNS = (
    "id",
    "propertyType",
    "clientType",
    "source",
    "address",
    "city",
    "listPrice",
    "commissionPct",
    "listDate",
    "closingDate",
    "brokerage",
    "netVolume",
    "closedPrice",
    "gci",
    "referralPct",
    "referralDollar",
    "adjustedGci",
    "brokerageSplit",
    "adminFeesOther",
    "nci",
    "status",
    "assistantBonus",
    "buyersAgentSplit",
    "transactionType",
    "referringAgent",
    "referralFeeReceived",
)

# Columns that map straight onto a transaction attribute
_DIRECT_COLUMNS = {
    "id": "id",
    "propertyType": "property_type",
    "clientType": "client_type",
    "source": "source",
    "address": "address",
    "city": "city",
    "listPrice": "list_price",
    "commissionPct": "commission_pct",
    "listDate": "list_date",
    "closingDate": "closing_date",
    "brokerage": "brokerage",
    "netVolume": "net_volume",
    "closedPrice": "closed_price",
    "gci": "gci",
    "referralPct": "referral_pct",
    "referralDollar": "referral_dollar",
    "adjustedGci": "adjusted_gci",
    "nci": "nci",
    "status": "status",
    "assistantBonus": "assistant_bonus",
    "buyersAgentSplit": "buyers_agent_split",
    "transactionType": "transaction_type",
    "referringAgent": "referring_agent",
    "referralFeeReceived": "referral_fee_received",
}


def brokerage_split(txn: Transaction) -> Decimal:
    """Percentage-based brokerage deductions of the record's schedule."""
    if txn.brokerage is Brokerage.KELLER_WILLIAMS:
        return txn.royalty + txn.company_dollar
    return txn.pre_split_deduction


def transaction_to_row(txn: Transaction) -> list[str]:
    """Serialize a transaction into the 26 sheet cells."""
    split = brokerage_split(txn)
    cells = {
        "brokerageSplit": split,
        "adminFeesOther": txn.total_brokerage_fees - split,
    }
    for column, attr in _DIRECT_COLUMNS.items():
        cells[column] = getattr(txn, attr)

    row = []
    for column in SHEET_COLUMNS:
        value = cells[column]
        if hasattr(value, "value"):
            value = value.value
        elif column in ("listDate", "closingDate"):
            value = format_date(value)
        row.append(str(value))
    return row


def _number(attr: str, cell: str) -> Decimal:
    if not cell.strip():
        return NUMERIC_DEFAULTS[attr]
    try:
        return parse_amount(cell)
    except ValueError:
        logger.warning("Unreadable %s cell '%s', using default", attr, cell)
        return NUMERIC_DEFAULTS[attr]


def row_to_transaction(row: Sequence[str], index: int) -> Transaction:
    """Deserialize sheet cells into a transaction.

    Args:
        row: Cell values; short rows are padded with blanks
        index: Zero-based data row index, used for rows without an ID

    Returns:
        Transaction entity with the cells' values, not recalculated

    Raises:
        InvalidBrokerageError: If the brokerage cell is not recognized
        ValidationError: If another enumerated cell is not recognized
    """
    cells = dict(zip(SHEET_COLUMNS, [str(c) if c is not None else "" for c in row]))
    cells = {column: cells.get(column, "").strip() for column in SHEET_COLUMNS}

    values = {}
    for column, attr in _DIRECT_COLUMNS.items():
        cell = cells[column]
        if attr in NORMALIZERS:
            if cell:
                values[attr] = NORMALIZERS[attr](cell)
        elif attr in NUMERIC_DEFAULTS:
            values[attr] = _number(attr, cell)
        elif attr in ("list_date", "closing_date"):
            try:
                values[attr] = parse_optional_date(cell)
            except ValueError:
                logger.warning("Unreadable %s cell '%s', leaving it empty", attr, cell)
                values[attr] = None
        else:
            values[attr] = cell

    if not values["id"]:
        values["id"] = f"sheet-{index + 1}"

    split = _number("total_brokerage_fees", cells["brokerageSplit"])
    other = _number("total_brokerage_fees", cells["adminFeesOther"])
    values["total_brokerage_fees"] = split + other

    brokerage = values.get("brokerage", Brokerage.KELLER_WILLIAMS)
    if brokerage is Brokerage.KELLER_WILLIAMS:
        # Apportion the combined split in the schedule's royalty : company dollar ratio
        royalty_share = KW_ROYALTY_PCT / (KW_ROYALTY_PCT + KW_COMPANY_DOLLAR_PCT)
        values["royalty"] = to_cents(split * royalty_share)
        values["company_dollar"] = split - values["royalty"]
    else:
        values["pre_split_deduction"] = split

    return Transaction(**values)
