"""CSV export of transactions."""

import csv
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence, TextIO

from commtrack.database.base import Database
from commtrack.domain.entities import Transaction
from commtrack.domain.transaction import TransactionService
from commtrack.utils.date_parser import format_date

logger = logging.getLogger(__name__)

# (header, attribute) in file order
EXPORT_COLUMNS = (
    ("Property Type", "property_type"),
    ("Client Type", "client_type"),
    ("Source", "source"),
    ("Address", "address"),
    ("City", "city"),
    ("List Price", "list_price"),
    ("Closed Price", "closed_price"),
    ("List Date", "list_date"),
    ("Closing Date", "closing_date"),
    ("Brokerage", "brokerage"),
    ("Commission %", "commission_pct"),
    ("GCI", "gci"),
    ("Referral %", "referral_pct"),
    ("Referral $", "referral_dollar"),
    ("Adjusted GCI", "adjusted_gci"),
    ("Total Brokerage Fees", "total_brokerage_fees"),
    ("NCI", "nci"),
    ("Status", "status"),
)


def default_export_name(today: Optional[date] = None) -> str:
    """File name used when no output path is given."""
    return f"real-estate-transactions-{format_date(today or date.today())}.csv"


def transaction_to_export_row(txn: Transaction) -> list[str]:
    """Render the exported cells of one transaction."""
    row = []
    for _, attr in EXPORT_COLUMNS:
        value = getattr(txn, attr)
        if hasattr(value, "value"):
            value = value.value
        elif attr in ("list_date", "closing_date"):
            value = format_date(value)
        row.append(str(value))
    return row


def write_transactions_csv(transactions: Sequence[Transaction], stream: TextIO) -> int:
    """Write a header line and one quoted row per transaction.

    Returns:
        Number of transactions written
    """
    writer = csv.writer(stream, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([header for header, _ in EXPORT_COLUMNS])
    for txn in transactions:
        writer.writerow(transaction_to_export_row(txn))
    return len(transactions)


class CSVExportService:
    """Service for exporting filtered transactions to CSV."""

    def __init__(self, db: Database):
        self.transaction_service = TransactionService(db)

    def export_to_stream(self, stream: TextIO, **filters) -> int:
        """Export transactions matching the list filters to an open text stream."""
        transactions = self.transaction_service.list_transactions(**filters)
        return write_transactions_csv(transactions, stream)

    def export_to_file(self, path: str | Path, **filters) -> int:
        """Export transactions matching the list filters to a file.

        Args:
            path: Output file, overwritten if it exists
            **filters: year, client_type, brokerage, property_type, sort

        Returns:
            Number of transactions written

        Raises:
            ValidationError: If a filter value is not recognized
        """
        path = Path(path)
        transactions = self.transaction_service.list_transactions(**filters)
        with open(path, "w", encoding="utf-8", newline="") as f:
            count = write_transactions_csv(transactions, f)
        logger.info("Exported %d transactions to %s", count, path)
        return count
