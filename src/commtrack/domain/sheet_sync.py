"""Spreadsheet synchronization domain service."""

import logging
from dataclasses import replace
from typing import Protocol, Sequence

from commtrack.database.base import Database
from commtrack.domain.errors import DomainError, ValidationError
from commtrack.domain.sheet_row import row_to_transaction, transaction_to_row
from commtrack.domain.transaction import TransactionService, new_transaction_id

logger = logging.getLogger(__name__)


class SheetBackend(Protocol):
    """Tabular store holding one transaction per row."""

    def read_rows(self) -> list[list[str]]:
        """Return all data rows of the configured range."""
        ...

    def write_rows(self, rows: Sequence[Sequence[str]]) -> None:
        """Clear the configured range and write the given rows."""
        ...

    def append_row(self, row: Sequence[str]) -> None:
        """Append one row after the last data row."""
        ...


class SheetSyncService:
    """Service for pushing and pulling transactions to a spreadsheet.

    There is no merge: push overwrites the whole sheet, pull replaces the
    whole local store.
    """

    def __init__(self, db: Database, backend: SheetBackend):
        """Initialize sheet sync service.

        Args:
            db: Database instance
            backend: Spreadsheet backend
        """
        self.db = db
        self.backend = backend
        self.transaction_service = TransactionService(db)

    def push(self) -> int:
        """Overwrite the sheet with every stored transaction.

        Returns:
            Number of rows written
        """
        transactions = self.transaction_service.list_transactions()
        rows = [transaction_to_row(txn) for txn in transactions]
        self.backend.write_rows(rows)
        logger.info("Pushed %d transactions to spreadsheet", len(rows))
        return len(rows)

    def pull(self) -> int:
        """Replace the local store with the sheet contents.

        Row values are stored as read; nothing is recalculated. A row whose
        ID repeats an earlier row gets a new ID.

        Returns:
            Number of transactions stored

        Raises:
            ValidationError: If a row holds an unrecognized brokerage or type
        """
        records = []
        seen_ids = set()
        for index, row in enumerate(self.backend.read_rows()):
            if not any(str(cell).strip() for cell in row):
                continue
            try:
                record = row_to_transaction(row, index)
            except DomainError as e:
                raise ValidationError(f"Sheet row {index + 2}: {e}") from e

            if record.id in seen_ids:
                new_id = new_transaction_id()
                logger.warning(
                    "Duplicate transaction ID %s in sheet row %d, stored as %s",
                    record.id,
                    index + 2,
                    new_id,
                )
                record = replace(record, id=new_id)
            seen_ids.add(record.id)
            records.append(record)

        count = self.transaction_service.replace_all(records)
        logger.info("Pulled %d transactions from spreadsheet", count)
        return count

    def append(self, transaction_id: str) -> None:
        """Append one stored transaction to the sheet.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.transaction_service.require_transaction(transaction_id)
        self.backend.append_row(transaction_to_row(txn))
        logger.info("Appended transaction %s to spreadsheet", transaction_id)
