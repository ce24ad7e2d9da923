"""Transaction domain service."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, UTC
from typing import Iterable, Optional

from commtrack.database.base import Database
from commtrack.domain.brokerage import (
    normalize_brokerage,
    normalize_client_type,
    normalize_property_type,
)
from commtrack.domain.commission import calculate
from commtrack.domain.edit_session import EditSession
from commtrack.domain.entities import Brokerage, ClientType, PropertyType, Transaction
from commtrack.domain.errors import NotFoundError, ValidationError, transaction_not_found

logger = logging.getLogger(__name__)

SORT_ORDERS = ("newest", "oldest")


def new_transaction_id() -> str:
    """Return a new opaque transaction ID."""
    return uuid.uuid4().hex


class TransactionService:
    """Service for managing commission transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        record: Transaction,
        held: Iterable[str] = frozenset(),
        drivers: Optional[Iterable[str]] = None,
    ) -> str:
        """Calculate and store a new transaction.

        Args:
            record: Transaction inputs (and any overridden derived values)
            held: Derived fields to keep as given
            drivers: Held fields that back-compute their percentage, see calculate()

        Returns:
            Transaction ID

        Raises:
            InvalidBrokerageError: If the brokerage is not recognized
        """
        now = datetime.now(UTC)
        calculated = calculate(record, held, drivers)
        calculated = replace(calculated, id=new_transaction_id(), created_at=now, updated_at=now)
        transaction_id = self.db.create_transaction(calculated)
        logger.info("Created transaction %s (nci=%s)", transaction_id, calculated.nci)
        return transaction_id

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: str) -> Transaction:
        """Get transaction by ID, raising if it does not exist.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_transaction(
        self,
        transaction_id: str,
        record: Transaction,
        held: Iterable[str] = frozenset(),
        drivers: Optional[Iterable[str]] = None,
    ) -> None:
        """Recalculate and replace a stored transaction.

        The ID and creation time of the stored record are preserved.

        Args:
            transaction_id: Transaction ID to update
            record: New transaction contents
            held: Derived fields to keep as given
            drivers: Held fields that back-compute their percentage, see calculate()

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        existing = self.require_transaction(transaction_id)
        calculated = calculate(record, held, drivers)
        calculated = replace(
            calculated,
            id=existing.id,
            created_at=existing.created_at,
            updated_at=datetime.now(UTC),
        )
        self.db.update_transaction(calculated)
        logger.info("Updated transaction %s (nci=%s)", transaction_id, calculated.nci)

    def open_session(self, transaction_id: str) -> EditSession:
        """Re-open a stored transaction for editing.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        return EditSession.open(self.require_transaction(transaction_id))

    def save_session(self, session: EditSession, transaction_id: Optional[str] = None) -> str:
        """Persist an edit session, creating or updating the record.

        Args:
            session: Edit session holding the record and its pins
            transaction_id: ID of the record being edited, None for a new one

        Returns:
            Transaction ID
        """
        # The session has already inferred any percentages
        if transaction_id is None:
            return self.create_transaction(session.record, session.held, drivers=())
        self.update_transaction(transaction_id, session.record, session.held, drivers=())
        return transaction_id

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        if not self.db.transaction_exists(transaction_id):
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self,
        year: Optional[int] = None,
        client_type: Optional[ClientType | str] = None,
        brokerage: Optional[Brokerage | str] = None,
        property_type: Optional[PropertyType | str] = None,
        sort: str = "newest",
    ) -> list[Transaction]:
        """List transactions with filters, sorted by closing date.

        Args:
            year: Optional closing year filter
            client_type: Optional client type filter
            brokerage: Optional brokerage filter
            property_type: Optional property type filter
            sort: "newest" or "oldest" closing date first; undated records last

        Returns:
            List of transaction entities

        Raises:
            ValidationError: If a filter value or sort order is not recognized
        """
        if sort not in SORT_ORDERS:
            raise ValidationError(f"Unknown sort order '{sort}'. Use 'newest' or 'oldest'")
        if client_type is not None:
            client_type = normalize_client_type(client_type)
        if brokerage is not None:
            brokerage = normalize_brokerage(brokerage)
        if property_type is not None:
            property_type = normalize_property_type(property_type)

        transactions = [
            txn
            for txn in self.db.list_transactions()
            if (year is None or (txn.closing_date is not None and txn.closing_date.year == year))
            and (client_type is None or txn.client_type is client_type)
            and (brokerage is None or txn.brokerage is brokerage)
            and (property_type is None or txn.property_type is property_type)
        ]

        dated = [txn for txn in transactions if txn.closing_date is not None]
        undated = [txn for txn in transactions if txn.closing_date is None]
        dated.sort(key=lambda txn: txn.closing_date, reverse=(sort == "newest"))
        return dated + undated

    def replace_all(self, records: list[Transaction]) -> int:
        """Replace the stored collection with the given records, as-is.

        Records are not recalculated. Records without an ID get a new one,
        and list order is kept through creation timestamps.

        Returns:
            Number of records stored
        """
        now = datetime.now(UTC)
        prepared = []
        for index, record in enumerate(records):
            prepared.append(
                replace(
                    record,
                    id=record.id or new_transaction_id(),
                    created_at=record.created_at or now + timedelta(microseconds=index),
                    updated_at=record.updated_at or now,
                )
            )
        self.db.replace_transactions(prepared)
        logger.info("Replaced local store with %d transactions", len(prepared))
        return len(prepared)
