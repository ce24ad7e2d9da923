"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from commtrack.domain.entities import Transaction


class Database(ABC):
    """Abstract database interface for commtrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def create_transaction(self, transaction: Transaction) -> str:
        """Insert a fully populated transaction. Returns its ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def transaction_exists(self, transaction_id: str) -> bool:
        """Check if a transaction with the given ID exists."""
        pass

    @abstractmethod
    def update_transaction(self, transaction: Transaction) -> None:
        """Replace the stored record that has the same ID."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions in insertion order."""
        pass

    @abstractmethod
    def replace_transactions(self, transactions: list[Transaction]) -> None:
        """Replace the whole collection in a single commit."""
        pass
