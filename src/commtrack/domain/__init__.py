"""Domain layer for commtrack application.

Services that depend on the database layer are imported from their own
modules (``commtrack.domain.transaction`` and friends).
"""

from commtrack.domain.commission import calculate
from commtrack.domain.edit_session import EditSession
from commtrack.domain.entities import (
    Brokerage,
    ClientType,
    PropertyType,
    Status,
    Transaction,
    TransactionType,
)

__all__ = [
    "calculate",
    "EditSession",
    "Brokerage",
    "ClientType",
    "PropertyType",
    "Status",
    "Transaction",
    "TransactionType",
]
