"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: enums are stored by value and
everything else maps one column to one attribute.
"""

from dataclasses import fields
from typing import Any

from commtrack.domain import entities as domain
from commtrack.database.models import Transaction as ORMTransaction

_ENUM_TYPES = {
    "transaction_type": domain.TransactionType,
    "brokerage": domain.Brokerage,
    "property_type": domain.PropertyType,
    "client_type": domain.ClientType,
    "status": domain.Status,
}


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    values = {}
    for f in fields(domain.Transaction):
        value = getattr(orm_transaction, f.name)
        if f.name in _ENUM_TYPES:
            value = _ENUM_TYPES[f.name](value)
        elif value is None and f.name in domain.NUMERIC_DEFAULTS:
            value = domain.NUMERIC_DEFAULTS[f.name]
        values[f.name] = value
    return domain.Transaction(**values)


def transaction_to_columns(transaction: domain.Transaction) -> dict[str, Any]:
    """Convert a domain Transaction entity to SQLAlchemy column values."""
    values = {}
    for f in fields(domain.Transaction):
        value = getattr(transaction, f.name)
        if f.name in _ENUM_TYPES:
            value = value.value
        values[f.name] = value
    return values
