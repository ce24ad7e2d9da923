"""Normalization of loosely typed classification values.

Brokerage and transaction type arrive as free text from the CLI, from
spreadsheet rows and from scanned documents. They are resolved to enums once,
here, so the calculation code only ever sees a closed set of variants.
"""

import re
from enum import Enum
from typing import TypeVar

from commtrack.domain.entities import (
    Brokerage,
    ClientType,
    PropertyType,
    Status,
    TransactionType,
)
from commtrack.domain.errors import InvalidBrokerageError, ValidationError, unknown_brokerage

E = TypeVar("E", bound=Enum)


def _key(value: object) -> str:
    return re.sub(r"[^a-z0-9]", "", str(value).lower())


_BROKERAGE_KEYS = {
    "kw": Brokerage.KELLER_WILLIAMS,
    "kellerwilliams": Brokerage.KELLER_WILLIAMS,
    "kellerwilliamsrealty": Brokerage.KELLER_WILLIAMS,
    "bdh": Brokerage.BENNION_DEVILLE,
    "benniondeville": Brokerage.BENNION_DEVILLE,
    "benniondevillehomes": Brokerage.BENNION_DEVILLE,
}

_TRANSACTION_TYPE_KEYS = {
    "sale": TransactionType.SALE,
    "referralreceived": TransactionType.REFERRAL_RECEIVED,
    # Scanned sheets describe referrals from the sending agent's side
    "referralout": TransactionType.REFERRAL_RECEIVED,
    "referralpaid": TransactionType.REFERRAL_PAID,
    "referralin": TransactionType.REFERRAL_PAID,
}


def normalize_brokerage(value: Brokerage | str) -> Brokerage:
    """Resolve a brokerage abbreviation or full name.

    Args:
        value: Brokerage enum, abbreviation ("KW", "BDH") or full name
            ("Keller Williams", "Bennion Deville Homes")

    Returns:
        Brokerage enum

    Raises:
        InvalidBrokerageError: If the value matches no known fee schedule
    """
    if isinstance(value, Brokerage):
        return value
    brokerage = _BROKERAGE_KEYS.get(_key(value))
    if brokerage is None:
        raise InvalidBrokerageError(unknown_brokerage(value))
    return brokerage


def normalize_transaction_type(value: TransactionType | str) -> TransactionType:
    """Resolve a transaction type name, including scan vocabulary.

    Raises:
        ValidationError: If the value is not a known transaction type
    """
    if isinstance(value, TransactionType):
        return value
    transaction_type = _TRANSACTION_TYPE_KEYS.get(_key(value))
    if transaction_type is None:
        raise ValidationError(
            f"Unknown transaction type '{value}'. "
            "Supported types: Sale, Referral Received, Referral Paid"
        )
    return transaction_type


def _normalize_enum(enum_cls: type[E], value: E | str, label: str) -> E:
    if isinstance(value, enum_cls):
        return value
    key = _key(value)
    for member in enum_cls:
        if key in (_key(member.value), _key(member.name)):
            return member
    choices = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"Unknown {label} '{value}'. Supported values: {choices}")


def normalize_client_type(value: ClientType | str) -> ClientType:
    return _normalize_enum(ClientType, value, "client type")


def normalize_status(value: Status | str) -> Status:
    return _normalize_enum(Status, value, "status")


def normalize_property_type(value: PropertyType | str) -> PropertyType:
    return _normalize_enum(PropertyType, value, "property type")


NORMALIZERS = {
    "transaction_type": normalize_transaction_type,
    "brokerage": normalize_brokerage,
    "client_type": normalize_client_type,
    "status": normalize_status,
    "property_type": normalize_property_type,
}
