"""Domain model entities for commtrack.

These are pure data classes representing business concepts, independent of
database schema and of the spreadsheet row layout. Monetary and percentage
fields are Decimals that default to zero, so calculation code never has to
guard against missing values.
"""

from dataclasses import dataclass, fields
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")
DEFAULT_BDH_SPLIT_PCT = Decimal("94")


class TransactionType(str, Enum):
    """Selects which GCI branch of the commission calculation applies."""

    SALE = "Sale"
    REFERRAL_RECEIVED = "Referral Received"
    REFERRAL_PAID = "Referral Paid"

    @property
    def uses_closed_price(self) -> bool:
        """True when GCI is computed forward from closed price and commission %."""
        return self is not TransactionType.REFERRAL_RECEIVED


class Brokerage(str, Enum):
    """Brokerage whose deduction schedule applies to a transaction."""

    KELLER_WILLIAMS = "KW"
    BENNION_DEVILLE = "BDH"

    @property
    def full_name(self) -> str:
        return _BROKERAGE_NAMES[self]


_BROKERAGE_NAMES = {
    Brokerage.KELLER_WILLIAMS: "Keller Williams",
    Brokerage.BENNION_DEVILLE: "Bennion Deville Homes",
}


class ClientType(str, Enum):
    BUYER = "Buyer"
    SELLER = "Seller"


class Status(str, Enum):
    CLOSED = "Closed"
    PENDING = "Pending"
    ACTIVE = "Active"


class PropertyType(str, Enum):
    RESIDENTIAL = "Residential"
    COMMERCIAL = "Commercial"
    LAND = "Land"


@dataclass(frozen=True)
class Transaction:
    """Commission transaction domain entity.

    Holds both the user inputs and the derived commission fields. Derived
    fields are ordinary values once set; the edit session decides whether
    the engine may overwrite them.
    """

    id: str = ""
    transaction_type: TransactionType = TransactionType.SALE
    brokerage: Brokerage = Brokerage.KELLER_WILLIAMS
    property_type: PropertyType = PropertyType.RESIDENTIAL
    client_type: ClientType = ClientType.SELLER
    status: Status = Status.CLOSED
    source: str = ""
    address: str = ""
    city: str = ""
    referring_agent: str = ""
    list_date: Optional[date] = None
    closing_date: Optional[date] = None

    # Pricing and commission inputs
    list_price: Decimal = ZERO
    closed_price: Decimal = ZERO
    commission_pct: Decimal = ZERO
    referral_pct: Decimal = ZERO
    referral_fee_received: Decimal = ZERO

    # Keller Williams deductions
    eo: Decimal = ZERO
    hoa_transfer: Decimal = ZERO
    home_warranty: Decimal = ZERO
    kw_cares: Decimal = ZERO
    kw_next_gen: Decimal = ZERO
    bold_scholarship: Decimal = ZERO
    tc_concierge: Decimal = ZERO
    jelmberg_team: Decimal = ZERO

    # Bennion Deville deductions (eo is shared with the KW set)
    bdh_split_pct: Decimal = DEFAULT_BDH_SPLIT_PCT
    asf: Decimal = ZERO
    foundation10: Decimal = ZERO
    admin_fee: Decimal = ZERO

    # Universal
    other_deductions: Decimal = ZERO
    buyers_agent_split: Decimal = ZERO
    assistant_bonus: Decimal = ZERO  # informational only

    # Derived
    net_volume: Decimal = ZERO
    gci: Decimal = ZERO
    referral_dollar: Decimal = ZERO
    adjusted_gci: Decimal = ZERO
    royalty: Decimal = ZERO
    company_dollar: Decimal = ZERO
    pre_split_deduction: Decimal = ZERO
    total_brokerage_fees: Decimal = ZERO
    nci: Decimal = ZERO

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


ENUM_FIELDS = ("transaction_type", "brokerage", "property_type", "client_type", "status")
TEXT_FIELDS = ("id", "source", "address", "city", "referring_agent")
DATE_FIELDS = ("list_date", "closing_date")
PERCENT_FIELDS = ("commission_pct", "referral_pct", "bdh_split_pct")
KW_DEDUCTION_FIELDS = (
    "eo",
    "hoa_transfer",
    "home_warranty",
    "kw_cares",
    "kw_next_gen",
    "bold_scholarship",
    "tc_concierge",
    "jelmberg_team",
)
BDH_DEDUCTION_FIELDS = ("asf", "foundation10", "admin_fee")
UNIVERSAL_DEDUCTION_FIELDS = ("other_deductions", "buyers_agent_split")
DERIVED_FIELDS = (
    "net_volume",
    "gci",
    "referral_dollar",
    "adjusted_gci",
    "royalty",
    "company_dollar",
    "pre_split_deduction",
    "total_brokerage_fees",
    "nci",
)
# Derived fields a user may type into directly; net_volume always mirrors closed price.
OVERRIDABLE_FIELDS = DERIVED_FIELDS[1:]
MONEY_FIELDS = (
    ("list_price", "closed_price", "referral_fee_received")
    + KW_DEDUCTION_FIELDS
    + BDH_DEDUCTION_FIELDS
    + UNIVERSAL_DEDUCTION_FIELDS
    + ("assistant_bonus",)
    + DERIVED_FIELDS
)
NUMERIC_FIELDS = PERCENT_FIELDS + MONEY_FIELDS
TIMESTAMP_FIELDS = ("created_at", "updated_at")


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


TRANSACTION_FIELDS = tuple(f.name for f in fields(Transaction))
INPUT_FIELDS = tuple(
    name for name in TRANSACTION_FIELDS if name not in ("id",) + DERIVED_FIELDS + TIMESTAMP_FIELDS
)
FIELD_ALIASES = {_camel_case(name): name for name in TRANSACTION_FIELDS}
NUMERIC_DEFAULTS = {
    f.name: f.default for f in fields(Transaction) if f.name in NUMERIC_FIELDS
}


def resolve_field_name(name: str) -> Optional[str]:
    """Resolve snake_case, camelCase or dashed field names to attribute names.

    Returns None if the name is not a transaction field.
    """
    candidate = name.strip()
    if candidate in TRANSACTION_FIELDS:
        return candidate
    if candidate in FIELD_ALIASES:
        return FIELD_ALIASES[candidate]
    candidate = candidate.replace("-", "_").lower()
    if candidate in TRANSACTION_FIELDS:
        return candidate
    return None


@dataclass(frozen=True)
class CommissionSummary:
    """Aggregate commission metrics for a set of transactions."""

    total_gci: Decimal
    total_nci: Decimal
    total_transactions: int
    average_nci: Decimal
    total_volume: Decimal
    total_referral_fees: Decimal


@dataclass(frozen=True)
class MonthlyTotal:
    """GCI and NCI totals for one closing month."""

    month: date
    gci: Decimal
    nci: Decimal
    transactions: int

    @property
    def label(self) -> str:
        return self.month.strftime("%b %Y")


@dataclass(frozen=True)
class Insight:
    """One headline figure derived from the transaction history."""

    label: str
    value: str
    detail: str
