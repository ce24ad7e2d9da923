"""Edit session for a single transaction record.

An edit session tracks, for one record being edited, which derived fields the
user has overridden and which values came from storage. Editing an input
releases exactly the derived fields that input feeds (following the formula
graph for the record's transaction type and brokerage) and recalculates; all
other derived values stay as they are.
"""

import logging
from dataclasses import replace
from typing import Any, Iterable

from commtrack.domain.brokerage import NORMALIZERS, normalize_brokerage
from commtrack.domain.commission import calculate
from commtrack.domain.entities import (
    BDH_DEDUCTION_FIELDS,
    DATE_FIELDS,
    DERIVED_FIELDS,
    ENUM_FIELDS,
    INPUT_FIELDS,
    KW_DEDUCTION_FIELDS,
    NUMERIC_DEFAULTS,
    NUMERIC_FIELDS,
    OVERRIDABLE_FIELDS,
    TIMESTAMP_FIELDS,
    UNIVERSAL_DEDUCTION_FIELDS,
    Brokerage,
    Transaction,
    resolve_field_name,
)
from commtrack.domain.errors import ValidationError, unknown_field
from commtrack.utils.amount_parser import parse_amount
from commtrack.utils.date_parser import parse_optional_date

logger = logging.getLogger(__name__)

READ_ONLY_FIELDS = ("id", "net_volume") + TIMESTAMP_FIELDS

# Derived fields a direct edit turns into drivers for their percentage
INFERENCE_FIELDS = frozenset({"gci", "referral_dollar"})

# Edges along which a driver keeps its value and re-infers its percentage
_INFERENCE_EDGES = frozenset({("closed_price", "gci"), ("gci", "referral_dollar")})


def feeds(name: str, txn: Transaction) -> tuple[str, ...]:
    """Return the derived fields computed directly from ``name``.

    The answer depends on the record's branch: for example closed price feeds
    GCI on a sale but nothing on a referral received, and E&O feeds the fee
    total only under the Keller Williams schedule.
    """
    forward = txn.transaction_type.uses_closed_price
    keller_williams = txn.brokerage is Brokerage.KELLER_WILLIAMS

    if name == "transaction_type":
        return ("gci", "referral_dollar")
    if name in ("closed_price", "commission_pct"):
        return ("gci",) if forward else ()
    if name == "referral_fee_received":
        return () if forward else ("gci",)
    if name == "referral_pct":
        return ("referral_dollar",) if forward else ()
    if name == "gci":
        return ("referral_dollar", "adjusted_gci") if forward else ("adjusted_gci",)
    if name == "referral_dollar":
        return ("adjusted_gci",)
    if name == "adjusted_gci":
        schedule = ("royalty", "company_dollar") if keller_williams else ("pre_split_deduction",)
        return schedule + ("total_brokerage_fees", "nci")
    if name == "brokerage":
        return ("royalty", "company_dollar", "pre_split_deduction", "total_brokerage_fees")
    if name in ("royalty", "company_dollar") + KW_DEDUCTION_FIELDS:
        return ("total_brokerage_fees",) if keller_williams else ()
    if name in ("pre_split_deduction", "bdh_split_pct") + BDH_DEDUCTION_FIELDS:
        return () if keller_williams else ("total_brokerage_fees",)
    if name in UNIVERSAL_DEDUCTION_FIELDS:
        return ("total_brokerage_fees",)
    if name == "total_brokerage_fees":
        return ("nci",)
    return ()


class EditSession:
    """In-progress edit of one transaction.

    Pin state lives on the session only; it is discarded when the record is
    saved and never shared between sessions.
    """

    def __init__(self, record: Transaction, stored: Iterable[str] = ()):
        """Initialize an edit session.

        Args:
            record: Starting record
            stored: Derived fields whose values came from storage and are kept
                until an input that feeds them changes
        """
        self._pins: set[str] = set()
        self._stored: set[str] = set(stored)
        self._changed: list[str] = []
        self._record = calculate(record, self.held, drivers=())

    @classmethod
    def new(cls, brokerage: Brokerage | str = Brokerage.KELLER_WILLIAMS) -> "EditSession":
        """Start editing an empty record for the given brokerage."""
        return cls(Transaction(brokerage=normalize_brokerage(brokerage)))

    @classmethod
    def open(cls, record: Transaction) -> "EditSession":
        """Re-open a stored record for editing, with no pins."""
        return cls(record, stored=OVERRIDABLE_FIELDS)

    @property
    def record(self) -> Transaction:
        """Current state of the record, derived fields included."""
        return self._record

    @property
    def held(self) -> frozenset[str]:
        """Derived fields the engine must currently leave untouched."""
        return frozenset(self._pins | self._stored)

    @property
    def pinned(self) -> frozenset[str]:
        """Derived fields the user has overridden in this session."""
        return frozenset(self._pins)

    @property
    def changed_fields(self) -> tuple[str, ...]:
        """Fields set in this session, in the order they were first set."""
        return tuple(self._changed)

    def is_pinned(self, name: str) -> bool:
        return self._resolve(name) in self._pins

    def set_field(self, name: str, value: Any) -> Transaction:
        """Set one field as if the user typed it, then recalculate.

        Args:
            name: Field name (snake_case, camelCase or dashed)
            value: Raw string or typed value

        Returns:
            Updated record

        Raises:
            ValidationError: If the field is unknown or read-only, or an
                enumerated value is not recognized
            InvalidBrokerageError: If a brokerage value is not recognized
        """
        attr = self._resolve(name)
        if attr in READ_ONLY_FIELDS:
            raise ValidationError(f"Field '{attr}' cannot be edited")

        self._record = replace(self._record, **{attr: self._coerce(attr, value)})
        if attr not in self._changed:
            self._changed.append(attr)

        if attr in OVERRIDABLE_FIELDS:
            # referral_dollar stays zero when the referral fee is received
            if attr != "referral_dollar" or self._record.transaction_type.uses_closed_price:
                self._pins.add(attr)
                self._stored.discard(attr)
        elif not self._is_calculation_input(attr):
            return self._record

        self._release_dependents(attr)
        self._record = calculate(self._record, self.held, drivers=self._pins & INFERENCE_FIELDS)
        return self._record

    def set_fields(self, values: dict[str, Any]) -> Transaction:
        """Set several fields in order."""
        for name, value in values.items():
            self.set_field(name, value)
        return self._record

    def apply_candidate(self, fields: dict[str, Any]) -> Transaction:
        """Apply a scanned candidate's fields as ordinary user input.

        Classification fields go first, then the remaining inputs, then the
        derived values so that any figure read off the document is pinned.
        Descriptive values that cannot be recognized are skipped.
        """
        resolved = {}
        for name, value in fields.items():
            attr = resolve_field_name(name)
            if attr is None or attr in READ_ONLY_FIELDS:
                logger.warning("Ignoring candidate field '%s'", name)
                continue
            resolved[attr] = value

        ordered = [a for a in ENUM_FIELDS if a in resolved]
        ordered += [a for a in resolved if a in INPUT_FIELDS and a not in ENUM_FIELDS]
        ordered += [a for a in DERIVED_FIELDS if a in resolved]

        for attr in ordered:
            try:
                self.set_field(attr, resolved[attr])
            except ValidationError as e:
                if attr in ("brokerage", "transaction_type"):
                    raise
                logger.warning("Skipping candidate field '%s': %s", attr, e)
        return self._record

    def _resolve(self, name: str) -> str:
        attr = resolve_field_name(name)
        if attr is None:
            raise ValidationError(unknown_field(name))
        return attr

    def _is_calculation_input(self, attr: str) -> bool:
        return attr in ("transaction_type", "brokerage") or (
            attr in NUMERIC_FIELDS and attr not in ("list_price", "assistant_bonus")
        )

    def _release_dependents(self, source: str) -> None:
        """Release every derived field transitively fed by ``source``."""
        forward = self._record.transaction_type.uses_closed_price
        pending = [source]
        visited = set()
        while pending:
            name = pending.pop()
            for dependent in feeds(name, self._record):
                if dependent in visited:
                    continue
                if forward and dependent in self._pins and (name, dependent) in _INFERENCE_EDGES:
                    # The driver keeps its value; its percentage is re-inferred
                    continue
                visited.add(dependent)
                self._pins.discard(dependent)
                self._stored.discard(dependent)
                pending.append(dependent)

    def _coerce(self, attr: str, value: Any) -> Any:
        if attr in ENUM_FIELDS:
            return NORMALIZERS[attr](value)
        if attr in NUMERIC_FIELDS:
            return _coerce_number(attr, value)
        if attr in DATE_FIELDS:
            try:
                return parse_optional_date(value)
            except ValueError as e:
                logger.warning("Clearing %s: %s", attr, e)
                return None
        return "" if value is None else str(value).strip()


def _coerce_number(attr: str, value: Any):
    """Parse a numeric field; blank or malformed input falls back to the default."""
    default = NUMERIC_DEFAULTS[attr]
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        return parse_amount(value)
    except ValueError as e:
        logger.warning("Using %s for %s: %s", default, attr, e)
        return default
