"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

from commtrack.domain.entities import (
    DERIVED_FIELDS,
    FIELD_ALIASES,
    INPUT_FIELDS,
    MONEY_FIELDS,
    NUMERIC_DEFAULTS,
    OVERRIDABLE_FIELDS,
    TRANSACTION_FIELDS,
    Brokerage,
    MonthlyTotal,
    Transaction,
    TransactionType,
    resolve_field_name,
)


class TestTransaction:
    """Tests for Transaction entity."""

    def test_defaults(self):
        """Test a new transaction is an empty Keller Williams sale."""
        txn = Transaction()

        assert txn.transaction_type is TransactionType.SALE
        assert txn.brokerage is Brokerage.KELLER_WILLIAMS
        assert txn.closed_price == Decimal("0")
        assert txn.bdh_split_pct == Decimal("94")
        assert txn.closing_date is None
        assert txn.address == ""

    def test_transaction_immutability(self):
        """Test that Transaction entities are immutable."""
        txn = Transaction()
        with pytest.raises(FrozenInstanceError):
            txn.nci = Decimal("1")

    def test_transaction_equality(self):
        """Test Transaction entity equality."""
        assert Transaction(id="a", gci=Decimal("1")) == Transaction(id="a", gci=Decimal("1"))
        assert Transaction(id="a") != Transaction(id="b")


class TestEnums:
    """Tests for enumerations."""

    def test_brokerage_full_name(self):
        assert Brokerage.KELLER_WILLIAMS.full_name == "Keller Williams"
        assert Brokerage.BENNION_DEVILLE.full_name == "Bennion Deville Homes"

    def test_uses_closed_price(self):
        assert TransactionType.SALE.uses_closed_price
        assert TransactionType.REFERRAL_PAID.uses_closed_price
        assert not TransactionType.REFERRAL_RECEIVED.uses_closed_price


class TestFieldCatalogues:
    """Tests for field name catalogues."""

    def test_derived_fields(self):
        assert DERIVED_FIELDS[0] == "net_volume"
        assert "net_volume" not in OVERRIDABLE_FIELDS
        assert {"gci", "nci", "total_brokerage_fees"} <= set(OVERRIDABLE_FIELDS)

    def test_input_fields(self):
        assert "closed_price" in INPUT_FIELDS
        assert "bdh_split_pct" in INPUT_FIELDS
        assert not set(INPUT_FIELDS) & set(DERIVED_FIELDS)
        assert "id" not in INPUT_FIELDS and "created_at" not in INPUT_FIELDS

    def test_every_numeric_field_has_default(self):
        for name in MONEY_FIELDS:
            assert name in NUMERIC_DEFAULTS

    def test_aliases(self):
        assert FIELD_ALIASES["closedPrice"] == "closed_price"
        assert FIELD_ALIASES["foundation10"] == "foundation10"
        assert set(FIELD_ALIASES.values()) == set(TRANSACTION_FIELDS)

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("closed_price", "closed_price"),
            ("closedPrice", "closed_price"),
            ("closed-price", "closed_price"),
            (" NCI ", "nci"),
            ("kwNextGen", "kw_next_gen"),
            ("salePrice", None),
        ],
    )
    def test_resolve_field_name(self, name, expected):
        assert resolve_field_name(name) == expected


def test_monthly_total_label():
    total = MonthlyTotal(month=date(2024, 2, 1), gci=Decimal("0"), nci=Decimal("0"), transactions=0)

    assert total.label == "Feb 2024"
