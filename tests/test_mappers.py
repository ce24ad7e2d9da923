"""Tests for database mappers."""

from datetime import date, datetime, UTC
from decimal import Decimal

from commtrack.database.models import Transaction as ORMTransaction
from commtrack.database.mappers import transaction_to_columns, transaction_to_domain
from commtrack.domain.entities import (
    Brokerage,
    ClientType,
    PropertyType,
    Status,
    Transaction,
    TransactionType,
)


def make_transaction():
    now = datetime.now(UTC)
    return Transaction(
        id="txn-1",
        transaction_type=TransactionType.REFERRAL_PAID,
        brokerage=Brokerage.BENNION_DEVILLE,
        property_type=PropertyType.COMMERCIAL,
        client_type=ClientType.BUYER,
        status=Status.PENDING,
        address="8 Desert Rd",
        closing_date=date(2024, 3, 31),
        closed_price=Decimal("200000"),
        commission_pct=Decimal("2.5"),
        gci=Decimal("5000.00"),
        created_at=now,
        updated_at=now,
    )


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_enums_stored_by_value(self):
        """Test enum attributes become their display strings."""
        columns = transaction_to_columns(make_transaction())

        assert columns["transaction_type"] == "Referral Paid"
        assert columns["brokerage"] == "BDH"
        assert columns["client_type"] == "Buyer"
        assert columns["closed_price"] == Decimal("200000")

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction to domain Transaction."""
        original = make_transaction()
        orm_transaction = ORMTransaction(**transaction_to_columns(original))

        domain_transaction = transaction_to_domain(orm_transaction)

        assert isinstance(domain_transaction, Transaction)
        assert domain_transaction == original
        assert domain_transaction.brokerage is Brokerage.BENNION_DEVILLE

    def test_missing_numbers_take_defaults(self):
        """Test NULL numeric columns map to their defaults."""
        columns = transaction_to_columns(make_transaction())
        columns["bdh_split_pct"] = None
        columns["nci"] = None

        domain_transaction = transaction_to_domain(ORMTransaction(**columns))

        assert domain_transaction.bdh_split_pct == Decimal("94")
        assert domain_transaction.nci == Decimal("0")
