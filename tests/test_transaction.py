"""Tests for transaction service."""

import pytest
from datetime import date
from decimal import Decimal

from commtrack.domain.edit_session import EditSession
from commtrack.domain.entities import Brokerage, ClientType, Transaction
from commtrack.domain.errors import InvalidBrokerageError, NotFoundError, ValidationError


def test_create_transaction(transaction_service):
    """Test creating a transaction calculates and stores it."""
    txn = Transaction(closed_price=Decimal("500000"), commission_pct=Decimal("3"))
    transaction_id = transaction_service.create_transaction(txn)

    stored = transaction_service.get_transaction(transaction_id)
    assert stored is not None
    assert len(transaction_id) == 32
    assert stored.gci == Decimal("15000.00")
    assert stored.nci == Decimal("12600.00")
    assert stored.created_at is not None


def test_create_transaction_with_held_value(transaction_service):
    """Test held derived values are stored as given."""
    txn = Transaction(
        closed_price=Decimal("500000"), commission_pct=Decimal("3"), nci=Decimal("9000")
    )
    transaction_id = transaction_service.create_transaction(txn, held={"nci"})

    assert transaction_service.get_transaction(transaction_id).nci == Decimal("9000.00")


def test_create_transaction_invalid_brokerage(transaction_service):
    """Test an unknown brokerage is rejected before storing."""
    with pytest.raises(InvalidBrokerageError):
        transaction_service.create_transaction(Transaction(brokerage="Compass"))

    assert transaction_service.list_transactions() == []


def test_decimal_precision_round_trip(transaction_service):
    """Test inferred percentages survive storage unchanged."""
    session = EditSession.new()
    session.set_fields({"closed_price": "333333", "gci": "10000"})
    transaction_id = transaction_service.save_session(session)

    stored = transaction_service.get_transaction(transaction_id)
    assert stored.commission_pct == session.record.commission_pct
    assert stored.closed_price == Decimal("333333")


def test_get_transaction_not_found(transaction_service):
    """Test missing transactions return None."""
    assert transaction_service.get_transaction("missing") is None


def test_require_transaction_not_found(transaction_service):
    """Test require_transaction raises for missing transactions."""
    with pytest.raises(NotFoundError, match="Transaction missing not found"):
        transaction_service.require_transaction("missing")


def test_update_transaction_preserves_identity(transaction_service, make_transaction):
    """Test updating keeps the ID and creation time."""
    original = make_transaction(closed_price="500000", commission_pct="3")

    session = transaction_service.open_session(original.id)
    session.set_field("closed_price", "600000")
    transaction_service.save_session(session, original.id)

    updated = transaction_service.get_transaction(original.id)
    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert updated.gci == Decimal("18000.00")


def test_update_keeps_stored_override(transaction_service, make_transaction):
    """Test an override survives a descriptive edit after reopening."""
    original = make_transaction(closed_price="500000", commission_pct="3", nci="9000")

    session = transaction_service.open_session(original.id)
    session.set_field("address", "12 Palm Way")
    transaction_service.save_session(session, original.id)

    updated = transaction_service.get_transaction(original.id)
    assert updated.address == "12 Palm Way"
    assert updated.nci == Decimal("9000.00")


def test_update_transaction_not_found(transaction_service):
    """Test updating a missing transaction raises."""
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction("missing", Transaction())


def test_delete_transaction(transaction_service, make_transaction):
    """Test deleting a transaction."""
    txn = make_transaction(closed_price="500000", commission_pct="3")
    transaction_service.delete_transaction(txn.id)

    assert transaction_service.get_transaction(txn.id) is None


def test_delete_transaction_not_found(transaction_service):
    """Test deleting a missing transaction raises."""
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction("missing")


def test_delete_checks_existence_without_loading(transaction_service, temp_db, make_transaction, monkeypatch):
    """Test delete asks the store whether the record exists instead of loading it."""
    txn = make_transaction(closed_price="500000", commission_pct="3")
    checked = []
    exists = temp_db.transaction_exists

    def record_check(transaction_id):
        checked.append(transaction_id)
        return exists(transaction_id)

    monkeypatch.setattr(temp_db, "transaction_exists", record_check)
    monkeypatch.setattr(temp_db, "get_transaction", lambda transaction_id: pytest.fail("record loaded"))

    transaction_service.delete_transaction(txn.id)

    assert checked == [txn.id]
    assert not exists(txn.id)


def test_list_transactions_sorted_newest_first(
transaction_service, sample_transactions):
    """Test default ordering is by closing date, newest first."""
    transactions = transaction_service.list_transactions()

    assert [t.closing_date for t in transactions] == [
        date(2024, 3, 31),
        date(2024, 2, 15),
        date(2023, 11, 20),
    ]


def test_list_transactions_oldest_first(transaction_service, sample_transactions):
    """Test oldest-first ordering."""
    transactions = transaction_service.list_transactions(sort="oldest")

    assert transactions[0].closing_date == date(2023, 11, 20)


def test_list_transactions_undated_last(transaction_service, sample_transactions, make_transaction):
    """Test transactions without a closing date come last."""
    undated = make_transaction(address="No date yet")

    assert transaction_service.list_transactions()[-1].id == undated.id
    assert transaction_service.list_transactions(sort="oldest")[-1].id == undated.id


def test_list_transactions_filters(transaction_service, sample_transactions):
    """Test year, client type, brokerage and property type filters."""
    assert len(transaction_service.list_transactions(year=2024)) == 2
    assert len(transaction_service.list_transactions(client_type="buyer")) == 2
    assert len(transaction_service.list_transactions(client_type=ClientType.SELLER)) == 1
    assert len(transaction_service.list_transactions(brokerage="BDH")) == 1
    assert len(transaction_service.list_transactions(brokerage=Brokerage.KELLER_WILLIAMS)) == 2
    assert len(transaction_service.list_transactions(property_type="Land")) == 1
    assert transaction_service.list_transactions(year=2022) == []


def test_list_transactions_invalid_filter(transaction_service):
    """Test unknown filter values and sort orders raise."""
    with pytest.raises(InvalidBrokerageError):
        transaction_service.list_transactions(brokerage="Compass")
    with pytest.raises(ValidationError):
        transaction_service.list_transactions(sort="sideways")


def test_replace_all(transaction_service, sample_transactions):
    """Test replacing the collection stores records as-is."""
    records = [
        Transaction(id="sheet-1", address="A", nci=Decimal("123.45")),
        Transaction(address="B"),
    ]
    count = transaction_service.replace_all(records)

    stored = transaction_service.list_transactions()
    assert count == 2
    assert [t.address for t in stored] == ["A", "B"]
    assert stored[0].id == "sheet-1"
    # Not recalculated
    assert stored[0].nci == Decimal("123.45")
    assert stored[1].id
