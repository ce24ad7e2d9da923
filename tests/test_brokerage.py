"""Tests for classification value normalization."""

import pytest

from commtrack.domain.brokerage import (
    NORMALIZERS,
    normalize_brokerage,
    normalize_client_type,
    normalize_property_type,
    normalize_status,
    normalize_transaction_type,
)
from commtrack.domain.entities import (
    Brokerage,
    ClientType,
    PropertyType,
    Status,
    TransactionType,
)
from commtrack.domain.errors import InvalidBrokerageError, ValidationError


@pytest.mark.parametrize(
    "value,expected",
    [
        ("KW", Brokerage.KELLER_WILLIAMS),
        ("kw", Brokerage.KELLER_WILLIAMS),
        ("Keller Williams", Brokerage.KELLER_WILLIAMS),
        ("Keller Williams Realty", Brokerage.KELLER_WILLIAMS),
        ("BDH", Brokerage.BENNION_DEVILLE),
        ("Bennion Deville Homes", Brokerage.BENNION_DEVILLE),
        (Brokerage.BENNION_DEVILLE, Brokerage.BENNION_DEVILLE),
    ],
)
def test_normalize_brokerage(value, expected):
    assert normalize_brokerage(value) is expected


@pytest.mark.parametrize("value", ["Compass", "", "K W X"])
def test_unknown_brokerage(value):
    with pytest.raises(InvalidBrokerageError):
        normalize_brokerage(value)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Sale", TransactionType.SALE),
        ("referral received", TransactionType.REFERRAL_RECEIVED),
        ("Referral Out", TransactionType.REFERRAL_RECEIVED),
        ("Referral-Paid", TransactionType.REFERRAL_PAID),
        ("Referral In", TransactionType.REFERRAL_PAID),
    ],
)
def test_normalize_transaction_type(value, expected):
    assert normalize_transaction_type(value) is expected


def test_unknown_transaction_type():
    with pytest.raises(ValidationError, match="Supported types"):
        normalize_transaction_type("Lease")


def test_descriptive_enums():
    """Test enums resolve from their value or member name."""
    assert normalize_client_type("seller") is ClientType.SELLER
    assert normalize_status("PENDING") is Status.PENDING
    assert normalize_property_type("Land") is PropertyType.LAND


def test_unknown_descriptive_value():
    with pytest.raises(ValidationError, match="Supported values: Buyer, Seller"):
        normalize_client_type("Tenant")


def test_normalizers_cover_enum_fields():
    assert set(NORMALIZERS) == {
        "transaction_type",
        "brokerage",
        "client_type",
        "status",
        "property_type",
    }
