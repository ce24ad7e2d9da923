"""Tests for amount parsing."""

import pytest
from decimal import Decimal

from commtrack.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-$123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        ("2.5%", Decimal("2.5")),
        (" 500000 ", Decimal("500000")),
    ],
)
def test_parse_amount_strings(text, expected):
    assert parse_amount(text) == expected


def test_parse_numbers():
    """Test numbers keep their decimal representation."""
    assert parse_amount(0.1) == Decimal("0.1")
    assert parse_amount(3) == Decimal("3")
    assert parse_amount(Decimal("2.75")) == Decimal("2.75")


@pytest.mark.parametrize("value", ["", "   ", "abc", "NaN", "Infinity", True])
def test_parse_invalid_amount(value):
    with pytest.raises(ValueError):
        parse_amount(value)
