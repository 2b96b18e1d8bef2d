"""Tests for amount parser."""

import pytest
from decimal import Decimal
from venueledger.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("500000", Decimal("500000")),
        ("500,000", Decimal("500000")),
        ("500000.50", Decimal("500000.50")),
        ("500 000 VND", Decimal("500000")),
        ("500000vnd", Decimal("500000")),
        ("₫500,000", Decimal("500000")),
        ("$1,234.56", Decimal("1234.56")),
    ],
)
def test_parse_amount_formats(text, expected):
    assert parse_amount(text) == expected


def test_sign_is_kept():
    """Test that negative amounts are returned as written."""
    assert parse_amount("-250") == Decimal("-250")


@pytest.mark.parametrize("text", ["", "   ", "abc", "12abc", "NaN", "Infinity"])
def test_invalid_amounts(text):
    with pytest.raises(ValueError):
        parse_amount(text)
