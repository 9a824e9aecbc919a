"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from lexledger.utils.amount_parser import parse_amount, to_decimal


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("$1,234.56", Decimal("1234.56")),
        ("E£ 50.75", Decimal("50.75")),
        ("EGP 2,000", Decimal("2000")),
        ("(99.10)", Decimal("-99.10")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity", "1.2.3"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_to_decimal_float_keeps_short_repr():
    assert to_decimal(50.75) == Decimal("50.75")
    assert str(to_decimal(0.1)) == "0.1"


def test_to_decimal_passes_decimal_and_int():
    assert to_decimal(Decimal("1.50")) == Decimal("1.50")
    assert to_decimal(7) == Decimal(7)


@pytest.mark.parametrize("value", [None, True, [1], float("nan"), float("-inf"), Decimal("NaN")])
def test_to_decimal_rejects(value):
    with pytest.raises(ValueError):
        to_decimal(value)
