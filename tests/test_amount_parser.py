"""Tests for amount parsing utilities."""

from decimal import Decimal

import pytest

from homeledger.domain.errors import ValidationError
from homeledger.utils.amount_parser import parse_amount, parse_money


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        ("€123.45", Decimal("123.45")),
        ("123.45 EUR", Decimal("123.45")),
        ("  950 ", Decimal("950")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["abc", "12.3.4", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValidationError, match="Could not parse amount"):
        parse_amount(text)


@pytest.mark.parametrize("text", ["", "   "])
def test_parse_amount_empty(text):
    with pytest.raises(ValidationError, match="Empty amount string"):
        parse_amount(text)


def test_parse_money_default_currency():
    money = parse_money("42.50")
    assert money.amount == Decimal("42.50")
    assert money.currency == "EUR"
    assert parse_money("42.50", "gbp").currency == "GBP"


def test_parse_money_currency_in_string_wins():
    assert parse_money("$10", "EUR").currency == "USD"
    assert parse_money("10 usd", "EUR").currency == "USD"


def test_parse_money_invalid_currency():
    with pytest.raises(ValidationError):
        parse_money("10", "EURO")
