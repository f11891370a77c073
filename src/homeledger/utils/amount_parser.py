"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from homeledger.domain.errors import ValidationError
from homeledger.domain.values import DEFAULT_CURRENCY, Money

CURRENCY_SYMBOLS = {"€": "EUR", "$": "USD", "£": "GBP", "¥": "JPY"}

_CODE_SUFFIX = re.compile(r"^(?P<number>.+?)\s+(?P<code>[A-Za-z]{3})$")


def _split_currency(amount_str: str) -> tuple[str, Optional[str]]:
    match = _CODE_SUFFIX.match(amount_str)
    if match:
        return match.group("number"), match.group("code").upper()

    for symbol, code in CURRENCY_SYMBOLS.items():
        if symbol in amount_str:
            return amount_str.replace(symbol, ""), code
    return amount_str, None


def _parse_number(number: str, original: str) -> Decimal:
    number = number.strip()
    is_negative = False
    if number.startswith("(") and number.endswith(")"):
        is_negative = True
        number = number[1:-1]

    number = number.replace(",", "").replace(" ", "")
    try:
        amount = Decimal(number)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{original}'")

    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{original}'")
    return -amount if is_negative else amount


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "123.45", "-123.45", "1,234.56", "(123.45)" (negative),
    currency symbols ("€123.45") and a trailing code ("123.45 EUR").

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    number, _ = _split_currency(amount_str.strip())
    return _parse_number(number, amount_str)


def parse_money(amount_str: str, default_currency: str = DEFAULT_CURRENCY) -> Money:
    """Parse an amount string into Money.

    A currency symbol or trailing code in the string wins over
    default_currency.

    Raises:
        ValidationError: If the amount or currency is invalid
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    number, code = _split_currency(amount_str.strip())
    return Money.from_amount(_parse_number(number, amount_str), code or default_currency)
