"""Immutable value objects for the ledger domain.

Money, IBAN, ExpectedPaymentDueDate and Frequency validate themselves on
construction, so an instance that exists is always in a valid state. None of
them perform I/O.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from dateutil.easter import easter
from dateutil.relativedelta import relativedelta

from homeledger.domain.errors import ValidationError, currency_mismatch

DEFAULT_CURRENCY = "EUR"

_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
_IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]+$")


def _to_decimal(value: Any, label: str = "Amount") -> Decimal:
    """Convert a numeric input to a finite Decimal.

    Floats go through their string form so 0.1 stays Decimal("0.1").

    Raises:
        ValidationError: If the value is not a finite number
    """
    message = f"{label} must be a finite number"
    if value is None or isinstance(value, bool):
        raise ValidationError(message)

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise ValidationError(message)
    else:
        raise ValidationError(message)

    if not result.is_finite():
        raise ValidationError(message)
    return result


@dataclass(frozen=True, eq=False)
class Money:
    """Amount paired with an ISO 4217 currency code.

    Arithmetic and comparison between different currencies raise
    ValidationError instead of converting. Equality raises too, so a dict
    or set keyed by Money must hold a single currency: a hash collision
    between two currencies makes the lookup raise.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _to_decimal(self.amount))

        code = self.currency.strip().upper() if isinstance(self.currency, str) else ""
        if not _CURRENCY_PATTERN.match(code):
            raise ValidationError("Currency must be a 3-letter ISO 4217 code")
        object.__setattr__(self, "currency", code)

    @classmethod
    def from_amount(cls, amount: Any, currency: str = DEFAULT_CURRENCY) -> "Money":
        """Create Money from a number, numeric string or Decimal.

        Args:
            amount: Amount at the precision the caller wants stored
            currency: Three-letter currency code (defaults to EUR)

        Returns:
            Money value

        Raises:
            ValidationError: If the amount is not finite or the currency is invalid
        """
        return cls(amount, currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(Decimal(0), currency)

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValidationError(currency_mismatch(self.currency, other.currency))

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        self._assert_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency)

    def __abs__(self) -> "Money":
        return Money(abs(self.amount), self.currency)

    def add(self, other: "Money") -> "Money":
        return self + other

    def subtract(self, other: "Money") -> "Money":
        return self - other

    def negate(self) -> "Money":
        return -self

    def multiply(self, factor: Any) -> "Money":
        return Money(self.amount * _to_decimal(factor, "Factor"), self.currency)

    def divide(self, divisor: Any) -> "Money":
        value = _to_decimal(divisor, "Divisor")
        if value == 0:
            raise ValidationError("Divisor must be a non-zero finite number")
        return Money(self.amount / value, self.currency)

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._assert_same_currency(other)
        return self.amount == other.amount

    def __hash__(self) -> int:
        return hash((self.amount, self.currency))

    def __lt__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def to_dict(self) -> dict[str, str]:
        return {"amount": str(self.amount), "currency": self.currency}

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __repr__(self) -> str:
        return f"Money({str(self.amount)!r}, {self.currency!r})"


@dataclass(frozen=True)
class IBAN:
    """Bank account identifier, validated on format only (no mod-97 check)."""

    value: str

    def __post_init__(self) -> None:
        cleaned = self.value.strip().upper() if isinstance(self.value, str) else ""
        if not _IBAN_PATTERN.match(cleaned):
            raise ValidationError("Invalid IBAN format")
        object.__setattr__(self, "value", cleaned)

    @classmethod
    def create(cls, raw: str) -> "IBAN":
        """Normalize (trim, uppercase) and validate an IBAN string.

        Raises:
            ValidationError: If the normalized string is not IBAN-shaped
        """
        return cls(raw)

    @classmethod
    def create_optional(cls, raw: Optional[str]) -> Optional["IBAN"]:
        """Like create, but None or an empty string gives None."""
        if raw is None or not raw.strip():
            return None
        return cls(raw)

    @property
    def country_code(self) -> str:
        return self.value[:2]

    def format(self) -> str:
        """Group into blocks of four, e.g. 'NL91 ABNA 0417 1643 00'."""
        return " ".join(self.value[i : i + 4] for i in range(0, len(self.value), 4))

    def __str__(self) -> str:
        return self.value


class ShiftDirection(str, Enum):
    """How a due date that lands on a closed banking day is moved."""

    BEFORE = "before"
    AFTER = "after"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


def is_target2_closed(day: date) -> bool:
    """Check whether TARGET2 is closed on a given day.

    Closed on weekends, New Year's Day, Good Friday, Easter Monday,
    Labour Day (1 May), Christmas Day and 26 December.
    """
    if day.weekday() >= 5:
        return True

    if (day.month, day.day) in {(1, 1), (5, 1), (12, 25), (12, 26)}:
        return True

    easter_sunday = easter(day.year)
    return day in (easter_sunday - timedelta(days=2), easter_sunday + timedelta(days=1))


def _day_in_month(year: int, month: int, day_of_month: int) -> date:
    # relativedelta(day=N) clamps to the last day of shorter months
    return date(year, month, 1) + relativedelta(day=day_of_month)


@dataclass(frozen=True)
class ExpectedPaymentDueDate:
    """Day of month on which a payment is due, plus the shift policy."""

    day_of_month: int
    shift_direction: ShiftDirection = ShiftDirection.NONE

    def __post_init__(self) -> None:
        day = self.day_of_month
        if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31:
            raise ValidationError("Payment due day must be an integer between 1 and 31")

        try:
            direction = ShiftDirection(self.shift_direction)
        except ValueError:
            raise ValidationError("Shift direction must be before, after, or none")
        object.__setattr__(self, "shift_direction", direction)

    @classmethod
    def create(
        cls, day_of_month: int, shift_direction: "ShiftDirection | str"
    ) -> "ExpectedPaymentDueDate":
        """Create a due date policy.

        Args:
            day_of_month: Day of month, 1-31
            shift_direction: 'before', 'after' or 'none'

        Raises:
            ValidationError: If either argument is out of range
        """
        return cls(day_of_month, shift_direction)

    def get_day_of_month(self) -> int:
        return self.day_of_month

    def get_shift_direction(self) -> ShiftDirection:
        return self.shift_direction

    def next_due_date(self, from_date: Optional[date] = None) -> date:
        """Resolve the first due date on or after from_date.

        A day past the end of a short month falls on that month's last day.
        With a before/after policy a closed TARGET2 day is moved to the
        nearest open day in that direction; 'none' leaves it where it is.
        """
        if from_date is None:
            from_date = date.today()

        due = _day_in_month(from_date.year, from_date.month, self.day_of_month)
        if due < from_date:
            following = from_date.replace(day=1) + relativedelta(months=1)
            due = _day_in_month(following.year, following.month, self.day_of_month)

        if self.shift_direction is ShiftDirection.NONE:
            return due

        step = timedelta(days=-1 if self.shift_direction is ShiftDirection.BEFORE else 1)
        while is_target2_closed(due):
            due += step
        return due


_FREQUENCY_STEPS = {
    "weekly": relativedelta(weeks=1),
    "monthly": relativedelta(months=1),
    "yearly": relativedelta(years=1),
}


class Frequency(str, Enum):
    """Recurrence cadence of a rule."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def create(cls, value: "Frequency | str") -> "Frequency":
        """Parse a frequency from its string form.

        Raises:
            ValidationError: If the value is not weekly, monthly or yearly
        """
        if isinstance(value, Frequency):
            return value
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError):
            raise ValidationError("Frequency must be weekly, monthly, or yearly")

    def next_occurrence(self, from_date: date) -> date:
        return from_date + _FREQUENCY_STEPS[self.value]

    def occurrences_between(self, start_date: date, end_date: date) -> list[date]:
        """List every occurrence from start_date up to and including end_date.

        Each occurrence is computed from start_date, so a monthly series that
        starts on the 31st returns to the 31st after a short month.
        """
        if start_date > end_date:
            raise ValidationError("Start date must be before end date")

        step = _FREQUENCY_STEPS[self.value]
        occurrences = []
        n = 0
        current = start_date
        while current <= end_date:
            occurrences.append(current)
            n += 1
            current = start_date + step * n
        return occurrences

    def __str__(self) -> str:
        return self.value
