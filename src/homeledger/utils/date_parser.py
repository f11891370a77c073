"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Callable, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from homeledger.domain.errors import ValidationError

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def _start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _start_of_month(day: date) -> date:
    return day.replace(day=1)


def _start_of_year(day: date) -> date:
    return day.replace(month=1, day=1)


_PERIOD_STARTS: dict[str, Callable[[date], date]] = {
    "week": _start_of_week,
    "month": _start_of_month,
    "year": _start_of_year,
}

_PERIOD_STEPS = {
    "week": relativedelta(weeks=1),
    "month": relativedelta(months=1),
    "year": relativedelta(years=1),
}


def _parse_relative(text: str, today: date) -> Optional[date]:
    simple = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in simple:
        return simple[text]

    prefix, _, period = text.partition(" ")
    if prefix not in ("last", "this", "next"):
        return None

    if period in _PERIOD_STARTS:
        start = _PERIOD_STARTS[period](today)
        if prefix == "last":
            return start - _PERIOD_STEPS[period]
        if prefix == "next":
            return start + _PERIOD_STEPS[period]
        return start

    if prefix == "last" and period in WEEKDAYS:
        # Most recent such weekday strictly before today
        days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
        return today - timedelta(days=days_ago)

    return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones: "today", "yesterday", "tomorrow", "last/this/next week|month|year"
    (the first day of that period) and "last monday" etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative words (defaults to today)

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    reference = today or date.today()

    relative = _parse_relative(text, reference)
    if relative is not None:
        return relative

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods run up to today; "last-*" periods are complete.

    Args:
        period: this-week, this-month, this-year, last-week, last-month or last-year

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValidationError: If period string is not recognized
    """
    reference = today or date.today()
    prefix, _, unit = period.strip().lower().partition("-")

    if prefix in ("this", "last") and unit in _PERIOD_STARTS:
        current_start = _PERIOD_STARTS[unit](reference)
        if prefix == "this":
            return current_start, reference
        previous_start = current_start - _PERIOD_STEPS[unit]
        return previous_start, current_start - timedelta(days=1)

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, "
        "this-week, last-month, last-year, last-week"
    )
