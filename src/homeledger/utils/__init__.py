"""Utility functions for homeledger."""

from homeledger.utils.date_parser import parse_date, get_date_range
from homeledger.utils.amount_parser import parse_amount, parse_money
from homeledger.utils.resolver import resolve

__all__ = ["parse_date", "get_date_range", "parse_amount", "parse_money", "resolve"]
