"""Utility functions for duetrack."""

from duetrack.utils.date_parser import parse_date, parse_month
from duetrack.utils.amount_parser import parse_amount, parse_bool

__all__ = ["parse_date", "parse_month", "parse_amount", "parse_bool"]
