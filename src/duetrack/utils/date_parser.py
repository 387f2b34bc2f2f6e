"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser

_DOTTED_DATE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{2}|\d{4})$")
_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2024-01-15"
    - Day-first dotted dates: "15.01.2024", "15.01.24" (two-digit years are 20xx)
    - Relative dates: "today", "yesterday", "tomorrow"
    - Anything else dateutil understands: "January 15, 2024"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    dotted = _DOTTED_DATE.match(date_str)
    if dotted:
        day, month, year = (int(part) for part in dotted.groups())
        if year < 100:
            year += 2000
        try:
            return date(year, month, day)
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse a month string into a (year, month) tuple.

    Accepts "YYYY-MM" and the relative forms "this month", "last month" and
    "next month".

    Raises:
        ValueError: If the month string cannot be parsed
    """
    month_str = month_str.strip().lower()
    today = date.today()
    offsets = {"last month": -1, "this month": 0, "next month": 1}

    if month_str in offsets:
        index = today.year * 12 + (today.month - 1) + offsets[month_str]
        return index // 12, index % 12 + 1

    match = _MONTH.match(month_str)
    if match is None:
        raise ValueError(f"Could not parse month '{month_str}': expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}': month must be 1-12")
    return year, month
