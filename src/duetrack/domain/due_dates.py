"""Weekend adjustment of due dates.

A due date falling on a weekend is effectively payable on the following
Monday. The adjusted date is used for display, sorting and reminders only;
the stored ``Payment.date`` always keeps the nominal value.
"""

from datetime import date, timedelta
from typing import Iterable

from duetrack.domain.entities import Payment

SATURDAY = 5
SUNDAY = 6


def adjust_due_date(due: date) -> date:
    """Return the next business day on or after ``due``.

    Saturday moves forward two days and Sunday one day; weekdays are
    returned unchanged.
    """
    weekday = due.weekday()
    if weekday == SATURDAY:
        return due + timedelta(days=2)
    if weekday == SUNDAY:
        return due + timedelta(days=1)
    return due


def was_adjusted(due: date) -> bool:
    """Return True if ``due`` falls on a weekend and is shown delayed."""
    return adjust_due_date(due) != due


def sort_by_due_date(payments: Iterable[Payment]) -> list[Payment]:
    """Sort payments by adjusted due date, then by name."""
    return sorted(payments, key=lambda p: (adjust_due_date(p.date), p.name))
