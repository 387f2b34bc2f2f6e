"""Read-only views of unpaid payments for analysis."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from duetrack.domain.due_dates import adjust_due_date, sort_by_due_date
from duetrack.domain.entities import AnalysisItem, OutstandingOverview, Payment

URGENT_HORIZON_DAYS = 7


def build_snapshot(payments: Iterable[Payment]) -> tuple[AnalysisItem, ...]:
    """Reduce unpaid payments to the fields an external advisor needs."""
    return tuple(
        AnalysisItem(
            name=p.name,
            payment_type=p.payment_type.label,
            amount=p.amount,
            date=p.date,
        )
        for p in sort_by_due_date(payments)
        if not p.is_paid
    )


def outstanding_overview(
    payments: Iterable[Payment],
    today: date,
    horizon_days: int = URGENT_HORIZON_DAYS,
) -> OutstandingOverview:
    """Summarize unpaid debt.

    Urgent items are unpaid payments whose adjusted due date falls between
    today and ``horizon_days`` from now, inclusive. Overdue payments count
    towards the total but are not listed as urgent.
    """
    unpaid = sort_by_due_date(p for p in payments if not p.is_paid)
    horizon = today + timedelta(days=horizon_days)
    urgent = tuple(
        p.name for p in unpaid if today <= adjust_due_date(p.date) <= horizon
    )
    return OutstandingOverview(
        total_debt=sum((p.amount for p in unpaid), Decimal("0")),
        urgent_items=urgent,
        pending_count=len(unpaid),
    )
