"""Summary domain service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from duetrack.database.base import PaymentRepository
from duetrack.domain.due_dates import sort_by_due_date
from duetrack.domain.entities import (
    MonthSummary,
    Payment,
    PaymentCategory,
    TrendPoint,
)


def _in_month(payment: Payment, year: int, month: int) -> bool:
    return payment.date.year == year and payment.date.month == month


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class SummaryService:
    """Service for building month views and spending summaries."""

    def __init__(self, repository: PaymentRepository):
        """Initialize summary service.

        Args:
            repository: Payment repository instance
        """
        self.repository = repository

    def payments_for_month(
        self,
        year: int,
        month: int,
        category: Optional[PaymentCategory] = None,
    ) -> list[Payment]:
        """Payments whose nominal due date is in the month, by adjusted due date.

        Args:
            year: Calendar year
            month: Calendar month (1-12)
            category: Optional category filter

        Returns:
            Payments sorted by weekend-adjusted due date
        """
        payments = [p for p in self.repository.load_all() if _in_month(p, year, month)]
        if category is not None:
            payments = [p for p in payments if p.category == category]
        return sort_by_due_date(payments)

    def month_summary(self, year: int, month: int) -> MonthSummary:
        """Build expected/paid totals and breakdowns for a month."""
        payments = self.payments_for_month(year, month)
        return self.build_month_summary(payments, year, month)

    def build_month_summary(
        self, payments: Sequence[Payment], year: int, month: int
    ) -> MonthSummary:
        """Aggregate already-selected payments of a month.

        Category totals include every category, with zero for empty ones.
        Tag totals only include payments that carry a tag.
        """
        category_totals = {category: Decimal("0") for category in PaymentCategory}
        tag_totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        expected_total = Decimal("0")
        paid_total = Decimal("0")
        pending_count = 0

        for payment in payments:
            expected_total += payment.amount
            paid_total += payment.paid_amount
            category_totals[payment.category] += payment.amount
            if payment.custom_tag:
                tag_totals[payment.custom_tag] += payment.amount
            if not payment.is_paid:
                pending_count += 1

        return MonthSummary(
            year=year,
            month=month,
            expected_total=expected_total,
            paid_total=paid_total,
            pending_count=pending_count,
            category_totals=category_totals,
            tag_totals=dict(tag_totals),
        )

    def spending_trend(self, today: date, months: int = 6) -> list[TrendPoint]:
        """Total paid per month for the last ``months`` months, oldest first.

        The current month is the last point.
        """
        payments = [p for p in self.repository.load_all() if p.is_paid]
        points = []
        for offset in range(months - 1, -1, -1):
            year, month = _shift_month(today.year, today.month, -offset)
            total = sum(
                (p.paid_amount for p in payments if _in_month(p, year, month)),
                Decimal("0"),
            )
            points.append(TrendPoint(year=year, month=month, paid_total=total))
        return points
