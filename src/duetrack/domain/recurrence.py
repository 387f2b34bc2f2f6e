"""Recurring payment generation.

Confirming a payment closes the current occurrence and, for recurring
categories, produces the next one. Loans are never chained: their installment
series is laid out up front (see ``expand_installments``).

Month and year steps clamp to the last valid day of the target month, so
2024-01-31 + 1 month is 2024-02-29 and 2023-01-31 + 1 month is 2023-02-28.
Each successor steps from its predecessor's date.
"""

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from duetrack.domain.entities import (
    Confirmation,
    Payment,
    PaymentCategory,
    PaymentPeriod,
)

MAX_INSTALLMENTS = 120


def next_due_date(due: date, period: Optional[PaymentPeriod]) -> date:
    """Return the due date one period after ``due``.

    A missing period is treated as monthly.
    """
    if period == PaymentPeriod.WEEKLY:
        return due + timedelta(days=7)
    if period == PaymentPeriod.BIWEEKLY:
        return due + timedelta(days=14)
    if period == PaymentPeriod.ANNUAL:
        return due + relativedelta(years=1)
    return due + relativedelta(months=1)


def confirm_payment(payment: Payment, paid_amount: Decimal, new_id: str) -> Confirmation:
    """Mark ``payment`` paid and build its successor, if any.

    Args:
        payment: Unpaid occurrence being confirmed
        paid_amount: Amount actually paid, already validated by the caller
        new_id: Identifier for the successor occurrence

    Returns:
        Confirmation holding the paid occurrence and the next occurrence,
        or None as next occurrence when the series ends here
    """
    amount = paid_amount if payment.amount == 0 else payment.amount
    updated = replace(payment, is_paid=True, paid_amount=paid_amount, amount=amount)

    if payment.category == PaymentCategory.LOAN:
        return Confirmation(updated_payment=updated, next_occurrence=None)

    next_date = next_due_date(payment.date, payment.period)
    if payment.end_date is not None and next_date > payment.end_date:
        return Confirmation(updated_payment=updated, next_occurrence=None)

    successor = replace(
        updated,
        id=new_id,
        date=next_date,
        is_paid=False,
        paid_amount=Decimal("0"),
        minimum_payment_amount=None,
    )
    return Confirmation(updated_payment=updated, next_occurrence=successor)


def expand_installments(
    template: Payment,
    id_factory: Callable[[int], str],
    limit: int = MAX_INSTALLMENTS,
) -> list[Payment]:
    """Lay out monthly occurrences from ``template.date`` through its end date.

    Each occurrence is computed from the anchor date (``date + i months``),
    so a series starting on the 31st returns to the 31st in long months.

    Args:
        template: First occurrence; must carry an end date
        id_factory: Called with the installment index to produce each id
        limit: Maximum number of occurrences generated

    Returns:
        Occurrences in date order, all unpaid and monthly
    """
    if template.end_date is None:
        return [replace(template, id=id_factory(0))]

    occurrences = []
    index = 0
    current = template.date
    while current <= template.end_date and index < limit:
        occurrences.append(
            replace(
                template,
                id=id_factory(index),
                date=current,
                period=PaymentPeriod.MONTHLY,
                is_paid=False,
                paid_amount=Decimal("0"),
            )
        )
        index += 1
        current = template.date + relativedelta(months=index)
    return occurrences
