"""Domain model entities for duetrack.

These are pure data classes representing payment obligations, independent of
the database schema. Every entity is frozen: services produce new snapshots
with ``dataclasses.replace`` instead of mutating records in place.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from duetrack.domain.errors import ValidationError, unknown_payment_type


class PaymentCategory(str, Enum):
    """Behavioral category of a payment."""

    LOAN = "LOAN"
    CARD = "CARD"
    BILL = "BILL"
    DIGITAL = "DIGITAL"


class PaymentPeriod(str, Enum):
    """Recurrence step of a payment."""

    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    ANNUAL = "ANNUAL"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "PaymentPeriod":
        """Parse a period label, defaulting to MONTHLY when blank or unknown."""
        if not label:
            return cls.MONTHLY
        normalized = label.strip().lower().replace("-", " ").replace("_", " ")
        for alias, period in _PERIOD_ALIASES.items():
            if normalized == alias:
                return period
        return cls.MONTHLY


class Provenance(str, Enum):
    """Origin of a snapshot mutation."""

    LOCAL = "LOCAL"
    EXTERNAL = "EXTERNAL"


class PaymentType(str, Enum):
    """User-facing payment type, mapped to exactly one category."""

    LOAN = "LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    BILL = "BILL"
    DIGITAL = "DIGITAL"

    @property
    def category(self) -> PaymentCategory:
        return _CATEGORY_BY_TYPE[self]

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "PaymentType":
        """Parse a free-form type label.

        Raises:
            ValidationError: If the label is not a known alias
        """
        normalized = " ".join(label.strip().lower().replace("_", " ").replace("-", " ").split())
        payment_type = _TYPE_ALIASES.get(normalized)
        if payment_type is None:
            raise ValidationError(unknown_payment_type(label))
        return payment_type


_CATEGORY_BY_TYPE = {
    PaymentType.LOAN: PaymentCategory.LOAN,
    PaymentType.CREDIT_CARD: PaymentCategory.CARD,
    PaymentType.BILL: PaymentCategory.BILL,
    PaymentType.DIGITAL: PaymentCategory.DIGITAL,
}

_TYPE_LABELS = {
    PaymentType.LOAN: "Loan",
    PaymentType.CREDIT_CARD: "Credit Card",
    PaymentType.BILL: "Bill",
    PaymentType.DIGITAL: "Digital",
}

_TYPE_ALIASES = {
    "loan": PaymentType.LOAN,
    "credit card": PaymentType.CREDIT_CARD,
    "card": PaymentType.CREDIT_CARD,
    "bill": PaymentType.BILL,
    "utility": PaymentType.BILL,
    "digital": PaymentType.DIGITAL,
    "subscription": PaymentType.DIGITAL,
}

_PERIOD_ALIASES = {
    "weekly": PaymentPeriod.WEEKLY,
    "biweekly": PaymentPeriod.BIWEEKLY,
    "bi weekly": PaymentPeriod.BIWEEKLY,
    "every 2 weeks": PaymentPeriod.BIWEEKLY,
    "monthly": PaymentPeriod.MONTHLY,
    "annual": PaymentPeriod.ANNUAL,
    "annually": PaymentPeriod.ANNUAL,
    "yearly": PaymentPeriod.ANNUAL,
}


@dataclass(frozen=True)
class Payment:
    """A single occurrence of a payment obligation."""

    id: str
    name: str
    payment_type: PaymentType
    category: PaymentCategory
    amount: Decimal
    date: date
    paid_amount: Decimal = Decimal("0")
    is_paid: bool = False
    end_date: Optional[date] = None
    period: PaymentPeriod = PaymentPeriod.MONTHLY
    minimum_payment_amount: Optional[Decimal] = None
    custom_tag: Optional[str] = None
    commitment_end_date: Optional[date] = None
    auto_payment: bool = False
    auto_payment_bank: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Confirmation:
    """Result of confirming a payment: the paid row and its successor, if any."""

    updated_payment: Payment
    next_occurrence: Optional[Payment]


@dataclass(frozen=True)
class TrendPoint:
    """Total paid in a calendar month."""

    year: int
    month: int
    paid_total: Decimal


@dataclass(frozen=True)
class MonthSummary:
    """Expected and paid totals for a calendar month."""

    year: int
    month: int
    expected_total: Decimal
    paid_total: Decimal
    pending_count: int
    category_totals: dict[PaymentCategory, Decimal] = field(default_factory=dict)
    tag_totals: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisItem:
    """Read-only view of an unpaid payment handed to an external advisor."""

    name: str
    payment_type: str
    amount: Decimal
    date: date


@dataclass(frozen=True)
class OutstandingOverview:
    """Total unpaid debt and the payments that need attention soon."""

    total_debt: Decimal
    urgent_items: tuple[str, ...]
    pending_count: int
