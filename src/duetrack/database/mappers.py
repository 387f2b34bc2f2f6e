"""Mapper functions between domain payments, SQLAlchemy rows and plain records.

Plain records are the logical persisted shape shared with external
collaborators (sync, backups): one dict per occurrence, dates as
``YYYY-MM-DD`` strings and amounts as decimal strings, so no timezone or
float rounding ever touches them.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from duetrack.domain.entities import Payment, PaymentCategory, PaymentPeriod, PaymentType
from duetrack.database.models import PaymentRecord as ORMPayment
from duetrack.utils.amount_parser import parse_bool


def payment_to_domain(orm_payment: ORMPayment) -> Payment:
    """Convert SQLAlchemy PaymentRecord model to domain Payment entity."""
    return Payment(
        id=orm_payment.id,
        name=orm_payment.name,
        payment_type=PaymentType(orm_payment.payment_type),
        category=PaymentCategory(orm_payment.category),
        amount=Decimal(orm_payment.amount),
        paid_amount=Decimal(orm_payment.paid_amount),
        is_paid=bool(orm_payment.is_paid),
        date=orm_payment.date,
        end_date=orm_payment.end_date,
        period=PaymentPeriod(orm_payment.period),
        minimum_payment_amount=_optional_decimal(orm_payment.minimum_payment_amount),
        custom_tag=orm_payment.custom_tag,
        commitment_end_date=orm_payment.commitment_end_date,
        auto_payment=bool(orm_payment.auto_payment),
        auto_payment_bank=orm_payment.auto_payment_bank,
        notes=orm_payment.notes,
    )


def payment_to_orm(payment: Payment, position: int) -> ORMPayment:
    """Convert domain Payment entity to a new SQLAlchemy PaymentRecord."""
    return ORMPayment(
        id=payment.id,
        position=position,
        name=payment.name,
        payment_type=payment.payment_type.value,
        category=payment.category.value,
        amount=payment.amount,
        paid_amount=payment.paid_amount,
        is_paid=payment.is_paid,
        date=payment.date,
        end_date=payment.end_date,
        period=payment.period.value,
        minimum_payment_amount=payment.minimum_payment_amount,
        custom_tag=payment.custom_tag,
        commitment_end_date=payment.commitment_end_date,
        auto_payment=payment.auto_payment,
        auto_payment_bank=payment.auto_payment_bank,
        notes=payment.notes,
    )


def payment_to_record(payment: Payment) -> dict[str, Any]:
    """Convert domain Payment entity to a plain serializable record."""
    return {
        "id": payment.id,
        "name": payment.name,
        "paymentType": payment.payment_type.value,
        "category": payment.category.value,
        "amount": str(payment.amount),
        "paidAmount": str(payment.paid_amount),
        "isPaid": payment.is_paid,
        "date": payment.date.isoformat(),
        "endDate": _optional_iso(payment.end_date),
        "period": payment.period.value,
        "minimumPaymentAmount": _optional_str(payment.minimum_payment_amount),
        "customTag": payment.custom_tag,
        "commitmentEndDate": _optional_iso(payment.commitment_end_date),
        "autoPayment": payment.auto_payment,
        "autoPaymentBank": payment.auto_payment_bank,
        "notes": payment.notes,
    }


def payment_from_record(record: dict[str, Any]) -> Payment:
    """Convert a plain record back to a domain Payment entity.

    Raises:
        KeyError: If a required field is missing
        ValueError: If a date, amount or enum value is malformed
    """
    payment_type = PaymentType(record["paymentType"])
    category = record.get("category")
    return Payment(
        id=record["id"],
        name=record["name"],
        payment_type=payment_type,
        category=PaymentCategory(category) if category else payment_type.category,
        amount=_decimal(record["amount"]),
        paid_amount=_decimal(record.get("paidAmount") or "0"),
        is_paid=_bool(record.get("isPaid")),
        date=date.fromisoformat(record["date"]),
        end_date=_optional_date(record.get("endDate")),
        period=PaymentPeriod(record.get("period") or PaymentPeriod.MONTHLY.value),
        minimum_payment_amount=_optional_decimal(record.get("minimumPaymentAmount")),
        custom_tag=record.get("customTag"),
        commitment_end_date=_optional_date(record.get("commitmentEndDate")),
        auto_payment=_bool(record.get("autoPayment")),
        auto_payment_bank=record.get("autoPaymentBank"),
        notes=record.get("notes"),
    )


def _optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return _decimal(value)


def _optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return date.fromisoformat(value)


def _optional_iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _optional_str(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid amount '{value}'")


def _bool(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, str):
        return parse_bool(value)
    raise ValueError(f"Invalid flag '{value}'")
