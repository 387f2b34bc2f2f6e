"""Payment domain service."""

import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog

from duetrack.database.base import PaymentRepository
from duetrack.domain import recurrence
from duetrack.domain.entities import (
    Confirmation,
    Payment,
    PaymentCategory,
    PaymentPeriod,
    PaymentType,
)
from duetrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    card_requires_minimum_payment,
    invalid_paid_amount,
    loan_requires_end_date,
    missing_required_fields,
    payment_already_paid,
    payment_not_found,
)

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "name",
        "payment_type",
        "amount",
        "paid_amount",
        "date",
        "end_date",
        "period",
        "minimum_payment_amount",
        "custom_tag",
        "commitment_end_date",
        "auto_payment",
        "auto_payment_bank",
        "notes",
    }
)


def new_payment_id(prefix: str) -> str:
    """Return a fresh payment id such as ``manual-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"


def validate_payment(payment: Payment) -> None:
    """Check an entered payment before it is stored.

    Raises:
        ValidationError: If a required field is missing or inconsistent
    """
    missing = []
    if not payment.name or not payment.name.strip():
        missing.append("name")
    if payment.amount is None:
        missing.append("amount")
    if payment.date is None:
        missing.append("date")
    if missing:
        raise ValidationError(missing_required_fields(missing))

    if payment.amount < 0:
        raise ValidationError("Amount cannot be negative")
    if payment.payment_type == PaymentType.LOAN and payment.end_date is None:
        raise ValidationError(loan_requires_end_date())
    if payment.payment_type == PaymentType.CREDIT_CARD and payment.minimum_payment_amount is None:
        raise ValidationError(card_requires_minimum_payment())
    if payment.end_date is not None and payment.end_date < payment.date:
        raise ValidationError("End date cannot be before the due date")


def find_occurrence(payments: list[Payment], occurrence: Payment) -> Optional[Payment]:
    """Return the stored row for the same obligation on the same date, if any."""
    for payment in payments:
        if (
            payment.name == occurrence.name
            and payment.payment_type == occurrence.payment_type
            and payment.date == occurrence.date
        ):
            return payment
    return None


def validate_paid_amount(paid_amount: Decimal) -> None:
    """Reject paid amounts that are negative or not finite.

    Raises:
        ValidationError: If the amount cannot be confirmed
    """
    if not paid_amount.is_finite() or paid_amount < 0:
        raise ValidationError(invalid_paid_amount(paid_amount))


class PaymentService:
    """Service for managing payments."""

    def __init__(self, repository: PaymentRepository):
        """Initialize payment service.

        Args:
            repository: Payment repository instance
        """
        self.repository = repository

    def create_payment(
        self,
        name: str,
        payment_type: PaymentType,
        amount: Decimal,
        date: date,
        end_date: Optional[date] = None,
        period: PaymentPeriod = PaymentPeriod.MONTHLY,
        minimum_payment_amount: Optional[Decimal] = None,
        custom_tag: Optional[str] = None,
        commitment_end_date: Optional[date] = None,
        auto_payment: bool = False,
        auto_payment_bank: Optional[str] = None,
        notes: Optional[str] = None,
        already_paid: bool = False,
    ) -> Payment:
        """Create a payment.

        Args:
            name: Payment name
            payment_type: Payment type; determines the category
            amount: Expected amount
            date: Due date
            end_date: Optional loan maturity or subscription cutoff
            period: Recurrence step
            minimum_payment_amount: Minimum payment (required for credit cards)
            custom_tag: Optional grouping label
            commitment_end_date: Optional contract commitment end
            auto_payment: Whether the payment is collected automatically
            auto_payment_bank: Bank collecting the automatic payment
            notes: Optional notes
            already_paid: Record a past payment as paid in full

        Returns:
            The stored payment

        Raises:
            ValidationError: If required fields are missing or inconsistent
        """
        payment = Payment(
            id=new_payment_id("manual"),
            name=name.strip() if name else name,
            payment_type=payment_type,
            category=payment_type.category,
            amount=amount,
            date=date,
            paid_amount=amount if already_paid else Decimal("0"),
            is_paid=already_paid,
            end_date=end_date,
            period=period or PaymentPeriod.MONTHLY,
            minimum_payment_amount=minimum_payment_amount,
            custom_tag=custom_tag,
            commitment_end_date=commitment_end_date,
            auto_payment=auto_payment,
            auto_payment_bank=auto_payment_bank,
            notes=notes,
        )
        validate_payment(payment)

        self.repository.apply_mutation(lambda payments: payments + [payment])
        logger.info(
            "payment_created",
            payment_id=payment.id,
            category=payment.category.value,
            due=payment.date.isoformat(),
        )
        return payment

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        """Get payment by ID.

        Args:
            payment_id: Payment ID

        Returns:
            Payment entity or None if not found
        """
        for payment in self.repository.load_all():
            if payment.id == payment_id:
                return payment
        return None

    def require_payment(self, payment_id: str) -> Payment:
        """Get payment by ID or raise NotFoundError."""
        payment = self.get_payment(payment_id)
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        return payment

    def list_payments(
        self,
        category: Optional[PaymentCategory] = None,
        is_paid: Optional[bool] = None,
    ) -> list[Payment]:
        """List payments in stored order, optionally filtered.

        Args:
            category: Only payments in this category
            is_paid: Only paid (True) or unpaid (False) payments
        """
        payments = self.repository.load_all()
        if category is not None:
            payments = [p for p in payments if p.category == category]
        if is_paid is not None:
            payments = [p for p in payments if p.is_paid == is_paid]
        return payments

    def update_payment(self, payment_id: str, **changes: Any) -> Payment:
        """Edit fields of a payment.

        Changing ``payment_type`` re-derives the category. The edited payment
        is validated like a new entry.

        Raises:
            NotFoundError: If the payment does not exist
            ValidationError: If a field is unknown or the result is invalid
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit fields: {', '.join(sorted(unknown))}")

        current = self.require_payment(payment_id)
        updated = replace(current, **changes)
        if updated.payment_type != current.payment_type:
            updated = replace(updated, category=updated.payment_type.category)
        validate_payment(updated)

        self.repository.apply_mutation(
            lambda payments: [updated if p.id == payment_id else p for p in payments]
        )
        logger.info("payment_updated", payment_id=payment_id, fields=sorted(changes))
        return updated

    def delete_payment(self, payment_id: str) -> None:
        """Delete a payment.

        Raises:
            NotFoundError: If the payment does not exist
        """
        self.require_payment(payment_id)
        self.repository.apply_mutation(
            lambda payments: [p for p in payments if p.id != payment_id]
        )
        logger.info("payment_deleted", payment_id=payment_id)

    def confirm_payment(self, payment_id: str, paid_amount: Decimal) -> Confirmation:
        """Mark a payment paid and append its next occurrence, if any.

        Args:
            payment_id: Payment ID to confirm
            paid_amount: Amount actually paid

        Returns:
            Confirmation with the paid payment and the generated successor

        Raises:
            NotFoundError: If the payment does not exist
            ConflictError: If the payment is already paid
            ValidationError: If the paid amount is negative or not finite
        """
        validate_paid_amount(paid_amount)
        result: dict[str, Any] = {"reused": False}

        def mutate(payments: list[Payment]) -> list[Payment]:
            for index, payment in enumerate(payments):
                if payment.id == payment_id:
                    break
            else:
                raise NotFoundError(payment_not_found(payment_id))
            if payment.is_paid:
                raise ConflictError(payment_already_paid(payment_id))

            confirmation = recurrence.confirm_payment(
                payment, paid_amount, new_id=new_payment_id("auto")
            )
            updated = list(payments)
            updated[index] = confirmation.updated_payment
            successor = confirmation.next_occurrence
            if successor is not None:
                existing = find_occurrence(payments, successor)
                if existing is None:
                    updated.append(successor)
                else:
                    # Imported installments already hold the next occurrence
                    confirmation = replace(confirmation, next_occurrence=existing)
                    result["reused"] = True
            result["confirmation"] = confirmation
            return updated

        self.repository.apply_mutation(mutate)
        confirmation = result["confirmation"]

        logger.info(
            "payment_confirmed",
            payment_id=payment_id,
            paid_amount=str(paid_amount),
        )
        if confirmation.next_occurrence is not None:
            logger.info(
                "occurrence_exists" if result["reused"] else "occurrence_generated",
                payment_id=confirmation.next_occurrence.id,
                source_id=payment_id,
                due=confirmation.next_occurrence.date.isoformat(),
            )
        else:
            logger.info(
                "recurrence_stopped",
                payment_id=payment_id,
                category=confirmation.updated_payment.category.value,
            )
        return confirmation
