"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

from duetrack.domain.entities import (
    Payment,
    PaymentCategory,
    PaymentPeriod,
    PaymentType,
)
from duetrack.domain.errors import ValidationError


class TestPayment:
    """Tests for Payment entity."""

    def test_create_payment_defaults(self):
        """Test creating a payment with only required fields."""
        payment = Payment(
            id="manual-1",
            name="Electricity",
            payment_type=PaymentType.BILL,
            category=PaymentCategory.BILL,
            amount=Decimal("100"),
            date=date(2024, 1, 15),
        )

        assert payment.is_paid is False
        assert payment.paid_amount == Decimal("0")
        assert payment.period == PaymentPeriod.MONTHLY
        assert payment.end_date is None
        assert payment.auto_payment is False

    def test_payment_immutability(self, make_payment):
        """Test that Payment is immutable."""
        payment = make_payment()
        with pytest.raises(FrozenInstanceError):
            payment.is_paid = True


class TestPaymentType:
    """Tests for PaymentType."""

    @pytest.mark.parametrize(
        "payment_type, category",
        [
            (PaymentType.LOAN, PaymentCategory.LOAN),
            (PaymentType.CREDIT_CARD, PaymentCategory.CARD),
            (PaymentType.BILL, PaymentCategory.BILL),
            (PaymentType.DIGITAL, PaymentCategory.DIGITAL),
        ],
    )
    def test_category_mapping(self, payment_type, category):
        """Test that every type maps to exactly one category."""
        assert payment_type.category == category

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Loan", PaymentType.LOAN),
            ("Credit Card", PaymentType.CREDIT_CARD),
            ("credit-card", PaymentType.CREDIT_CARD),
            ("CREDIT_CARD", PaymentType.CREDIT_CARD),
            ("card", PaymentType.CREDIT_CARD),
            ("bill", PaymentType.BILL),
            ("Utility", PaymentType.BILL),
            ("Subscription", PaymentType.DIGITAL),
        ],
    )
    def test_from_label(self, label, expected):
        """Test parsing type labels."""
        assert PaymentType.from_label(label) == expected

    def test_from_label_is_closed(self):
        """Test that unknown labels are rejected instead of guessed."""
        with pytest.raises(ValidationError, match="Unknown payment type"):
            PaymentType.from_label("Loan shark bill")

    def test_label_round_trip(self):
        """Test that display labels parse back to the same type."""
        for payment_type in PaymentType:
            assert PaymentType.from_label(payment_type.label) == payment_type


class TestPaymentPeriod:
    """Tests for PaymentPeriod."""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Weekly", PaymentPeriod.WEEKLY),
            ("bi-weekly", PaymentPeriod.BIWEEKLY),
            ("every 2 weeks", PaymentPeriod.BIWEEKLY),
            ("MONTHLY", PaymentPeriod.MONTHLY),
            ("yearly", PaymentPeriod.ANNUAL),
            ("", PaymentPeriod.MONTHLY),
            (None, PaymentPeriod.MONTHLY),
            ("fortnightly-ish", PaymentPeriod.MONTHLY),
        ],
    )
    def test_from_label(self, label, expected):
        """Test parsing period labels with a monthly default."""
        assert PaymentPeriod.from_label(label) == expected
