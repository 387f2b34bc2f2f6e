"""Shared pytest fixtures for duetrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from duetrack.database.factories import create_sqlite_repository
from duetrack.domain.entities import Payment, PaymentPeriod, PaymentType
from duetrack.domain.payment import PaymentService
from duetrack.domain.summary import SummaryService


@pytest.fixture
def temp_db():
    """Create a temporary payment repository for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    repository = create_sqlite_repository(database_path=db_path)
    # Store the path for tests that need it
    repository.database_path = db_path
    repository.connect()

    yield repository

    # Cleanup
    repository.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary repository."""
    return PaymentService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary repository."""
    return SummaryService(temp_db)


@pytest.fixture
def make_payment():
    """Build Payment entities with sensible defaults."""

    def _make(
        id="p-1",
        name="Electricity",
        payment_type=PaymentType.BILL,
        amount="100",
        due=date(2024, 1, 15),
        **kwargs,
    ) -> Payment:
        return Payment(
            id=id,
            name=name,
            payment_type=payment_type,
            category=payment_type.category,
            amount=Decimal(amount),
            date=due,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_payments(payment_service):
    """Create a small mix of payments."""
    netflix = payment_service.create_payment(
        name="Netflix",
        payment_type=PaymentType.DIGITAL,
        amount=Decimal("229.99"),
        date=date(2024, 3, 8),
        custom_tag="Entertainment",
    )
    loan = payment_service.create_payment(
        name="Car loan",
        payment_type=PaymentType.LOAN,
        amount=Decimal("5000"),
        date=date(2024, 3, 15),
        end_date=date(2025, 3, 15),
    )
    internet = payment_service.create_payment(
        name="Internet",
        payment_type=PaymentType.BILL,
        amount=Decimal("450"),
        date=date(2024, 3, 9),
        period=PaymentPeriod.MONTHLY,
        custom_tag="Household",
    )
    return {"netflix": netflix, "loan": loan, "internet": internet}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
