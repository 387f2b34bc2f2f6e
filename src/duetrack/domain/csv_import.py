"""CSV import domain service."""

import csv
from dataclasses import replace
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import structlog

from duetrack.database.base import PaymentRepository
from duetrack.domain.entities import Payment, PaymentCategory, PaymentPeriod, PaymentType
from duetrack.domain.errors import ValidationError
from duetrack.domain.payment import new_payment_id
from duetrack.domain.recurrence import expand_installments
from duetrack.utils.amount_parser import parse_amount, parse_bool
from duetrack.utils.date_parser import parse_date

logger = structlog.get_logger(__name__)

COLUMNS = (
    "name",
    "payment_type",
    "amount",
    "date",
    "end_date",
    "minimum_payment",
    "period",
    "tag",
    "commitment_end_date",
    "auto_payment",
    "auto_payment_bank",
    "status",
    "paid_amount",
    "notes",
)
REQUIRED_COLUMNS = {"name"}
EXPANDED_CATEGORIES = {PaymentCategory.LOAN, PaymentCategory.CARD}


class ImportMode(str, Enum):
    """How imported payments are combined with the stored collection."""

    APPEND = "APPEND"
    REPLACE = "REPLACE"


class CSVImportService:
    """Service for importing payments from CSV files.

    Two kinds of rows are understood:

    - Plan rows describe an obligation. A loan or credit card row with an
      end date is expanded into one monthly occurrence per month up to the
      end date.
    - Backup rows (written by ``CSVExportService``) carry a ``status``
      column and are restored as-is, paid state included.
    """

    def __init__(self, repository: PaymentRepository):
        """Initialize CSV import service.

        Args:
            repository: Payment repository instance
        """
        self.repository = repository

    def import_csv(
        self,
        csv_file_path: str,
        mode: ImportMode = ImportMode.APPEND,
        today: Optional[date] = None,
    ) -> dict[str, Any]:
        """Import payments from a CSV file.

        Args:
            csv_file_path: Path to CSV file
            mode: Append to or replace the stored payments
            today: Due date used for rows without one (defaults to today)

        Returns:
            Dict with import statistics:
            - imported: number of payments stored
            - skipped: number of rows without a name
            - errors: list of error messages

        Raises:
            ValidationError: If the file has no header or misses required columns
            FileNotFoundError: If CSV file doesn't exist
        """
        result = self.read_csv(csv_file_path, today=today)
        payments = result["payments"]

        if payments:
            if mode == ImportMode.REPLACE:
                self.repository.apply_mutation(lambda _: payments)
            else:
                self.repository.apply_mutation(lambda existing: existing + payments)

        logger.info(
            "csv_imported",
            path=csv_file_path,
            mode=mode.value,
            imported=len(payments),
            skipped=result["skipped"],
            errors=len(result["errors"]),
        )
        return {
            "imported": len(payments),
            "skipped": result["skipped"],
            "errors": result["errors"],
        }

    def read_csv(self, csv_file_path: str, today: Optional[date] = None) -> dict[str, Any]:
        """Parse a CSV file into payments without storing them.

        Returns:
            Dict with ``payments``, ``skipped`` and ``errors``
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        today = today or date.today()
        payments: list[Payment] = []
        skipped = 0
        errors = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            # Try to detect delimiter
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","

            reader = csv.DictReader(f, delimiter=delimiter)

            csv_columns = reader.fieldnames
            if csv_columns is None:
                raise ValidationError("CSV file has no columns")

            header = {column.strip().lower() for column in csv_columns}
            missing_columns = REQUIRED_COLUMNS - header
            if missing_columns:
                raise ValidationError(
                    f"CSV file missing required columns: {', '.join(sorted(missing_columns))}"
                )

            for row_num, raw_row in enumerate(reader, start=2):  # header is row 1
                row = {
                    (key or "").strip().lower(): (value or "").strip()
                    for key, value in raw_row.items()
                    if isinstance(value, str) or value is None
                }
                if not row.get("name"):
                    skipped += 1
                    continue
                try:
                    payments.extend(self.parse_row(row, today))
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")

        return {"payments": payments, "skipped": skipped, "errors": errors}

    def parse_row(self, row: dict[str, str], today: date) -> list[Payment]:
        """Turn one CSV row into one or more payments.

        Raises:
            ValueError: If a value cannot be parsed
        """
        payment_type = PaymentType.from_label(row.get("payment_type") or "bill")
        due = _optional_date(row.get("date")) or today
        is_backup = bool(row.get("status"))

        payment = Payment(
            id=new_payment_id("import"),
            name=row["name"],
            payment_type=payment_type,
            category=payment_type.category,
            amount=_optional_amount(row.get("amount")) or Decimal("0"),
            date=due,
            paid_amount=Decimal("0"),
            is_paid=False,
            end_date=_optional_date(row.get("end_date")),
            period=PaymentPeriod.from_label(row.get("period")),
            minimum_payment_amount=_optional_amount(row.get("minimum_payment")),
            custom_tag=row.get("tag") or None,
            commitment_end_date=_optional_date(row.get("commitment_end_date")),
            auto_payment=parse_bool(row.get("auto_payment")),
            auto_payment_bank=row.get("auto_payment_bank") or None,
            notes=row.get("notes") or None,
        )

        if is_backup:
            return [
                replace(
                    payment,
                    is_paid=row["status"].lower() == "paid",
                    paid_amount=_optional_amount(row.get("paid_amount")) or Decimal("0"),
                )
            ]

        if payment.category in EXPANDED_CATEGORIES and payment.end_date is not None:
            if payment.end_date < payment.date:
                raise ValueError("end date is before the due date")
            return expand_installments(payment, lambda _: new_payment_id("import"))

        return [payment]


def _optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_date(value)


def _optional_amount(value: Optional[str]) -> Optional[Decimal]:
    if not value:
        return None
    return parse_amount(value)
