"""CSV export domain service."""

import csv
from datetime import date
from pathlib import Path
from typing import Optional

import structlog

from duetrack.database.base import PaymentRepository
from duetrack.domain.csv_import import COLUMNS
from duetrack.domain.entities import Payment

logger = structlog.get_logger(__name__)


def payment_to_row(payment: Payment) -> dict[str, str]:
    """Render a payment as a backup CSV row."""
    return {
        "name": payment.name,
        "payment_type": payment.payment_type.label,
        "amount": str(payment.amount),
        "date": payment.date.isoformat(),
        "end_date": _iso(payment.end_date),
        "minimum_payment": "" if payment.minimum_payment_amount is None else str(payment.minimum_payment_amount),
        "period": payment.period.value,
        "tag": payment.custom_tag or "",
        "commitment_end_date": _iso(payment.commitment_end_date),
        "auto_payment": "yes" if payment.auto_payment else "no",
        "auto_payment_bank": payment.auto_payment_bank or "",
        "status": "paid" if payment.is_paid else "pending",
        "paid_amount": str(payment.paid_amount),
        "notes": payment.notes or "",
    }


class CSVExportService:
    """Service for writing every payment to a backup CSV file."""

    def __init__(self, repository: PaymentRepository):
        """Initialize CSV export service.

        Args:
            repository: Payment repository instance
        """
        self.repository = repository

    def export_csv(self, csv_file_path: str) -> int:
        """Write all payments to ``csv_file_path``.

        The file can be restored with ``CSVImportService``.

        Returns:
            Number of payments written
        """
        payments = self.repository.load_all()
        with open(Path(csv_file_path), "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=COLUMNS)
            writer.writeheader()
            for payment in payments:
                writer.writerow(payment_to_row(payment))

        logger.info("csv_exported", path=csv_file_path, exported=len(payments))
        return len(payments)


def _iso(value: Optional[date]) -> str:
    return value.isoformat() if value is not None else ""
