"""Tests for CSV import and export services."""

from datetime import date
from decimal import Decimal

import pytest

from duetrack.domain.csv_export import CSVExportService
from duetrack.domain.csv_import import CSVImportService, ImportMode
from duetrack.domain.entities import PaymentCategory, PaymentPeriod, PaymentType
from duetrack.domain.errors import ValidationError


@pytest.fixture
def import_service(temp_db):
    return CSVImportService(temp_db)


@pytest.fixture
def write_csv(tmp_path):
    def _write(content, name="payments.csv"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


class TestCSVImport:
    """Tests for importing plan rows."""

    def test_import_bills(self, import_service, payment_service, write_csv):
        csv_file = write_csv(
            "name,payment_type,amount,date,period,tag\n"
            "Electricity,Bill,120.50,2024-03-20,monthly,Household\n"
            "Netflix,Digital,229.99,08.03.2024,,Entertainment\n"
        )

        result = import_service.import_csv(csv_file)

        assert result == {"imported": 2, "skipped": 0, "errors": []}
        payments = payment_service.list_payments()
        assert [p.name for p in payments] == ["Electricity", "Netflix"]
        assert payments[0].amount == Decimal("120.50")
        assert payments[0].custom_tag == "Household"
        assert payments[1].date == date(2024, 3, 8)
        assert payments[1].category == PaymentCategory.DIGITAL
        assert payments[1].period == PaymentPeriod.MONTHLY
        assert all(p.id.startswith("import-") for p in payments)

    def test_rows_without_name_are_skipped(self, import_service, write_csv):
        csv_file = write_csv(
            "name,amount,date\n"
            ",100,2024-01-01\n"
            "Water,80,2024-01-02\n"
        )

        result = import_service.import_csv(csv_file)

        assert result["imported"] == 1
        assert result["skipped"] == 1

    def test_missing_date_defaults_to_today(self, import_service, payment_service, write_csv):
        csv_file = write_csv("name,amount\nGas,40\n")

        import_service.import_csv(csv_file, today=date(2024, 6, 1))

        payment = payment_service.list_payments()[0]
        assert payment.date == date(2024, 6, 1)
        assert payment.payment_type == PaymentType.BILL

    def test_semicolon_delimiter(self, import_service, payment_service, write_csv):
        csv_file = write_csv(
            "Name;Payment_Type;Amount;Date\n"
            "Spotify;subscription;59.99;2024-02-01\n"
        )

        result = import_service.import_csv(csv_file)

        assert result["imported"] == 1
        assert payment_service.list_payments()[0].payment_type == PaymentType.DIGITAL

    def test_loan_row_is_expanded(self, import_service, payment_service, write_csv):
        csv_file = write_csv(
            "name,payment_type,amount,date,end_date\n"
            "Car loan,Loan,5000,2024-01-15,2024-04-15\n"
        )

        result = import_service.import_csv(csv_file)

        assert result["imported"] == 4
        payments = payment_service.list_payments()
        assert [p.date for p in payments] == [
            date(2024, 1, 15),
            date(2024, 2, 15),
            date(2024, 3, 15),
            date(2024, 4, 15),
        ]
        assert len({p.id for p in payments}) == 4
        assert all(p.category == PaymentCategory.LOAN for p in payments)

    def test_paying_card_installment_keeps_one_row_per_month(
        self, import_service, payment_service, write_csv
    ):
        csv_file = write_csv(
            "name,payment_type,amount,date,end_date,minimum_payment\n"
            "Visa,credit card,100,2024-01-15,2024-03-15,10\n"
        )
        import_service.import_csv(csv_file)
        first, second, _ = payment_service.list_payments()

        confirmation = payment_service.confirm_payment(first.id, Decimal("100"))

        assert confirmation.next_occurrence.id == second.id
        payments = payment_service.list_payments()
        assert [p.date for p in payments] == [
            date(2024, 1, 15),
            date(2024, 2, 15),
            date(2024, 3, 15),
        ]
        assert [p.is_paid for p in payments] == [True, False, False]

        # Paying the remaining installments never adds rows
        for payment in payments[1:]:
            payment_service.confirm_payment(payment.id, Decimal("100"))
        assert len(payment_service.list_payments()) == 3

    def test_bill_with_end_date_is_not_expanded(self, import_service, write_csv):
        csv_file = write_csv(
            "name,payment_type,amount,date,end_date\n"
            "Gym,digital,30,2024-01-01,2024-12-01\n"
        )

        assert import_service.import_csv(csv_file)["imported"] == 1

    def test_invalid_rows_are_reported(self, import_service, write_csv):
        csv_file = write_csv(
            "name,payment_type,amount,date,end_date\n"
            "Bad amount,bill,abc,2024-01-01,\n"
            "Bad type,lottery,10,2024-01-01,\n"
            "Backwards,loan,10,2024-05-01,2024-01-01\n"
            "Fine,bill,10,2024-01-01,\n"
        )

        result = import_service.import_csv(csv_file)

        assert result["imported"] == 1
        assert len(result["errors"]) == 3
        assert result["errors"][0].startswith("Row 2:")
        assert "lottery" in result["errors"][1]
        assert "end date" in result["errors"][2]

    def test_replace_mode(self, import_service, payment_service, sample_payments, write_csv):
        csv_file = write_csv("name,amount,date\nWater,80,2024-01-02\n")

        import_service.import_csv(csv_file, mode=ImportMode.REPLACE)

        assert [p.name for p in payment_service.list_payments()] == ["Water"]

    def test_append_mode(self, import_service, payment_service, sample_payments, write_csv):
        csv_file = write_csv("name,amount,date\nWater,80,2024-01-02\n")

        import_service.import_csv(csv_file)

        assert len(payment_service.list_payments()) == 4

    def test_missing_name_column(self, import_service, write_csv):
        csv_file = write_csv("title,amount\nWater,80\n")

        with pytest.raises(ValidationError, match="name"):
            import_service.import_csv(csv_file)

    def test_missing_file(self, import_service, tmp_path):
        with pytest.raises(FileNotFoundError):
            import_service.import_csv(str(tmp_path / "missing.csv"))


class TestBackupRoundTrip:
    """Tests for exporting and restoring a backup."""

    def test_export_then_restore(self, temp_db, payment_service, sample_payments, tmp_path):
        payment_service.confirm_payment(sample_payments["netflix"].id, Decimal("229.99"))
        card = payment_service.create_payment(
            name="Visa",
            payment_type=PaymentType.CREDIT_CARD,
            amount=Decimal("0"),
            date=date(2024, 3, 25),
            end_date=date(2024, 12, 25),
            minimum_payment_amount=Decimal("150"),
            auto_payment=True,
            auto_payment_bank="Enpara",
            notes="statement card",
        )
        backup = str(tmp_path / "backup.csv")

        exported = CSVExportService(temp_db).export_csv(backup)
        result = CSVImportService(temp_db).import_csv(backup, mode=ImportMode.REPLACE)

        assert exported == 5
        assert result["imported"] == 5
        restored = payment_service.list_payments()
        assert [p.name for p in restored] == ["Netflix", "Car loan", "Internet", "Netflix", "Visa"]
        assert [p.is_paid for p in restored] == [True, False, False, False, False]
        assert restored[0].paid_amount == Decimal("229.99")
        # Backup rows are restored one to one, never expanded
        visa = restored[4]
        assert visa.payment_type == PaymentType.CREDIT_CARD
        assert visa.minimum_payment_amount == Decimal("150")
        assert visa.end_date == card.end_date
        assert visa.auto_payment is True
        assert visa.auto_payment_bank == "Enpara"
        assert visa.notes == "statement card"
