"""Tests for snapshot synchronisation."""

import json
from datetime import date
from decimal import Decimal

import pytest

from duetrack.database.mappers import payment_to_record
from duetrack.domain.entities import PaymentType, Provenance
from duetrack.domain.errors import ValidationError
from duetrack.domain.sync import JsonFileTransport, SnapshotTransport, SyncCoordinator


class FakeTransport(SnapshotTransport):
    def __init__(self, remote=None):
        self.remote = remote
        self.pushes = []

    def pull(self):
        return self.remote

    def push(self, records):
        self.pushes.append(records)
        self.remote = records


def test_local_mutation_is_pushed(temp_db, payment_service):
    transport = FakeTransport()
    SyncCoordinator(temp_db, transport)

    payment = payment_service.create_payment(
        name="Rent",
        payment_type=PaymentType.BILL,
        amount=Decimal("900"),
        date=date(2024, 3, 1),
    )

    assert len(transport.pushes) == 1
    assert transport.pushes[0][0]["id"] == payment.id
    assert transport.pushes[0][0]["amount"] == "900"


def test_confirmation_is_pushed_once(temp_db, payment_service, sample_payments):
    transport = FakeTransport()
    SyncCoordinator(temp_db, transport)

    payment_service.confirm_payment(sample_payments["internet"].id, Decimal("450"))

    assert len(transport.pushes) == 1
    assert len(transport.pushes[0]) == 4


def test_pull_replaces_local_and_is_not_echoed(temp_db, payment_service, sample_payments, make_payment):
    remote_payment = make_payment(id="manual-remote", name="Remote bill")
    transport = FakeTransport(remote=[payment_to_record(remote_payment)])
    coordinator = SyncCoordinator(temp_db, transport)

    pulled = coordinator.pull()

    assert pulled == 1
    assert transport.pushes == []
    assert [p.id for p in payment_service.list_payments()] == ["manual-remote"]


def test_pull_empty_remote_keeps_local(temp_db, payment_service, sample_payments):
    coordinator = SyncCoordinator(temp_db, FakeTransport(remote=None))

    assert coordinator.pull() is None
    assert len(payment_service.list_payments()) == 3


def test_pull_malformed_record(temp_db, payment_service, sample_payments):
    coordinator = SyncCoordinator(temp_db, FakeTransport(remote=[{"name": "No id"}]))

    with pytest.raises(ValidationError, match="Malformed"):
        coordinator.pull()
    assert len(payment_service.list_payments()) == 3


def test_pull_records_that_are_not_objects(temp_db, payment_service, sample_payments):
    coordinator = SyncCoordinator(temp_db, FakeTransport(remote=["manual-1", 42]))

    with pytest.raises(ValidationError, match="Malformed"):
        coordinator.pull()
    assert len(payment_service.list_payments()) == 3


def test_explicit_push(temp_db, sample_payments):
    transport = FakeTransport()
    coordinator = SyncCoordinator(temp_db, transport)

    assert coordinator.push() == 3
    assert [record["name"] for record in transport.remote] == ["Netflix", "Car loan", "Internet"]


def test_listener_sees_provenance(temp_db):
    seen = []
    temp_db.subscribe(lambda snapshot, provenance: seen.append(provenance))

    temp_db.apply_mutation(lambda payments: payments)
    temp_db.apply_mutation(lambda payments: payments, provenance=Provenance.EXTERNAL)

    assert seen == [Provenance.LOCAL, Provenance.EXTERNAL]


class TestJsonFileTransport:
    """Tests for the JSON file transport."""

    def test_pull_missing_file(self, tmp_path):
        assert JsonFileTransport(str(tmp_path / "shared.json")).pull() is None

    def test_push_then_pull(self, tmp_path):
        transport = JsonFileTransport(str(tmp_path / "shared.json"))
        records = [{"id": "manual-1", "name": "Kira"}]

        transport.push(records)

        assert transport.pull() == records
        assert not (tmp_path / "shared.json.tmp").exists()

    def test_pull_rejects_non_list(self, tmp_path):
        path = tmp_path / "shared.json"
        path.write_text(json.dumps({"payments": []}), encoding="utf-8")

        with pytest.raises(ValidationError):
            JsonFileTransport(str(path)).pull()

    def test_pull_corrupt_file(self, tmp_path):
        path = tmp_path / "shared.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValidationError, match="not valid JSON"):
            JsonFileTransport(str(path)).pull()

    def test_two_repositories_converge(self, tmp_path, temp_db, payment_service, sample_payments):
        from duetrack.database.factories import create_sqlite_repository
        from duetrack.domain.payment import PaymentService

        shared = str(tmp_path / "shared.json")
        SyncCoordinator(temp_db, JsonFileTransport(shared)).push()

        other = create_sqlite_repository(database_path=str(tmp_path / "other.db"))
        other.connect()
        try:
            pulled = SyncCoordinator(other, JsonFileTransport(shared)).pull()
            other_payments = PaymentService(other).list_payments()
        finally:
            other.disconnect()

        assert pulled == 3
        assert other_payments == payment_service.list_payments()
