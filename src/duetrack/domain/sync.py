"""Snapshot synchronisation.

The whole payment collection travels as one list of plain records. Every
repository mutation carries a ``Provenance``; only locally originated
snapshots are pushed, so a snapshot that was just pulled is never echoed back
to the remote it came from.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Sequence

import structlog

from duetrack.database.base import PaymentRepository
from duetrack.database.mappers import payment_from_record, payment_to_record
from duetrack.domain.entities import Payment, Provenance
from duetrack.domain.errors import ValidationError

logger = structlog.get_logger(__name__)


class SnapshotTransport(ABC):
    """Moves full payment snapshots to and from a remote store."""

    @abstractmethod
    def pull(self) -> Optional[list[dict[str, Any]]]:
        """Fetch the remote snapshot, or None if there is none yet."""
        pass

    @abstractmethod
    def push(self, records: list[dict[str, Any]]) -> None:
        """Replace the remote snapshot with ``records``."""
        pass


class JsonFileTransport(SnapshotTransport):
    """Keeps the remote snapshot in a JSON file, e.g. in a synced folder."""

    def __init__(self, path: str):
        self.path = Path(path)

    def pull(self) -> Optional[list[dict[str, Any]]]:
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Sync file {self.path} is not valid JSON: {e}")
        if not isinstance(data, list):
            raise ValidationError(f"Sync file {self.path} does not hold a payment list")
        return data

    def push(self, records: list[dict[str, Any]]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)


class SyncCoordinator:
    """Keeps a repository and a remote snapshot in step."""

    def __init__(self, repository: PaymentRepository, transport: SnapshotTransport):
        """Initialize the coordinator and subscribe to repository mutations.

        Args:
            repository: Payment repository instance
            transport: Remote snapshot transport
        """
        self.repository = repository
        self.transport = transport
        repository.subscribe(self.on_snapshot_saved)

    def on_snapshot_saved(self, snapshot: Sequence[Payment], provenance: Provenance) -> None:
        """Push locally originated snapshots; ignore pulled ones."""
        if provenance != Provenance.LOCAL:
            logger.debug("sync_push_skipped", provenance=provenance.value, size=len(snapshot))
            return
        self._push(snapshot)

    def push(self) -> int:
        """Push the current local snapshot unconditionally.

        Returns:
            Number of payments pushed
        """
        snapshot = self.repository.load_all()
        self._push(snapshot)
        return len(snapshot)

    def pull(self) -> Optional[int]:
        """Replace the local collection with the remote snapshot.

        Returns:
            Number of payments pulled, or None if the remote is empty

        Raises:
            ValidationError: If a remote record is malformed
        """
        records = self.transport.pull()
        if records is None:
            logger.info("sync_pull_empty")
            return None

        try:
            payments = [payment_from_record(record) for record in records]
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed remote payment record: {e}")

        self.repository.apply_mutation(lambda _: payments, provenance=Provenance.EXTERNAL)
        logger.info("sync_pulled", size=len(payments))
        return len(payments)

    def _push(self, snapshot: Sequence[Payment]) -> None:
        self.transport.push([payment_to_record(payment) for payment in snapshot])
        logger.info("sync_pushed", size=len(snapshot))
