"""Abstract payment repository interface."""

from abc import ABC, abstractmethod
from typing import Callable, Sequence

import structlog

# Import entities directly to avoid circular import through domain/__init__.py
from duetrack.domain.entities import Payment, Provenance

logger = structlog.get_logger(__name__)

Mutation = Callable[[list[Payment]], Sequence[Payment]]
SnapshotListener = Callable[[tuple[Payment, ...], Provenance], None]


class PaymentRepository(ABC):
    """Stores the full payment collection as one snapshot.

    Every change is a whole-collection replace: read the snapshot, compute
    the new one, write it back. Listeners are told about each saved snapshot
    together with the provenance of the mutation that produced it.
    """

    def __init__(self) -> None:
        self._listeners: list[SnapshotListener] = []

    @abstractmethod
    def connect(self) -> None:
        """Connect to the storage backend."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the storage backend."""
        pass

    @abstractmethod
    def load_all(self) -> list[Payment]:
        """Return every stored payment in saved order."""
        pass

    @abstractmethod
    def save_all(self, payments: Sequence[Payment]) -> None:
        """Atomically replace the stored collection with ``payments``."""
        pass

    def subscribe(self, listener: SnapshotListener) -> None:
        """Register a callback invoked after each ``apply_mutation``."""
        self._listeners.append(listener)

    def apply_mutation(
        self, mutation: Mutation, provenance: Provenance = Provenance.LOCAL
    ) -> tuple[Payment, ...]:
        """Apply ``mutation`` to the current snapshot and persist the result.

        Args:
            mutation: Function from the current snapshot to the new one
            provenance: Whether the change originated locally or was pulled
                from an external source

        Returns:
            The saved snapshot
        """
        current = self.load_all()
        updated = tuple(mutation(list(current)))
        self.save_all(updated)
        logger.debug(
            "snapshot_saved",
            provenance=provenance.value,
            before=len(current),
            after=len(updated),
        )
        for listener in self._listeners:
            listener(updated, provenance)
        return updated
