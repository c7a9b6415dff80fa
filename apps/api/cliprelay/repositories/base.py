"""Storage interfaces shared by the notification core."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field

from cliprelay.adapters.listeners import Listener
from cliprelay.schemas.clip import CompletionRecord


@dataclass(slots=True)
class StorePartition:
    resolved: list[CompletionRecord] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)


class CompletionStore(ABC):
    """Job identifier -> completion record, written once and read many times."""

    @abstractmethod
    def put(self, job_id: str, record: CompletionRecord) -> CompletionRecord:
        """Store ``record`` unless one exists; return the record now visible for ``job_id``."""

    @abstractmethod
    def get(self, job_id: str) -> CompletionRecord | None:
        """Return the stored record or ``None``."""

    def partition(self, job_ids: Iterable[str]) -> StorePartition:
        result = StorePartition()
        for job_id in job_ids:
            record = self.get(job_id)
            if record is None:
                result.pending.append(job_id)
            else:
                result.resolved.append(record)
        return result


class SubscriptionRegistry(ABC):
    """Job identifier -> listeners currently attached for it."""

    @abstractmethod
    def subscribe(self, job_id: str, listener: Listener) -> None:
        """Attach ``listener`` to ``job_id``."""

    @abstractmethod
    def unsubscribe(self, job_id: str, listener: Listener) -> None:
        """Detach ``listener`` from ``job_id``; no-op when absent."""

    @abstractmethod
    def drain_and_clear(self, job_id: str) -> list[Listener]:
        """Atomically remove and return every listener for ``job_id``."""

    @abstractmethod
    def listeners_for(self, job_id: str) -> list[Listener]:
        """Snapshot of listeners for ``job_id``."""


__all__ = ["CompletionStore", "StorePartition", "SubscriptionRegistry"]
