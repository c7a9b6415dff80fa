"""In-memory correlation store and subscription registry."""

from __future__ import annotations

import threading

from cliprelay.adapters.listeners import Listener
from cliprelay.repositories.base import CompletionStore, SubscriptionRegistry
from cliprelay.schemas.clip import CompletionRecord


class InMemoryCompletionStore(CompletionStore):
    """Unbounded process-local store; no eviction and no expiry."""

    def __init__(self) -> None:
        self._records: dict[str, CompletionRecord] = {}
        self.write_count = 0
        self.rejected_write_count = 0

    def put(self, job_id: str, record: CompletionRecord) -> CompletionRecord:
        # dict.setdefault is atomic, so concurrent writers for one key agree on a single winner.
        stored = self._records.setdefault(job_id, record)
        if stored is record:
            self.write_count += 1
        else:
            self.rejected_write_count += 1
        return stored

    def get(self, job_id: str) -> CompletionRecord | None:
        return self._records.get(job_id)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class InMemorySubscriptionRegistry(SubscriptionRegistry):
    """Listener sets keyed by job identifier; empty sets are never kept."""

    def __init__(self) -> None:
        # dict-as-ordered-set keeps delivery order equal to attach order.
        self._listeners: dict[str, dict[Listener, None]] = {}
        self._lock = threading.Lock()

    def subscribe(self, job_id: str, listener: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(job_id, {})[listener] = None

    def unsubscribe(self, job_id: str, listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(job_id)
            if listeners is None:
                return
            listeners.pop(listener, None)
            if not listeners:
                del self._listeners[job_id]

    def drain_and_clear(self, job_id: str) -> list[Listener]:
        with self._lock:
            listeners = self._listeners.pop(job_id, None)
        return list(listeners) if listeners else []

    def listeners_for(self, job_id: str) -> list[Listener]:
        with self._lock:
            return list(self._listeners.get(job_id, ()))

    def __contains__(self, job_id: object) -> bool:
        with self._lock:
            return job_id in self._listeners

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
