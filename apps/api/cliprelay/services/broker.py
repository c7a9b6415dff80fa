"""Notification broker: resolution, fan-out, and attach bookkeeping."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import threading
import zlib

from cliprelay.adapters.listeners import Listener
from cliprelay.core.logging_safety import safe_log_identifier
from cliprelay.repositories.base import CompletionStore, SubscriptionRegistry
from cliprelay.schemas.clip import CompletionRecord

logger = logging.getLogger(__name__)

_LOCK_STRIPES = 64


@dataclass(slots=True)
class ResolutionResult:
    record: CompletionRecord
    first_write: bool
    delivered: int
    failed: int


class NotificationBroker:
    """Coordinates the completion store and the subscription registry.

    Writes and drains for one job identifier run under that identifier's lock
    stripe, and so does the attach-time store check. A listener therefore either
    lands in the registry before the drain or sees the stored record.
    """

    def __init__(self, store: CompletionStore, registry: SubscriptionRegistry) -> None:
        self._store = store
        self._registry = registry
        self._locks = [threading.Lock() for _ in range(_LOCK_STRIPES)]

    @property
    def store(self) -> CompletionStore:
        return self._store

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    def _lock_for(self, job_id: str) -> threading.Lock:
        return self._locks[zlib.crc32(job_id.encode("utf-8")) % _LOCK_STRIPES]

    def resolve(self, job_id: str, record: CompletionRecord) -> ResolutionResult:
        with self._lock_for(job_id):
            stored = self._store.put(job_id, record)
            listeners = self._registry.drain_and_clear(job_id)

        first_write = stored is record
        safe_job_id = safe_log_identifier(job_id, prefix="jid")
        if not first_write:
            logger.info(
                "broker.duplicate_resolution job_id=%s kept_clip_id=%s",
                safe_job_id,
                safe_log_identifier(stored.clip_id, prefix="clp"),
            )

        delivered = 0
        failed = 0
        for listener in listeners:
            try:
                listener.deliver(stored)
            except Exception as exc:
                failed += 1
                logger.warning(
                    "broker.delivery_failed job_id=%s listener=%s reason=%s",
                    safe_job_id,
                    type(listener).__name__,
                    type(exc).__name__,
                )
                continue
            delivered += 1

        logger.info(
            "broker.resolved job_id=%s first_write=%s delivered=%s failed=%s",
            safe_job_id,
            first_write,
            delivered,
            failed,
        )
        return ResolutionResult(record=stored, first_write=first_write, delivered=delivered, failed=failed)

    def attach(self, job_id: str, listener: Listener) -> CompletionRecord | None:
        """Return the stored record (fast path) or register ``listener`` and return ``None``."""
        with self._lock_for(job_id):
            record = self._store.get(job_id)
            if record is None:
                self._registry.subscribe(job_id, listener)
        return record

    def detach(self, job_ids: Iterable[str], listener: Listener) -> None:
        for job_id in job_ids:
            self._registry.unsubscribe(job_id, listener)
