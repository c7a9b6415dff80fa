"""Live subscription endpoint logic."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
import logging

from cliprelay.adapters.listeners import Listener, QueueListener
from cliprelay.core.logging_safety import summarize_ids
from cliprelay.core.sse import format_sse_comment, format_sse_event
from cliprelay.schemas.clip import CompletionRecord
from cliprelay.services.broker import NotificationBroker

logger = logging.getLogger(__name__)

COMPLETE_EVENT = "complete"


@dataclass(slots=True)
class AttachResult:
    ready: list[CompletionRecord] = field(default_factory=list)
    waiting: list[str] = field(default_factory=list)


class LiveSubscriptionService:
    def __init__(self, broker: NotificationBroker, *, keepalive_seconds: float = 15.0) -> None:
        self._broker = broker
        self._keepalive_seconds = keepalive_seconds

    def attach(self, job_ids: list[str], listener: Listener) -> AttachResult:
        """Serve known records immediately and register ``listener`` for the rest."""
        result = AttachResult()
        # Registered first so a connection that is already gone still cleans up.
        listener.on_close(lambda closed: self._broker.detach(job_ids, closed))

        for job_id in job_ids:
            record = self._broker.attach(job_id, listener)
            if record is None:
                result.waiting.append(job_id)
            else:
                result.ready.append(record)

        logger.info(
            "events.attached job_ids=%s ready=%s waiting=%s",
            summarize_ids(job_ids),
            len(result.ready),
            len(result.waiting),
        )
        return result

    async def stream(
        self,
        job_ids: list[str],
        listener: QueueListener,
        is_disconnected: Callable[[], Awaitable[bool]],
    ) -> AsyncIterator[str]:
        """Yield SSE frames until every identifier is delivered or the caller leaves."""
        delivered: set[str] = set()
        try:
            attached = self.attach(job_ids, listener)
            for record in attached.ready:
                delivered.add(record.job_id)
                yield format_sse_event(record.to_payload(), event=COMPLETE_EVENT)

            remaining = set(attached.waiting)
            while remaining:
                if await is_disconnected():
                    logger.info("events.disconnected pending=%s", summarize_ids(sorted(remaining)))
                    break

                record = await listener.next_record(timeout=self._keepalive_seconds)
                if record is None:
                    yield format_sse_comment("keep-alive")
                    continue
                if record.job_id in delivered:
                    continue

                delivered.add(record.job_id)
                remaining.discard(record.job_id)
                yield format_sse_event(record.to_payload(), event=COMPLETE_EVENT)
        finally:
            listener.close()
