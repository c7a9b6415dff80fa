"""Pull-based reconciliation against the generation collaborator."""

from __future__ import annotations

import logging
from typing import Any

from cliprelay.adapters.generation import GenerationProvider, ProviderUnavailableError
from cliprelay.core.logging_safety import safe_log_identifier, summarize_ids
from cliprelay.schemas.clip import CompletionRecord, record_from_clip_entry
from cliprelay.schemas.status import StatusResponse
from cliprelay.services.broker import NotificationBroker

logger = logging.getLogger(__name__)

_COMPLETE_STATUS = "complete"
_CLIP_ID_KEYS = ("taskId", "task_id", "id", "clipId")


def clip_job_id(clip: dict[str, Any], pending: set[str]) -> str | None:
    """Pending identifier a status entry reports for; ``None`` for clips nobody asked about."""
    for key in _CLIP_ID_KEYS:
        value = clip.get(key)
        if value and str(value) in pending:
            return str(value)
    return None


class ReconciliationService:
    def __init__(self, broker: NotificationBroker, provider: GenerationProvider) -> None:
        self._broker = broker
        self._provider = provider

    async def reconcile(self, job_ids: list[str], *, correlation_id: str | None = None) -> StatusResponse:
        safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
        partition = self._broker.store.partition(job_ids)
        if not partition.pending:
            return StatusResponse(found=partition.resolved, pending=[])

        try:
            clips = await self._provider.fetch_clips(partition.pending)
        except ProviderUnavailableError as exc:
            logger.warning(
                "reconcile.degraded correlation_id=%s pending=%s reason=%s",
                safe_correlation_id,
                summarize_ids(partition.pending),
                exc,
            )
            return StatusResponse(found=partition.resolved, pending=partition.pending)

        pending_set = set(partition.pending)
        newly_resolved: dict[str, CompletionRecord] = {}
        for clip in clips:
            if clip.get("status") != _COMPLETE_STATUS:
                continue
            job_id = clip_job_id(clip, pending_set)
            if job_id is None:
                continue
            record = record_from_clip_entry(job_id, clip)
            if record is None:
                continue

            # Same primitive as the webhook, so attached listeners get the push too.
            result = self._broker.resolve(job_id, record)
            newly_resolved.setdefault(job_id, result.record)

        still_pending = [job_id for job_id in partition.pending if job_id not in newly_resolved]
        found = partition.resolved + [
            newly_resolved[job_id] for job_id in partition.pending if job_id in newly_resolved
        ]
        logger.info(
            "reconcile.completed correlation_id=%s found=%s newly_resolved=%s pending=%s",
            safe_correlation_id,
            len(found),
            len(newly_resolved),
            len(still_pending),
        )
        return StatusResponse(found=found, pending=still_pending)
