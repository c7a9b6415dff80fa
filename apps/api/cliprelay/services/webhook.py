"""Collaborator webhook ingestion."""

from dataclasses import dataclass
import logging
from typing import Any

from cliprelay.core.logging_safety import safe_log_identifier
from cliprelay.errors import validation_error
from cliprelay.schemas.clip import record_from_clip_entry
from cliprelay.schemas.webhook import WebhookEnvelope
from cliprelay.services.broker import NotificationBroker

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WebhookResult:
    job_id: str
    resolved: bool


def _clean_job_id(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def _primary_entry(clips: list[Any]) -> dict[str, Any] | None:
    first = clips[0]
    # Entries arrive grouped (ClipEntry[][]) or flat (ClipEntry[]).
    if isinstance(first, list):
        if not first:
            return None
        first = first[0]
    return first if isinstance(first, dict) else None


def parse_webhook_envelope(payload: Any) -> WebhookEnvelope | None:
    """Extract job identifier and primary clip entry; ``None`` when the shape is unusable."""
    if not isinstance(payload, dict):
        return None

    data = payload.get("data")
    if not isinstance(data, dict):
        return None

    clips = data.get("data")
    if not isinstance(clips, list) or not clips:
        return None

    job_id = _clean_job_id(data.get("task_id")) or _clean_job_id(payload.get("task_id"))
    if job_id is None:
        return None

    entry = _primary_entry(clips)
    if entry is None:
        return None

    callback_type = data.get("callbackType")
    return WebhookEnvelope(
        job_id=job_id,
        primary_entry=entry,
        clip_count=len(clips),
        callback_type=callback_type if isinstance(callback_type, str) else None,
    )


class WebhookIngestionService:
    def __init__(self, broker: NotificationBroker) -> None:
        self._broker = broker

    def ingest(self, payload: Any, *, correlation_id: str | None = None) -> WebhookResult:
        safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
        envelope = parse_webhook_envelope(payload)
        if envelope is None:
            logger.warning(
                "webhook.rejected correlation_id=%s code=VALIDATION_ERROR payload_type=%s",
                safe_correlation_id,
                type(payload).__name__,
            )
            raise validation_error("Invalid callback payload")

        record = record_from_clip_entry(envelope.job_id, envelope.primary_entry)
        if record is None:
            # No audio locator yet; resolving now would freeze an incomplete record.
            logger.info(
                "webhook.pending correlation_id=%s job_id=%s callback_type=%r clip_count=%s",
                safe_correlation_id,
                safe_log_identifier(envelope.job_id, prefix="jid"),
                envelope.callback_type,
                envelope.clip_count,
            )
            return WebhookResult(job_id=envelope.job_id, resolved=False)

        result = self._broker.resolve(envelope.job_id, record)
        logger.info(
            "webhook.applied correlation_id=%s job_id=%s callback_type=%r first_write=%s delivered=%s",
            safe_correlation_id,
            safe_log_identifier(envelope.job_id, prefix="jid"),
            envelope.callback_type,
            result.first_write,
            result.delivered,
        )
        return WebhookResult(job_id=envelope.job_id, resolved=True)
