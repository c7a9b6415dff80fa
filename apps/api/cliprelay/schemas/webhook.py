"""Collaborator webhook schemas."""

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class WebhookEnvelope:
    """Job identifier and primary clip entry extracted from a collaborator callback."""

    job_id: str
    primary_entry: dict[str, Any]
    clip_count: int
    callback_type: str | None = None
