"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def summarize_ids(job_ids: list[str], *, limit: int = 5) -> str:
    """Render a bounded, comma-joined list of hashed job ids for log lines."""
    tokens = [safe_log_identifier(job_id, prefix="jid") for job_id in job_ids[:limit]]
    if len(job_ids) > limit:
        tokens.append(f"+{len(job_ids) - limit}")
    return ",".join(tokens)
