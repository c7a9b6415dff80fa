"""Server-Sent Events framing helpers."""

from __future__ import annotations

import json
from typing import Any


def format_sse_event(data: Any, event: str | None = None) -> str:
    """Format ``data`` as one SSE frame; non-string data is JSON-encoded."""
    lines = []
    if event is not None:
        lines.append(f"event: {event}")

    data_str = data if isinstance(data, str) else json.dumps(data, default=str)
    # Every data line needs its own prefix.
    for line in data_str.split("\n"):
        lines.append(f"data: {line}")

    return "\n".join(lines) + "\n\n"


def format_sse_comment(comment: str) -> str:
    return f": {comment}\n\n"
