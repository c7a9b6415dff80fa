"""Job identifier parsing."""

from collections.abc import Iterable


def parse_job_ids(raw: str | Iterable[str] | None) -> list[str]:
    """Split comma-separated identifiers; blanks dropped, duplicates ignored, order kept."""
    if raw is None:
        return []

    chunks = raw.split(",") if isinstance(raw, str) else [part for item in raw for part in item.split(",")]
    job_ids: dict[str, None] = {}
    for chunk in chunks:
        job_id = chunk.strip()
        if job_id:
            job_ids.setdefault(job_id, None)
    return list(job_ids)
