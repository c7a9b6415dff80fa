"""Completion record schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_FALLBACK_TITLE = "Generated clip"
_AUDIO_FALLBACK_KEYS = ("audioUrl", "audio", "download_url", "file_url", "url")


class CompletionRecord(BaseModel):
    """Authoritative, immutable result of a finished generation job."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    job_id: str = Field(min_length=1)
    clip_id: str | None = None
    title: str
    audio_url: str

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _first_text(entry: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def resolve_audio_url(entry: dict[str, Any]) -> str | None:
    """Pick the playable locator from a collaborator clip entry."""
    audio_url = _first_text(entry, "audio_url")
    if audio_url is not None:
        return audio_url

    stream_url = _first_text(entry, "stream_audio_url")
    if stream_url is not None:
        # Stream locators are served without an extension; players need the .mp3 suffix.
        return stream_url if stream_url.endswith(".mp3") else f"{stream_url}.mp3"

    return _first_text(entry, *_AUDIO_FALLBACK_KEYS)


def record_from_clip_entry(job_id: str, entry: dict[str, Any]) -> CompletionRecord | None:
    """Normalize a clip entry; ``None`` when the entry carries no audio locator yet."""
    audio_url = resolve_audio_url(entry)
    if audio_url is None:
        return None

    clip_id = _first_text(entry, "id", "clipId")
    title = _first_text(entry, "title") or clip_id or _FALLBACK_TITLE
    return CompletionRecord(job_id=job_id, clip_id=clip_id, title=title, audio_url=audio_url)
