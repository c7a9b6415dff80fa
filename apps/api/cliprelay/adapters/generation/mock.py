"""In-process generation collaborator for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from cliprelay.adapters.generation.base import GenerationProvider, ProviderUnavailableError


@dataclass(slots=True)
class StartedGeneration:
    job_id: str
    prompt: str
    instrumental: bool
    callback_url: str


class MockGenerationProvider(GenerationProvider):
    """Deterministic fake of the generation API.

    ``auto_complete`` makes every started job report complete on its first status
    query. Failure messages are one-shot, like a failpoint.
    """

    def __init__(self, *, auto_complete: bool = False) -> None:
        self.auto_complete = auto_complete
        self.started: list[StartedGeneration] = []
        self.status_queries: list[list[str]] = []
        self.clips_by_job: dict[str, dict[str, Any]] = {}
        self.start_failure_message: str | None = None
        self.status_failure_message: str | None = None
        self.omit_task_id = False

    def complete(self, job_id: str, *, title: str = "Mock song", audio_url: str | None = None) -> dict[str, Any]:
        clip = {
            "id": f"clip-{job_id}",
            "taskId": job_id,
            "status": "complete",
            "title": title,
            "audio_url": audio_url or f"https://mock.invalid/audio/{job_id}.mp3",
        }
        self.clips_by_job[job_id] = clip
        return clip

    async def start_generation(self, *, prompt: str, instrumental: bool, callback_url: str) -> str | None:
        if self.start_failure_message is not None:
            message = self.start_failure_message
            self.start_failure_message = None
            raise ProviderUnavailableError(message)
        if self.omit_task_id:
            return None

        job_id = f"mock-{uuid4()}"
        self.started.append(
            StartedGeneration(job_id=job_id, prompt=prompt, instrumental=instrumental, callback_url=callback_url)
        )
        if self.auto_complete:
            self.complete(job_id)
        return job_id

    async def fetch_clips(self, job_ids: list[str]) -> list[dict[str, Any]]:
        self.status_queries.append(list(job_ids))
        if self.status_failure_message is not None:
            message = self.status_failure_message
            self.status_failure_message = None
            raise ProviderUnavailableError(message)

        return [dict(self.clips_by_job[job_id]) for job_id in job_ids if job_id in self.clips_by_job]


__all__ = ["MockGenerationProvider", "StartedGeneration"]
