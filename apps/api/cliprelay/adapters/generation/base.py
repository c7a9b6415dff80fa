"""Generation collaborator interfaces."""

from abc import ABC, abstractmethod
from typing import Any


class ProviderUnavailableError(Exception):
    """Raised when the generation collaborator cannot be reached or answers garbage."""


class GenerationProvider(ABC):
    """Provider-neutral access to the third-party generation API."""

    @abstractmethod
    async def start_generation(self, *, prompt: str, instrumental: bool, callback_url: str) -> str | None:
        """Start a job and return its identifier, or ``None`` when none was returned."""

    @abstractmethod
    async def fetch_clips(self, job_ids: list[str]) -> list[dict[str, Any]]:
        """Return raw clip status entries for ``job_ids`` in one batched query."""


__all__ = ["GenerationProvider", "ProviderUnavailableError"]
