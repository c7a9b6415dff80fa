"""Suno HTTP generation adapter."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cliprelay.adapters.generation.base import GenerationProvider, ProviderUnavailableError

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/v1/generate"
STATUS_PATH = "/api/v1/get"


class SunoGenerationProvider(GenerationProvider):
    """Talks to a Suno-compatible API over httpx."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        model: str = "V5",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._transport = transport

    def _build_headers(self) -> dict[str, str]:
        if not self._api_key:
            raise ProviderUnavailableError("SUNO_API_KEY is not configured")
        return {"Authorization": f"Bearer {self._api_key}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = self._build_headers()
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, path, headers=headers, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "suno.request_failed method=%s path=%s status=%s",
                    method,
                    path,
                    exc.response.status_code,
                )
                raise ProviderUnavailableError(f"Suno API returned HTTP {exc.response.status_code}") from exc
            except httpx.HTTPError as exc:
                logger.warning("suno.request_failed method=%s path=%s reason=%s", method, path, type(exc).__name__)
                raise ProviderUnavailableError("Suno API is unreachable") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderUnavailableError("Suno API returned invalid JSON") from exc

    async def start_generation(self, *, prompt: str, instrumental: bool, callback_url: str) -> str | None:
        body = await self._request(
            "POST",
            GENERATE_PATH,
            json={
                "prompt": prompt,
                "instrumental": instrumental,
                "model": self._model,
                "customMode": False,
                "wait_audio": False,
                "callbackUrl": callback_url,
            },
        )
        if not isinstance(body, dict):
            return None

        data = body.get("data")
        task_id = data.get("taskId") if isinstance(data, dict) else None
        task_id = task_id or body.get("taskId")
        return str(task_id) if task_id else None

    async def fetch_clips(self, job_ids: list[str]) -> list[dict[str, Any]]:
        body = await self._request("GET", STATUS_PATH, params={"ids": ",".join(job_ids)})
        if isinstance(body, list):
            clips = body
        elif isinstance(body, dict):
            clips = body.get("clips") or []
        else:
            clips = []
        return [clip for clip in clips if isinstance(clip, dict)]


__all__ = ["SunoGenerationProvider"]
