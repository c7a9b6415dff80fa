"""httpx transport for the client wait strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from cliprelay.schemas.clip import CompletionRecord

logger = logging.getLogger(__name__)

COMPLETE_EVENT = "complete"


class ClipTransportError(Exception):
    """Raised when the relay service cannot be reached or answers unexpectedly."""


class ClipTransport(ABC):
    """Push and pull access to the relay service."""

    @abstractmethod
    async def subscribe(self, job_ids: list[str]) -> CompletionRecord:
        """Hold the event stream open until the first completion arrives."""

    @abstractmethod
    async def poll(self, job_ids: list[str]) -> list[CompletionRecord]:
        """Ask the reconciliation endpoint once; empty list when nothing is ready."""


async def iter_sse_events(lines: AsyncIterator[str]) -> AsyncIterator[tuple[str, str]]:
    """Group raw SSE lines into ``(event, data)`` pairs; comments are skipped."""
    event = "message"
    data_lines: list[str] = []
    async for line in lines:
        if not line:
            if data_lines:
                yield event, "\n".join(data_lines)
            event = "message"
            data_lines = []
            continue
        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        value = value[1:] if value.startswith(" ") else value
        if field == "event":
            event = value
        elif field == "data":
            data_lines.append(value)

    if data_lines:
        yield event, "\n".join(data_lines)


class HttpClipTransport(ClipTransport):
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self, *, read_timeout: float | None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout, read=read_timeout),
            transport=self._transport,
        )

    async def start_generation(self, messages: list[dict[str, Any]], *, make_instrumental: bool = False) -> list[str]:
        """Start a generation job and return the job identifiers to wait on."""
        async with self._client(read_timeout=self._timeout) as client:
            try:
                response = await client.post(
                    "/generate-from-emotion",
                    json={"messages": messages, "make_instrumental": make_instrumental},
                )
            except httpx.HTTPError as exc:
                raise ClipTransportError("Failed to start generation") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise ClipTransportError(message or "Failed to start generation")

        job_ids = body.get("clipIds") if isinstance(body, dict) else None
        if not job_ids:
            raise ClipTransportError("No clip IDs returned from server.")
        return [str(job_id) for job_id in job_ids]

    async def subscribe(self, job_ids: list[str]) -> CompletionRecord:
        # The stream is held open indefinitely; the waiter owns the deadline.
        async with self._client(read_timeout=None) as client:
            try:
                async with client.stream("GET", "/events", params={"clipIds": ",".join(job_ids)}) as response:
                    response.raise_for_status()
                    async for event, data in iter_sse_events(response.aiter_lines()):
                        if event != COMPLETE_EVENT:
                            continue
                        try:
                            return CompletionRecord.model_validate(json.loads(data))
                        except (ValueError, ValidationError):
                            logger.warning("transport.bad_event event=%s", event)
                            continue
            except httpx.HTTPError as exc:
                raise ClipTransportError("Event stream failed") from exc

        raise ClipTransportError("Event stream ended without a completion event")

    async def poll(self, job_ids: list[str]) -> list[CompletionRecord]:
        async with self._client(read_timeout=self._timeout) as client:
            try:
                response = await client.get("/status", params={"ids": ",".join(job_ids)})
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise ClipTransportError("Status request failed") from exc

        try:
            found = response.json().get("found") or []
            return [CompletionRecord.model_validate(item) for item in found]
        except (AttributeError, ValueError, ValidationError) as exc:
            raise ClipTransportError("Status response was malformed") from exc
