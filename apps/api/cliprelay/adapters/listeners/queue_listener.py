"""asyncio queue-backed listener used by the event stream endpoint."""

from __future__ import annotations

import asyncio

from cliprelay.adapters.listeners.base import Listener, ListenerClosedError
from cliprelay.schemas.clip import CompletionRecord


class QueueListener(Listener):
    """Buffers deliveries for a single streaming response."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        super().__init__()
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[CompletionRecord] = asyncio.Queue()

    def deliver(self, record: CompletionRecord) -> None:
        if self.closed:
            raise ListenerClosedError("Listener channel is closed")

        try:
            running_loop = asyncio.get_running_loop()
        except RuntimeError:
            running_loop = None

        if running_loop is self._loop:
            self._queue.put_nowait(record)
        else:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, record)

    async def next_record(self, timeout: float | None = None) -> CompletionRecord | None:
        """Wait for the next delivery; ``None`` when ``timeout`` elapses first."""
        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None
