"""Listener capability interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
import logging
import threading

from cliprelay.schemas.clip import CompletionRecord

logger = logging.getLogger(__name__)

CloseCallback = Callable[["Listener"], None]


class ListenerClosedError(Exception):
    """Raised when a record is delivered to a listener whose channel has closed."""


class Listener(ABC):
    """Server-held end of one attach request.

    Transports only implement ``deliver``; close bookkeeping is shared so every
    adapter fires its close callbacks exactly once.
    """

    def __init__(self) -> None:
        self._close_callbacks: list[CloseCallback] = []
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def deliver(self, record: CompletionRecord) -> None:
        """Push one completion record to the remote end."""

    def on_close(self, callback: CloseCallback) -> None:
        with self._lock:
            if not self._closed:
                self._close_callbacks.append(callback)
                return
        callback(self)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            callbacks = list(self._close_callbacks)
            self._close_callbacks.clear()

        for callback in callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception("listener.close_callback_failed listener=%s", type(self).__name__)


__all__ = ["CloseCallback", "Listener", "ListenerClosedError"]
