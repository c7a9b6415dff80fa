"""Listener adapters."""

from .base import CloseCallback, Listener, ListenerClosedError
from .queue_listener import QueueListener

__all__ = [
    "CloseCallback",
    "Listener",
    "ListenerClosedError",
    "QueueListener",
]
