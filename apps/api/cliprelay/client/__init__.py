"""Client-side wait strategy for generated clips."""

from .clock import Clock, MonotonicClock, VirtualClock
from .transport import ClipTransport, ClipTransportError, HttpClipTransport, iter_sse_events
from .waiter import ClipWaiter, ClipWaitTimeout, WaitPolicy

__all__ = [
    "ClipTransport",
    "ClipTransportError",
    "ClipWaitTimeout",
    "ClipWaiter",
    "Clock",
    "HttpClipTransport",
    "MonotonicClock",
    "VirtualClock",
    "WaitPolicy",
    "iter_sse_events",
]
