"""Route modules."""

from .events import router as events_router
from .generation import router as generation_router
from .health import router as health_router
from .status import router as status_router
from .webhooks import router as webhooks_router

__all__ = ["events_router", "generation_router", "health_router", "status_router", "webhooks_router"]
