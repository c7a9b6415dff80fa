"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cliprelay.adapters.generation import GenerationProvider, MockGenerationProvider, SunoGenerationProvider
from cliprelay.core.config import Settings, get_settings
from cliprelay.errors import ApiError
from cliprelay.repositories.memory import InMemoryCompletionStore, InMemorySubscriptionRegistry
from cliprelay.routes import events_router, generation_router, health_router, status_router, webhooks_router
from cliprelay.schemas.error import ErrorResponse
from cliprelay.services.broker import NotificationBroker

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s:%(lineno)d - %(message)s"

if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

logger = logging.getLogger(__name__)

_BAD_REQUEST_VALIDATION_PATHS: dict[tuple[str, str], str] = {
    ("POST", "/suno/callback"): "Invalid callback payload",
    ("POST", "/generate-from-emotion"): "Messages must be an array",
}


def build_generation_provider(settings: Settings) -> GenerationProvider:
    """Resolve collaborator adapter from configuration."""
    if settings.generation_provider == "mock":
        return MockGenerationProvider(auto_complete=True)
    return SunoGenerationProvider(
        base_url=settings.suno_api_base_url,
        api_key=settings.suno_api_key,
        model=settings.suno_model,
        timeout=settings.suno_timeout_seconds,
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Cliprelay API", version="0.1.0")
    app.state.store = InMemoryCompletionStore()
    app.state.registry = InMemorySubscriptionRegistry()
    app.state.broker = NotificationBroker(app.state.store, app.state.registry)
    app.state.generation_provider = build_generation_provider(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        logger.warning(
            "api.error method=%s path=%s status=%s code=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.payload.code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Collaborator and UI payloads get the documented 400 instead of FastAPI's 422.
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        message = _BAD_REQUEST_VALIDATION_PATHS.get((request.method.upper(), route_path))
        if message is not None:
            logger.warning("request.rejected method=%s path=%s code=VALIDATION_ERROR", request.method, route_path)
            payload = ErrorResponse(code="VALIDATION_ERROR", message=message)
            return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

        return await request_validation_exception_handler(request, exc)

    app.include_router(events_router)
    app.include_router(webhooks_router)
    app.include_router(status_router)
    app.include_router(generation_router)
    app.include_router(health_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
