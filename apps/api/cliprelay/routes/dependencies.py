"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request

from cliprelay.adapters.generation import GenerationProvider
from cliprelay.adapters.prompts import GeminiPromptComposer, PromptComposer, TemplatePromptComposer
from cliprelay.core.config import Settings, get_settings
from cliprelay.services.broker import NotificationBroker
from cliprelay.services.events import LiveSubscriptionService
from cliprelay.services.generation import GenerationService
from cliprelay.services.reconciliation import ReconciliationService
from cliprelay.services.webhook import WebhookIngestionService


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_broker(request: Request) -> NotificationBroker:
    return request.app.state.broker


def get_generation_provider(request: Request) -> GenerationProvider:
    return request.app.state.generation_provider


def get_prompt_composer(settings: Annotated[Settings, Depends(get_settings)]) -> PromptComposer:
    """Resolve composer adapter from configuration."""
    if settings.prompt_composer == "gemini":
        return GeminiPromptComposer(api_key=settings.gemini_api_key, model=settings.gemini_model)
    return TemplatePromptComposer()


def get_webhook_service(broker: Annotated[NotificationBroker, Depends(get_broker)]) -> WebhookIngestionService:
    return WebhookIngestionService(broker)


def get_live_subscription_service(
    broker: Annotated[NotificationBroker, Depends(get_broker)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LiveSubscriptionService:
    return LiveSubscriptionService(broker, keepalive_seconds=settings.sse_keepalive_seconds)


def get_reconciliation_service(
    broker: Annotated[NotificationBroker, Depends(get_broker)],
    provider: Annotated[GenerationProvider, Depends(get_generation_provider)],
) -> ReconciliationService:
    return ReconciliationService(broker, provider)


def get_generation_service(
    composer: Annotated[PromptComposer, Depends(get_prompt_composer)],
    provider: Annotated[GenerationProvider, Depends(get_generation_provider)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> GenerationService:
    return GenerationService(composer, provider, callback_url=settings.callback_url)
