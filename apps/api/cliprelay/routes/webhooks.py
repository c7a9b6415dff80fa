"""Collaborator webhook routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from cliprelay.routes.dependencies import get_request_correlation_id, get_webhook_service
from cliprelay.schemas.error import ValidationError
from cliprelay.services.webhook import WebhookIngestionService

router = APIRouter(tags=["Webhooks"])


@router.post(
    "/suno/callback",
    responses={400: {"model": ValidationError}},
)
async def post_suno_callback(
    payload: Annotated[Any, Body()],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    service: Annotated[WebhookIngestionService, Depends(get_webhook_service)],
) -> dict[str, Any]:
    result = service.ingest(payload, correlation_id=correlation_id)
    return {"status": "ok", "jobId": result.job_id, "resolved": result.resolved}
