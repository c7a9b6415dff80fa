"""Live subscription routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from cliprelay.adapters.listeners import QueueListener
from cliprelay.domain.job_ids import parse_job_ids
from cliprelay.errors import validation_error
from cliprelay.routes.dependencies import get_live_subscription_service
from cliprelay.schemas.error import ValidationError
from cliprelay.services.events import LiveSubscriptionService

router = APIRouter(tags=["Events"])

_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.get(
    "/events",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"text/event-stream": {}}, "description": "Completion event stream"},
        400: {"model": ValidationError},
    },
)
async def stream_events(
    request: Request,
    service: Annotated[LiveSubscriptionService, Depends(get_live_subscription_service)],
    clip_ids: Annotated[str | None, Query(alias="clipIds")] = None,
) -> StreamingResponse:
    job_ids = parse_job_ids(clip_ids)
    if not job_ids:
        raise validation_error("clipIds query param required")

    listener = QueueListener()
    return StreamingResponse(
        service.stream(job_ids, listener, request.is_disconnected),
        media_type="text/event-stream",
        headers=_STREAM_HEADERS,
    )
