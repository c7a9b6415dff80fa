"""Reconciliation routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cliprelay.domain.job_ids import parse_job_ids
from cliprelay.errors import validation_error
from cliprelay.routes.dependencies import get_reconciliation_service, get_request_correlation_id
from cliprelay.schemas.error import ValidationError
from cliprelay.schemas.status import StatusResponse
from cliprelay.services.reconciliation import ReconciliationService

router = APIRouter(tags=["Status"])


@router.get(
    "/status",
    response_model=StatusResponse,
    responses={400: {"model": ValidationError}},
)
async def get_status(
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
    service: Annotated[ReconciliationService, Depends(get_reconciliation_service)],
    ids: str | None = None,
) -> StatusResponse:
    job_ids = parse_job_ids(ids)
    if not job_ids:
        raise validation_error("ids query required")

    return await service.reconcile(job_ids, correlation_id=correlation_id)
