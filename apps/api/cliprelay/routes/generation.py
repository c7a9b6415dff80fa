"""Generation start routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from cliprelay.routes.dependencies import get_generation_service
from cliprelay.schemas.error import GenerationStartError, ValidationError
from cliprelay.schemas.generation import GenerateFromEmotionRequest, GenerateFromEmotionResponse
from cliprelay.services.generation import GenerationService

router = APIRouter(tags=["Generation"])


@router.post(
    "/generate-from-emotion",
    response_model=GenerateFromEmotionResponse,
    responses={400: {"model": ValidationError}, 500: {"model": GenerationStartError}},
)
async def generate_from_emotion(
    payload: GenerateFromEmotionRequest,
    service: Annotated[GenerationService, Depends(get_generation_service)],
) -> GenerateFromEmotionResponse:
    return await service.start(payload)
