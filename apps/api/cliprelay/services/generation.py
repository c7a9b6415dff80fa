"""Generation start service layer."""

import logging

from cliprelay.adapters.generation import GenerationProvider, ProviderUnavailableError
from cliprelay.adapters.prompts import PromptComposer, PromptCompositionError
from cliprelay.core.logging_safety import safe_log_identifier
from cliprelay.errors import ApiError
from cliprelay.schemas.generation import GenerateFromEmotionRequest, GenerateFromEmotionResponse

logger = logging.getLogger(__name__)


class GenerationService:
    def __init__(self, composer: PromptComposer, provider: GenerationProvider, *, callback_url: str) -> None:
        self._composer = composer
        self._provider = provider
        self._callback_url = callback_url

    async def start(self, request: GenerateFromEmotionRequest) -> GenerateFromEmotionResponse:
        try:
            prompt = await self._composer.compose(request.messages)
        except PromptCompositionError as exc:
            logger.warning(
                "generation.prompt_failed messages=%s reason=%s",
                len(request.messages),
                exc,
            )
            raise ApiError(
                status_code=500,
                code="PROMPT_COMPOSITION_FAILED",
                message="Failed to compose a generation prompt",
            ) from exc

        # Prompts echo user conversation text; only a digest is logged.
        safe_prompt = safe_log_identifier(prompt, prefix="prm")
        try:
            job_id = await self._provider.start_generation(
                prompt=prompt,
                instrumental=request.make_instrumental,
                callback_url=self._callback_url,
            )
        except ProviderUnavailableError as exc:
            logger.warning("generation.start_failed prompt=%s reason=%s", safe_prompt, exc)
            raise ApiError(
                status_code=500,
                code="GENERATION_START_FAILED",
                message="Failed to start generation",
            ) from exc

        if not job_id:
            logger.warning("generation.start_failed prompt=%s reason=missing_job_id", safe_prompt)
            raise ApiError(
                status_code=500,
                code="GENERATION_START_FAILED",
                message="No job identifier returned by the generation provider",
            )

        logger.info(
            "generation.started job_id=%s prompt=%s instrumental=%s",
            safe_log_identifier(job_id, prefix="jid"),
            safe_prompt,
            request.make_instrumental,
        )
        return GenerateFromEmotionResponse(clip_ids=[job_id], prompt=prompt)
