"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ValidationError(BaseModel):
    code: Literal["VALIDATION_ERROR"]
    message: str
    details: dict[str, Any] | None = None


class GenerationStartError(BaseModel):
    code: Literal["GENERATION_START_FAILED", "PROMPT_COMPOSITION_FAILED"]
    message: str
    details: dict[str, Any] | None = None
