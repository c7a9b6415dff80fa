"""Reconciliation schemas."""

from pydantic import BaseModel

from cliprelay.schemas.clip import CompletionRecord


class StatusResponse(BaseModel):
    found: list[CompletionRecord]
    pending: list[str]
