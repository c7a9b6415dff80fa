"""Gemini-backed prompt composer."""

from __future__ import annotations

import logging

from google import genai

from cliprelay.adapters.prompts.base import PromptComposer, PromptCompositionError, render_transcript
from cliprelay.schemas.generation import ChatMessage

logger = logging.getLogger(__name__)

_THEME_INSTRUCTIONS = """\
You pick the best song theme for a chat conversation.

Read the conversation below and infer the most fitting theme for a song.
- Reply with a single sentence describing the song theme.
- Stay close to what the conversation means; do not simply repeat it.
- If an emotion stands out, reflect it (healing, romantic, melancholic, hopeful, ...).

Conversation:
{transcript}

Reply with the theme only, for example:
"A gentle, healing piano piece with a touch of nostalgia"
"""


class GeminiPromptComposer(PromptComposer):
    def __init__(self, *, api_key: str | None, model: str, client: genai.Client | None = None) -> None:
        self._api_key = api_key
        self._model = model
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise PromptCompositionError("Gemini API key is not configured")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def compose(self, messages: list[ChatMessage]) -> str:
        if not messages:
            raise PromptCompositionError("Conversation is empty")

        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self._model,
                contents=_THEME_INSTRUCTIONS.format(transcript=render_transcript(messages)),
            )
        except Exception as exc:  # pragma: no cover - provider exception surface
            logger.warning("gemini.compose_failed model=%s reason=%s", self._model, type(exc).__name__)
            raise PromptCompositionError("Gemini prompt composition failed") from exc

        theme = (response.text or "").strip().strip('"').strip()
        if not theme:
            raise PromptCompositionError("Gemini returned an empty theme")
        return theme


__all__ = ["GeminiPromptComposer"]
