"""Deterministic prompt composer used when no language model is configured."""

from __future__ import annotations

import textwrap

from cliprelay.adapters.prompts.base import PromptComposer, PromptCompositionError
from cliprelay.schemas.generation import ChatMessage

_MOOD_KEYWORDS: dict[str, tuple[str, ...]] = {
    "a soothing, healing piano piece": ("sad", "tired", "lonely", "cry", "hurt", "stress", "anxious"),
    "an upbeat, celebratory pop song": ("happy", "excited", "great", "won", "love", "awesome", "glad"),
    "a warm, nostalgic acoustic ballad": ("miss", "remember", "home", "old", "childhood"),
    "a hopeful, uplifting anthem": ("hope", "try", "start", "tomorrow", "better", "dream"),
}
_DEFAULT_MOOD = "a gentle, heartfelt song"


class TemplatePromptComposer(PromptComposer):
    """Keyword mood match plus a shortened quote of the latest user message."""

    def __init__(self, *, max_quote_chars: int = 200) -> None:
        self._max_quote_chars = max_quote_chars

    async def compose(self, messages: list[ChatMessage]) -> str:
        user_texts = [message.text for message in messages if message.sender != "bot" and message.text.strip()]
        if not user_texts:
            raise PromptCompositionError("Conversation has no user messages")

        corpus = " ".join(user_texts).lower()
        mood = next(
            (name for name, keywords in _MOOD_KEYWORDS.items() if any(keyword in corpus for keyword in keywords)),
            _DEFAULT_MOOD,
        )
        quote = textwrap.shorten(" ".join(user_texts[-1].split()), width=self._max_quote_chars, placeholder="...")
        return f"{mood[0].upper()}{mood[1:]} inspired by: {quote}"


__all__ = ["TemplatePromptComposer"]
