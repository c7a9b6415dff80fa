"""Prompt composer interfaces."""

from abc import ABC, abstractmethod

from cliprelay.schemas.generation import ChatMessage


class PromptCompositionError(Exception):
    """Raised when a conversation cannot be turned into a generation prompt."""


class PromptComposer(ABC):
    """Turns a chat transcript into a one-line song theme."""

    @abstractmethod
    async def compose(self, messages: list[ChatMessage]) -> str:
        """Return the generation prompt for ``messages``."""


def render_transcript(messages: list[ChatMessage]) -> str:
    return "\n".join(f"{message.sender}: {message.text}" for message in messages)


__all__ = ["PromptComposer", "PromptCompositionError", "render_transcript"]
