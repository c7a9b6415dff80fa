"""Prompt composer adapters."""

from .base import PromptComposer, PromptCompositionError, render_transcript
from .gemini import GeminiPromptComposer
from .template import TemplatePromptComposer

__all__ = [
    "GeminiPromptComposer",
    "PromptComposer",
    "PromptCompositionError",
    "TemplatePromptComposer",
    "render_transcript",
]
