"""Generation collaborator adapters."""

from .base import GenerationProvider, ProviderUnavailableError
from .mock import MockGenerationProvider
from .suno import SunoGenerationProvider

__all__ = [
    "GenerationProvider",
    "MockGenerationProvider",
    "ProviderUnavailableError",
    "SunoGenerationProvider",
]
