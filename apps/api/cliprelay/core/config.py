"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    generation_provider: Literal["mock", "suno"] = "suno"
    suno_api_base_url: str = "https://api.sunoapi.org"
    suno_api_key: str = ""
    suno_model: str = "V5"
    suno_timeout_seconds: float = 30.0
    public_base_url: str = "http://localhost:8000"
    prompt_composer: Literal["template", "gemini"] = "template"
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    sse_keepalive_seconds: float = 15.0
    cors_allow_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix="CLIPRELAY_", extra="ignore")

    @property
    def callback_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}/suno/callback"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
