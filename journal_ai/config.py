from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from journal_ai.core.types import DEFAULT_MODEL_ID


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JOURNAL_AI_",
        env_file=".env",
        extra="ignore",
    )

    # "gemini" uses the hosted Gemini API, "apple_fm" the on-device SDK
    provider: Literal["gemini", "apple_fm"] = "gemini"
    default_model: str = DEFAULT_MODEL_ID

    gemini_api_key: str | None = None
    # None keeps the SDK default endpoint
    gemini_base_url: str | None = None
    request_timeout_seconds: float = 60.0

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
