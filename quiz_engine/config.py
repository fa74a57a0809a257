from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Loads and validates environment variables."""

    GEMINI_API_KEY: str | None = None
    # Tried in order; cheaper models first.
    GEMINI_MODELS: List[str] = [
        "gemini-2.5-flash-lite",
        "gemini-2.5-flash",
        "gemini-3-flash",
    ]
    MODEL_TIMEOUT_SECONDS: float = 60.0

    MAX_TEXT_CHARS: int = 10000
    INCLUDE_SUMMARY: bool = True
    STRICT_QUIZ_VALIDATION: bool = False

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("GEMINI_MODELS")
    @classmethod
    def models_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("GEMINI_MODELS must name at least one model")
        return value


settings = Settings()
