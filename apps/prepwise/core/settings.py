from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for Prepwise.

    Loads from env with support for repo ".env" files. A missing Gemini key is not an
    error; it switches AI-backed operations into offline mode.
    """

    _app_env = (os.getenv("APP_ENV") or "").strip().lower()
    _env_files = (
        []
        if _app_env in {"test", "ci"}
        else [
            str((Path(__file__).resolve().parents[1] / ".env")),  # apps/prepwise/.env
            str((Path(__file__).resolve().parents[3] / ".env")),  # repo root .env
        ]
    )

    model_config = SettingsConfigDict(
        env_file=_env_files,
        case_sensitive=False,
        extra="ignore",
    )

    # --- App / Core ---
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="prepwise", alias="APP_NAME")
    # Logging
    log_level: str | None = Field(default=None, alias="PREPWISE_LOG_LEVEL")
    log_level_fallback: str | None = Field(default=None, alias="LOG_LEVEL")

    cors_allow_origins: list[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # --- Gemini ---
    gemini_api_key: SecretStr | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    gemini_timeout_seconds: int = Field(default=60, alias="GEMINI_TIMEOUT_SECONDS")

    # --- Mongo ---
    mongo_uri: str = Field(default="mongodb://localhost:27017", alias="MONGO_URI")
    mongo_database: str = Field(default="prepwise", alias="MONGO_DATABASE")
    interview_insights_collection: str = Field(
        default="interviewInsights", alias="INTERVIEW_INSIGHTS_COLLECTION"
    )
    submissions_collection: str = Field(default="submissions", alias="SUBMISSIONS_COLLECTION")
    interview_problems_collection: str = Field(
        default="interview_problems", alias="INTERVIEW_PROBLEMS_COLLECTION"
    )

    @property
    def gemini_key_value(self) -> str | None:
        if self.gemini_api_key is None:
            return None
        value = self.gemini_api_key.get_secret_value().strip()
        return value or None


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
