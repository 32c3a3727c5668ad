"""Application configuration, read from the environment and an optional .env file."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Persistence
    NOTES_STORE: Literal["sqlite", "mongo", "memory"] = "sqlite"
    SQLITE_DB: Optional[str] = None
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "smartnotes"
    MONGO_COLLECTION: str = "notes"

    # Summarization
    SUMMARIZER: Literal["deterministic", "model"] = "deterministic"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    SUMMARY_MODEL: str = "gpt-3.5-turbo"
    SUMMARY_TIMEOUT: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
