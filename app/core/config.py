"""Application configuration loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    omdb_api_key: str | None = Field(default=None, alias="OMDB_API_KEY")
    omdb_base_url: str = Field(default="https://www.omdbapi.com/", alias="OMDB_BASE_URL")
    omdb_timeout: float | None = Field(default=10.0, alias="OMDB_TIMEOUT")
    database_url: str = Field(default="sqlite:///./favorites.db", alias="DATABASE_URL")
    api_base_url: str = Field(default="http://localhost:3001", alias="API_BASE_URL")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        alias="CORS_ORIGINS",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        env_parse_none_str="none",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
