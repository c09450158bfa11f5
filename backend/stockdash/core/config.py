"""
Application Configuration

All settings loaded from environment variables (or a local .env file).
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "StockDash Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, production
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 4000

    # Database (SQLite by default, PostgreSQL via asyncpg in production)
    database_url: str = "sqlite+aiosqlite:///./data/stockdash.db"

    # CORS (Frontend URL)
    frontend_url: Optional[str] = None
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Groq (OpenAI-compatible chat completions)
    groq_api_key: Optional[str] = None
    groq_model: Optional[str] = None
    groq_base: Optional[str] = None
    prediction_max_tokens: int = 200
    prediction_history_days: int = 14

    @field_validator("database_url")
    @classmethod
    def use_async_driver(cls, value: str) -> str:
        """Hosted Postgres URLs come without a driver; pin asyncpg."""
        if value.startswith("postgres://"):
            return "postgresql+asyncpg://" + value[len("postgres://"):]
        if value.startswith("postgresql://"):
            return "postgresql+asyncpg://" + value[len("postgresql://"):]
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def groq_configured(self) -> bool:
        return bool(self.groq_api_key and self.groq_model and self.groq_base)

    @property
    def cors_origins(self) -> list[str]:
        origins = list(self.allowed_origins)
        if self.frontend_url and self.frontend_url.rstrip("/") not in origins:
            origins.append(self.frontend_url.rstrip("/"))
        return origins


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
