"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Literal


class Settings(BaseSettings):
    """Application settings loaded from ``CATALOGUE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Book Catalogue API"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Storage
    storage_backend: Literal["memory", "json"] = "memory"
    catalogue_file: Path = Path("data") / "catalogue.json"

    # Identifiers
    isbn_prefix: str = "978"
    isbn_max_attempts: int = Field(default=5, ge=1)

    @field_validator("isbn_prefix")
    @classmethod
    def _prefix_is_three_digits(cls, value: str) -> str:
        if len(value) != 3 or not value.isdigit():
            raise ValueError("isbn_prefix must be exactly 3 digits")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
