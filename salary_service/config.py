"""
Configuration module for salary service.

Centralized configuration management using Pydantic settings.
All values can be overridden via environment variables or a .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Salary service configuration.

    Attributes:
        SERVICE_NAME: Name used in logs and the health endpoint
        SERVICE_HOST: Server bind address
        SERVICE_PORT: Server port number
        DATA_FILE: Path of the CSV file backing the record store
        CURRENCY: Currency suffix written after every stored amount
        LOG_LEVEL: Logging level
        LOG_JSON: Emit JSON logs instead of console output
        DEBUG: Enable debug mode (exposes API docs)
    """

    # Service configuration
    SERVICE_NAME: str = Field(default="salary-service")
    SERVICE_HOST: str = Field(default="0.0.0.0")
    SERVICE_PORT: int = Field(default=8080, ge=1, le=65535)
    DEBUG: bool = Field(default=False)

    # Storage
    DATA_FILE: str = Field(
        default="salary_entries.csv",
        description="CSV file holding one salary entry per row",
    )
    CURRENCY: str = Field(default="NOK", min_length=1, pattern=r"^\S+$")

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    LOG_JSON: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
