"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development. Override via
    environment variables (prefixed with STD_) or .env file.

    Examples:
        STD_LEDGER_TIMEOUT_SECONDS=2.5
        STD_RENDER_WORKERS=8
        STD_LOG_FORMAT=json
        STD_ENVIRONMENT=production
    """

    model_config = SettingsConfigDict(
        env_prefix="STD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Seller Tax Documents"
    environment: Environment = Environment.DEVELOPMENT

    # Ledger
    sqlite_path: Path = Field(
        default_factory=lambda: Path.home() / ".seller_tax_documents" / "ledger.db",
        description="SQLite ledger file used by the CLI and container",
    )
    ledger_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound on a single ledger aggregation query",
    )
    aggregation_workers: int = Field(default=5, ge=1, le=16)

    # Rendering and export
    platform_name: str = Field(
        default="Gumroad", description="Name printed in document banners and notes"
    )
    render_workers: int = Field(default=4, ge=1, le=16)
    pdf_compression: bool = Field(
        default=False, description="Compress PDF page streams"
    )
    archive_spool_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=0,
        description="Archive size kept in memory before spooling to disk",
    )

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] | None = Field(
        default=None,
        description="Log output format; unset means JSON in production, console elsewhere",
    )

    @field_validator("platform_name")
    @classmethod
    def validate_platform_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("platform_name must not be blank")
        return v.strip()

    @model_validator(mode="after")
    def default_log_format(self) -> "Settings":
        if self.log_format is None:
            self.log_format = "json" if self.is_production else "console"
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings.

    Returns:
        Configured Settings instance.
    """
    return Settings()
