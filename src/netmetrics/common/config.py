"""Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from netmetrics.common.exceptions import ConfigurationError


class SeriesSettings(BaseSettings):
    """Time-series calibration configuration."""

    model_config = SettingsConfigDict(env_prefix="SERIES_")

    # Used when no two samples exist to derive a step from.
    # None disables the fallback and makes calibration fail instead.
    default_step_seconds: int | None = Field(default=15, ge=1)

    # Trailing samples missing for at most this long are treated as
    # reporting lag and trimmed rather than zero-filled.
    lag_tolerance_seconds: int = Field(
        default=60, ge=0, le=3600,
        description="Collection/reporting delay absorbed at the end of relative ranges",
    )


class ParserSettings(BaseSettings):
    """Metrics parser configuration."""

    model_config = SettingsConfigDict(env_prefix="PARSER_")

    worker_count: int = Field(default=4, ge=1, le=32)
    parallel_threshold: int = Field(
        default=500, ge=1,
        description="Row count from which per-row work is spread over threads",
    )


class APISettings(BaseSettings):
    """HTTP API configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = Field(default=2, ge=1, le=32)
    reload: bool = False

    # Stored as comma-separated string, converted to list via property
    cors_origins_str: str = Field(default="*", alias="cors_origins")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    include_timestamp: bool = True
    include_caller: bool = True


class Settings(BaseSettings):
    """Main application settings aggregating all configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application info
    app_name: str = "NetMetrics"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Sub-configurations
    series: SeriesSettings = Field(default_factory=SeriesSettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    api: APISettings = Field(default_factory=APISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton.

    Raises:
        ConfigurationError: If the environment holds invalid values.
    """
    try:
        return Settings()
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={
                "errors": [
                    {"loc": ".".join(str(part) for part in error["loc"]), "msg": error["msg"]}
                    for error in e.errors()
                ],
            },
            cause=e,
        ) from e
