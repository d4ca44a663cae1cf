"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Every setting has a default so the in-memory stack runs with no
environment at all.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from splitstate.core.config import get_settings

    settings = get_settings()
    if settings.storage_backend is StorageBackend.SQL:
        write_url = settings.write_database_url
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from splitstate.core.enums import Environment, ProjectionDelivery, StorageBackend


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables (SPLITSTATE_ prefix)
        2. Default values

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool | None = Field(
        default=None,
        description="Force JSON log rendering. Defaults to JSON outside development.",
    )

    # Storage
    storage_backend: StorageBackend = Field(
        default=StorageBackend.MEMORY,
        description="Adapter set for write, read and dead-letter stores (memory, sql)",
    )
    write_database_url: str = Field(
        default="sqlite+aiosqlite:///./splitstate_write.db",
        description="Write store connection URL (aggregates and event outbox)",
    )
    read_database_url: str = Field(
        default="sqlite+aiosqlite:///./splitstate_read.db",
        description="Read store connection URL (views and dead letters)",
    )
    db_echo: bool = Field(
        default=False,
        description="Log all SQL statements (debugging only)",
    )

    # Projection pipeline
    projection_delivery: ProjectionDelivery = Field(
        default=ProjectionDelivery.SYNC,
        description="How committed events reach the projection engine (sync, background, deferred)",
    )
    projection_max_attempts: int = Field(
        default=5,
        description="Attempts per event before a transient failure is dead-lettered",
    )
    projection_retry_base_delay: float = Field(
        default=0.05,
        description="First retry delay in seconds",
    )
    projection_retry_max_delay: float = Field(
        default=5.0,
        description="Upper bound for a single retry delay in seconds",
    )
    projection_backoff_multiplier: float = Field(
        default=2.0,
        description="Exponential backoff multiplier between retries",
    )

    # Outbox relay
    relay_batch_size: int = Field(
        default=100,
        description="Maximum undelivered events fetched per relay pass",
    )
    relay_poll_interval: float = Field(
        default=1.0,
        description="Seconds between relay passes when running in the background",
    )

    model_config = SettingsConfigDict(
        env_prefix="SPLITSTATE_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name.

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log_level: {v}")
        return level

    @field_validator("projection_max_attempts", "relay_batch_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """
        Validate counters are at least 1.

        Args:
            v: Configured value.

        Returns:
            int: Validated value.

        Raises:
            ValueError: If value is below 1.
        """
        if v < 1:
            raise ValueError("value must be >= 1")
        return v

    @field_validator(
        "projection_retry_base_delay",
        "projection_retry_max_delay",
        "relay_poll_interval",
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """
        Validate delays are not negative.

        Args:
            v: Delay in seconds.

        Returns:
            float: Validated delay.

        Raises:
            ValueError: If delay is negative.
        """
        if v < 0:
            raise ValueError("delay must be >= 0")
        return v

    @field_validator("projection_backoff_multiplier")
    @classmethod
    def validate_multiplier(cls, v: float) -> float:
        """
        Validate backoff multiplier does not shrink delays.

        Args:
            v: Multiplier.

        Returns:
            float: Validated multiplier.

        Raises:
            ValueError: If multiplier is below 1.
        """
        if v < 1:
            raise ValueError("projection_backoff_multiplier must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_delay_bounds(self) -> "Settings":
        """Ensure the base retry delay does not exceed the maximum delay."""
        if self.projection_retry_base_delay > self.projection_retry_max_delay:
            raise ValueError(
                "projection_retry_base_delay must not exceed projection_retry_max_delay"
            )
        return self

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing environment.

        Returns:
            bool: True if environment is TESTING, False otherwise.
        """
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION

    @property
    def use_json_logs(self) -> bool:
        """
        Decide log rendering.

        Returns:
            bool: Explicit log_json if set, otherwise JSON everywhere but development.
        """
        if self.log_json is not None:
            return self.log_json
        return not self.is_development


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
