"""Configuration management for the Hollow Gear engine.

Settings are loaded with pydantic-settings from environment variables
and an optional ``.env`` file. The engine itself is pure, so
configuration only covers the ambient concerns: log output and the
snapshot/patch serialization defaults.

Example:
    >>> from hollow_gear.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.serialization.checksum_algorithm
    'sha256'

Environment Variables:
    HOLLOW_GEAR_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    HOLLOW_GEAR_LOG_JSON_FORMAT: Emit JSON log lines
    HOLLOW_GEAR_SERIALIZATION_VALIDATE_ON_LOAD: Validate snapshots on deserialize
    HOLLOW_GEAR_SERIALIZATION_CHECKSUM_ALGORITHM: hashlib algorithm for patches
"""

from __future__ import annotations

import hashlib
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hollow_gear.core.exceptions import ConfigurationError


class LoggingSettings(BaseSettings):
    """Configuration for structured log output.

    Attributes:
        level: Minimum log level emitted.
        json_format: Render log lines as JSON instead of console output.
        file: Optional log file path.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOLLOW_GEAR_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_format: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )


class SerializationSettings(BaseSettings):
    """Configuration for snapshots and patches.

    Attributes:
        validate_on_load: Run full character validation after deserializing.
        indent: JSON indentation used by ``serialize``; None for compact.
        checksum_algorithm: hashlib algorithm name used for patch checksums.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOLLOW_GEAR_SERIALIZATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    validate_on_load: bool = Field(
        default=True,
        description="Validate snapshots after deserialization",
    )
    indent: int | None = Field(
        default=None,
        ge=0,
        le=8,
        description="JSON indentation for serialized snapshots",
    )
    checksum_algorithm: str = Field(
        default="sha256",
        description="hashlib algorithm for patch checksums",
    )

    @field_validator("checksum_algorithm")
    @classmethod
    def validate_checksum_algorithm(cls, value: str) -> str:
        """Ensure the algorithm is one hashlib can always provide.

        Args:
            value: The configured algorithm name.

        Returns:
            The lower-cased algorithm name.

        Raises:
            ConfigurationError: If hashlib does not guarantee the algorithm.
        """
        normalized = value.lower()
        if normalized not in hashlib.algorithms_guaranteed:
            raise ConfigurationError(
                f"Unsupported checksum algorithm: {value}",
                config_key="checksum_algorithm",
            )
        if normalized.startswith("shake_"):
            raise ConfigurationError(
                "Variable-length digests cannot be used for checksums",
                config_key="checksum_algorithm",
            )
        return normalized


class Settings(BaseSettings):
    """Engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        logging: Log output settings.
        serialization: Snapshot and patch settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="HOLLOW_GEAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Hollow Gear Character Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    serialization: SerializationSettings = Field(default_factory=SerializationSettings)

    @model_validator(mode="after")
    def validate_debug_logging(self) -> "Settings":
        """Reject debug mode paired with a log level that hides debug output.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If debug is on and the level is above INFO.
        """
        if self.debug and self.logging.level in ("ERROR", "CRITICAL"):
            raise ConfigurationError(
                f"debug mode requires a log level of INFO or lower, got {self.logging.level}",
                config_key="logging.level",
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "LoggingSettings",
    "SerializationSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
