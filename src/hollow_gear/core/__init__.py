"""Core module providing configuration, logging, and base exceptions.

This module is the foundation of the Hollow Gear character engine,
providing the infrastructure shared by every rules module.

Exports:
    Exceptions:
        HollowGearError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        close_log_file: Close the file logging was writing to.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        character_context: Scope log entries to one character.
"""

from __future__ import annotations

from hollow_gear.core.config import (
    LoggingSettings,
    SerializationSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from hollow_gear.core.exceptions import (
    ChecksumMismatchError,
    ConfigurationError,
    DiceRollError,
    EntityNotFoundError,
    GameEngineError,
    HollowGearError,
    InvalidGameStateError,
    MigrationError,
    PatchApplicationError,
    SerializationError,
    SnapshotFormatError,
    SnapshotValidationError,
    ValidationError,
)
from hollow_gear.core.logging import (
    bind_context,
    character_context,
    clear_context,
    close_log_file,
    configure_from_settings,
    configure_logging,
    get_logger,
)
from hollow_gear.core.types import RandomSource


__all__ = [
    # Base exception
    "HollowGearError",
    # Configuration & validation exceptions
    "ConfigurationError",
    "ValidationError",
    "SnapshotValidationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "EntityNotFoundError",
    "DiceRollError",
    # Serialization exceptions
    "SerializationError",
    "SnapshotFormatError",
    "MigrationError",
    "ChecksumMismatchError",
    "PatchApplicationError",
    # Configuration
    "Settings",
    "LoggingSettings",
    "SerializationSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "close_log_file",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
    # Types
    "RandomSource",
]
