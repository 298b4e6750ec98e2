"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from hollow_gear.core.config import (
    LoggingSettings,
    SerializationSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from hollow_gear.core.exceptions import ConfigurationError


class TestLoggingSettings:
    """Tests for LoggingSettings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default logging settings."""
        monkeypatch.chdir(tmp_path)

        settings = LoggingSettings()

        assert settings.level == "INFO"
        assert settings.json_format is False
        assert settings.file is None

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test logging settings read from the environment."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOLLOW_GEAR_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("HOLLOW_GEAR_LOG_JSON_FORMAT", "true")

        settings = LoggingSettings()

        assert settings.level == "WARNING"
        assert settings.json_format is True


class TestSerializationSettings:
    """Tests for SerializationSettings configuration."""

    def test_default_values(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default serialization settings."""
        monkeypatch.chdir(tmp_path)

        settings = SerializationSettings()

        assert settings.validate_on_load is True
        assert settings.indent is None
        assert settings.checksum_algorithm == "sha256"

    def test_algorithm_is_normalized(self) -> None:
        """Test checksum algorithm names are lower-cased."""
        settings = SerializationSettings(checksum_algorithm="SHA512")

        assert settings.checksum_algorithm == "sha512"

    def test_unknown_algorithm_rejected(self) -> None:
        """Test that unknown hashlib algorithms are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            SerializationSettings(checksum_algorithm="crc32")

        assert exc_info.value.details["config_key"] == "checksum_algorithm"

    def test_variable_length_algorithm_rejected(self) -> None:
        """Test that shake digests cannot be used for checksums."""
        with pytest.raises(ConfigurationError) as exc_info:
            SerializationSettings(checksum_algorithm="shake_128")

        assert "Variable-length" in exc_info.value.message


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "Hollow Gear Character Engine"
        assert settings.debug is False
        assert settings.is_production is True
        assert isinstance(settings.logging, LoggingSettings)
        assert isinstance(settings.serialization, SerializationSettings)

    def test_env_vars(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        mock_env_vars: dict[str, str],
    ) -> None:
        """Test settings loaded from environment variables."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.debug is True
        assert settings.is_production is False
        assert settings.logging.level == "DEBUG"
        assert settings.serialization.indent == 2

    def test_debug_requires_verbose_logging(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that debug mode rejects a log level above INFO."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOLLOW_GEAR_DEBUG", "true")
        monkeypatch.setenv("HOLLOW_GEAR_LOG_LEVEL", "ERROR")

        with pytest.raises(ConfigurationError) as exc_info:
            Settings()

        assert exc_info.value.details["config_key"] == "logging.level"


class TestGetSettings:
    """Tests for the cached settings accessor."""

    def test_settings_are_cached(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that get_settings returns the same instance."""
        monkeypatch.chdir(tmp_path)

        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that clearing the cache picks up new environment values."""
        monkeypatch.chdir(tmp_path)
        first = get_settings()

        monkeypatch.setenv("HOLLOW_GEAR_SERIALIZATION_INDENT", "4")
        clear_settings_cache()
        second = get_settings()

        assert first is not second
        assert second.serialization.indent == 4

    def test_invalid_env_wrapped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that invalid environment values surface as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOLLOW_GEAR_SERIALIZATION_INDENT", "99")

        with pytest.raises(ConfigurationError):
            get_settings()
