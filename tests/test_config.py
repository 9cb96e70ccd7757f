"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from adc.compression import Compression
from adc.config import (
    DEFAULT_CACHE_NAME,
    Settings,
    clear_settings_cache,
    default_location,
    get_settings,
    parse_file_mode,
)


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_defaults(self, settings: Settings) -> None:
        """Test defaults without any environment."""
        assert settings.CACHE_NAME == DEFAULT_CACHE_NAME
        assert settings.CACHE_LOCATION is None
        assert settings.location == default_location()
        assert settings.COMPRESSION is Compression.NONE
        assert settings.SUPPORT_BUFFER is False
        assert settings.FILE_MODE == 0o777
        assert settings.LOG_LEVEL == "WARNING"

    def test_settings_loads_from_env(self, mock_env_vars: dict[str, str], temp_dir: Path) -> None:
        """Test that settings correctly loads from environment variables."""
        settings = get_settings()

        assert settings.CACHE_NAME == "env-cache"
        assert settings.CACHE_LOCATION == temp_dir / "env-location"
        assert settings.root == temp_dir / "env-location" / "env-cache"
        assert settings.COMPRESSION is Compression.GZIP
        assert settings.SUPPORT_BUFFER is True
        assert settings.FILE_MODE == 0o770
        assert settings.LOG_LEVEL == "DEBUG"

    def test_compression_alias(self) -> None:
        """Test codec aliases are accepted from the environment."""
        with patch.dict(os.environ, {"ADC_COMPRESSION": "raw_deflate"}):
            assert Settings(_env_file=None).COMPRESSION is Compression.DEFLATE_RAW

    def test_unknown_compression(self) -> None:
        """Test unknown codecs fail validation."""
        with patch.dict(os.environ, {"ADC_COMPRESSION": "brotli"}):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

        assert "compression" in str(exc_info.value).lower()

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b"])
    def test_invalid_cache_name(self, name: str) -> None:
        """Test names that are not a single directory are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CACHE_NAME=name)

    def test_invalid_log_level(self) -> None:
        with patch.dict(os.environ, {"ADC_LOG_LEVEL": "LOUD"}):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_get_settings_is_cached(self, mock_env_vars: dict[str, str]) -> None:
        """Test get_settings returns a singleton until cleared."""
        first = get_settings()
        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first


class TestFileMode:
    """Tests for file mode parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("0o777", 0o777), ("777", 0o777), ("0644", 0o644), (0o600, 0o600), (" 0O755 ", 0o755)],
    )
    def test_parse_file_mode(self, value: str | int, expected: int) -> None:
        assert parse_file_mode(value) == expected

    def test_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            parse_file_mode(0o17777)

    def test_invalid_env_mode(self) -> None:
        with patch.dict(os.environ, {"ADC_FILE_MODE": "rwx"}):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestDisplay:
    """Tests for settings display."""

    def test_display(self, settings: Settings) -> None:
        display = settings.display()

        assert display["CACHE_NAME"] == DEFAULT_CACHE_NAME
        assert display["ROOT"] == str(settings.root)
        assert display["FILE_MODE"] == "0o777"
        assert display["LOG_FILE"] is None
