"""
Configuration management using pydantic-settings.

Loads cache defaults from ADC_* environment variables and an optional .env
file. Explicit DiskCache constructor arguments always take precedence.
"""

from __future__ import annotations

import getpass
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from adc.compression import Compression
from adc.exceptions import ConfigurationError

DEFAULT_CACHE_NAME = "default-disk-cache"
DESCRIPTIVE_DIR_NAME = "if-you-need-to-delete-this-open-an-issue-async-disk-cache"


def _username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # No login name and no passwd entry (e.g. some containers).
        return "unknown"


def default_location() -> Path:
    """Default base directory: a per-user folder inside the system temp dir."""
    return Path(tempfile.gettempdir()) / _username() / DESCRIPTIVE_DIR_NAME


def validate_cache_name(name: str) -> str:
    """Reject names that are empty or would leave the base directory.

    Raises:
        ConfigurationError: If the name is not a single path component.
    """
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ConfigurationError(
            "Cache name must be a single directory name",
            context={"name": name},
        )
    return name


def parse_file_mode(value: int | str) -> int:
    """Parse permission bits given as an int or an octal string ("0o777", "777")."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0o"):
            text = text[2:]
        mode = int(text, 8)
    else:
        mode = int(value)

    if not 0 <= mode <= 0o7777:
        raise ValueError(f"File mode out of range: {oct(mode)}")
    return mode


class Settings(BaseSettings):
    """Cache settings loaded from environment variables.

    Optional:
        ADC_CACHE_NAME: Leaf directory distinguishing this cache
        ADC_CACHE_LOCATION: Base directory (defaults to a per-user temp dir)
        ADC_COMPRESSION: none | deflateRaw | deflate | gzip (aliases accepted)
        ADC_SUPPORT_BUFFER: Return bytes instead of text
        ADC_FILE_MODE: Permission bits set on written entries
        ADC_LOG_LEVEL: Logging level
        ADC_LOG_FILE: JSON lines log file
    """

    model_config = SettingsConfigDict(
        env_prefix="ADC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    CACHE_NAME: str = Field(
        default=DEFAULT_CACHE_NAME,
        description="Leaf directory name of the cache root",
    )
    CACHE_LOCATION: Path | None = Field(
        default=None,
        description="Base directory of the cache root (defaults to temp dir)",
    )
    COMPRESSION: Compression = Field(
        default=Compression.NONE,
        description="Compression applied to stored entries",
    )
    SUPPORT_BUFFER: bool = Field(
        default=False,
        description="Treat values as raw bytes instead of text",
    )
    FILE_MODE: int = Field(
        default=0o777,
        description="Permission bits applied to written entry files",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON lines log file")

    @field_validator("CACHE_NAME")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the cache name is a single path component."""
        try:
            return validate_cache_name(v)
        except ConfigurationError as e:
            raise ValueError(e.message) from e

    @field_validator("COMPRESSION", mode="before")
    @classmethod
    def validate_compression(cls, v: object) -> Compression:
        """Accept codec aliases such as raw_deflate or zlib."""
        try:
            return Compression.parse(v)  # type: ignore[arg-type]
        except ConfigurationError as e:
            raise ValueError(str(e)) from e

    @field_validator("FILE_MODE", mode="before")
    @classmethod
    def validate_file_mode(cls, v: int | str) -> int:
        """Accept octal strings for the file mode."""
        return parse_file_mode(v)

    @property
    def location(self) -> Path:
        """Base directory of the cache root."""
        return self.CACHE_LOCATION or default_location()

    @property
    def root(self) -> Path:
        """Cache root directory for the configured name."""
        return self.location / self.CACHE_NAME

    def display(self) -> dict[str, str | bool | None]:
        """Return settings as display strings."""
        return {
            "CACHE_NAME": self.CACHE_NAME,
            "CACHE_LOCATION": str(self.location),
            "ROOT": str(self.root),
            "COMPRESSION": self.COMPRESSION.value,
            "SUPPORT_BUFFER": self.SUPPORT_BUFFER,
            "FILE_MODE": oct(self.FILE_MODE),
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
