"""
Pytest configuration and fixtures for disk cache tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from adc.cache import DiskCache
from adc.config import Settings, clear_settings_cache
from adc.observability.metrics import get_registry

ADC_ENV_VARS = (
    "ADC_CACHE_NAME",
    "ADC_CACHE_LOCATION",
    "ADC_COMPRESSION",
    "ADC_SUPPORT_BUFFER",
    "ADC_FILE_MODE",
    "ADC_LOG_LEVEL",
    "ADC_LOG_FILE",
)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "ADC_CACHE_NAME": "env-cache",
        "ADC_CACHE_LOCATION": str(temp_dir / "env-location"),
        "ADC_COMPRESSION": "gzip",
        "ADC_SUPPORT_BUFFER": "true",
        "ADC_FILE_MODE": "0o770",
        "ADC_LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def settings() -> Settings:
    """Provide default Settings, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def cache(temp_dir: Path, settings: Settings) -> DiskCache:
    """Provide a default text cache rooted in the temp directory."""
    return DiskCache(location=temp_dir, settings=settings)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Strip ADC_* variables and reset cached settings and metrics."""
    for name in ADC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    get_registry().reset()
    yield
    clear_settings_cache()
    get_registry().reset()
