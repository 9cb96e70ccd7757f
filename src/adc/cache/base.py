"""
Base classes for caching.

CacheProtocol is the abstract interface the disk cache implements. It keeps
callers (and test doubles) independent of the on-disk layout.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from adc.types import CacheEntry, CacheValue


class CacheProtocol(ABC):
    """Abstract interface for cache implementations."""

    @abstractmethod
    def path_for(self, key: str) -> Path:
        """Return the location where the value for a key is stored."""
        ...

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check if a key exists in the cache."""
        ...

    @abstractmethod
    async def get(self, key: str) -> CacheEntry:
        """Get an entry from the cache; misses return CacheEntry.MISS."""
        ...

    @abstractmethod
    async def set(self, key: str, value: CacheValue) -> Any:
        """Set a value in the cache."""
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove a key; removing an absent key succeeds."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""
        ...
