"""
Core types for the disk cache.

This module defines the read-result value returned by cache lookups:
- CacheEntry: frozen dataclass distinguishing a hit from a miss
- CacheEntry.MISS: the shared miss instance
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Union

CacheValue = Union[str, bytes]


@dataclass(frozen=True)
class CacheEntry:
    """Immutable result of a cache read.

    On a hit, ``key`` is the resolved entry file path (not the caller's key)
    and ``value`` is the decoded stored value. Misses are always the single
    ``CacheEntry.MISS`` instance.
    """

    is_cached: bool
    key: Path | None = None
    value: CacheValue | None = None

    MISS: ClassVar[CacheEntry]

    @classmethod
    def hit(cls, path: Path, value: CacheValue) -> CacheEntry:
        """Build a hit entry for a file read at ``path``."""
        return cls(is_cached=True, key=path, value=value)

    def __bool__(self) -> bool:
        return self.is_cached


CacheEntry.MISS = CacheEntry(is_cached=False)
