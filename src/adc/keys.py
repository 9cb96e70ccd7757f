"""
Key-to-path resolution.

Every key maps to the SHA-1 hex digest of its UTF-8 bytes, used as a flat
filename directly under the cache root. The digest is 40 characters long
whatever the key length, and separators in the key never reach the
filesystem.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any

from adc.exceptions import InvalidKeyError


def fingerprint(key: Any) -> str:
    """Compute the on-disk filename for a cache key.

    Args:
        key: The cache key.

    Returns:
        40-character lowercase SHA-1 hex digest.

    Raises:
        InvalidKeyError: If key is None or not a string.
    """
    if key is None:
        raise InvalidKeyError("Cache key is required")
    if not isinstance(key, str):
        raise InvalidKeyError(
            "Cache key must be a string",
            context={"key_type": type(key).__name__},
        )
    return hashlib.sha1(key.encode("utf-8", errors="surrogatepass")).hexdigest()


class PathResolver:
    """Resolve cache keys to entry paths under a fixed root."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    @staticmethod
    def resolve(key: Any) -> str:
        """Return the entry path for ``key`` relative to the root."""
        return fingerprint(key)

    def path_for(self, key: Any) -> Path:
        """Return the absolute entry path for ``key``."""
        return self.root / self.resolve(key)
