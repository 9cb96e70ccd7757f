"""
Disk-backed key/value cache.

Each entry is a single file at ``root / sha1(key)``. There is no index: the
existence of the entry file is the only source of truth for has()/get().
Writes go straight to the destination path, so concurrent writers follow
"last write wins".
"""

from __future__ import annotations

import asyncio
import os
import shutil
import stat
import zlib
from pathlib import Path

import aiofiles
import aiofiles.os

from adc.cache.base import CacheProtocol
from adc.compression import Codec, Compression, get_codec
from adc.config import Settings, get_settings, validate_cache_name
from adc.exceptions import CorruptEntryError
from adc.keys import PathResolver
from adc.logging import get_logger, log_context
from adc.observability.metrics import Metric, MetricsRegistry, get_registry, instrument
from adc.types import CacheEntry, CacheValue

logger = get_logger(__name__)

SYSTEM_NAME = "async-disk-cache"


def _rmtree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        pass


class DiskCache(CacheProtocol):
    """Cache storing each entry as one (optionally compressed) file.

    Values are text by default: str is written as UTF-8 and read back as str.
    With ``support_buffer`` the cache returns the exact stored bytes instead.

    Every public operation is timed by a Metric named after it, registered
    under SYSTEM_NAME in the metrics registry.
    """

    def __init__(
        self,
        name: str | None = None,
        location: Path | str | None = None,
        compression: str | Compression | None = None,
        support_buffer: bool | None = None,
        file_mode: int | None = None,
        registry: MetricsRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            name: Leaf directory distinguishing this cache from others under
                the same location.
            location: Base directory; defaults to a per-user temp directory.
            compression: Codec name or variant for stored bytes.
            support_buffer: Return bytes instead of text from get().
            file_mode: Permission bits applied to each written file.
            registry: Metrics registry; defaults to the process-wide one.
            settings: Settings supplying defaults for unset arguments.
        """
        settings = settings or get_settings()

        self.name = validate_cache_name(name or settings.CACHE_NAME)
        self.location = Path(location) if location is not None else settings.location
        self.root = self.location / self.name
        self.compression = Compression.parse(
            compression if compression is not None else settings.COMPRESSION
        )
        self.support_buffer = (
            settings.SUPPORT_BUFFER if support_buffer is None else support_buffer
        )
        self.file_mode = settings.FILE_MODE if file_mode is None else file_mode

        self._resolver = PathResolver(self.root)
        self._codec: Codec = get_codec(self.compression)
        self._registry = registry or get_registry()

        logger.debug(
            "New cache",
            root=str(self.root),
            compression=self.compression.value,
            support_buffer=self.support_buffer,
        )

    def __repr__(self) -> str:
        return f"DiskCache(root={str(self.root)!r}, compression={self.compression.value!r})"

    def _metric(self, operation: str) -> Metric:
        return self._registry.metric(SYSTEM_NAME, operation)

    def stats(self) -> dict[str, dict[str, int]]:
        """Count and cumulative time (ns) of every instrumented operation."""
        return self._registry.stats_for(SYSTEM_NAME).to_json()

    @instrument("path_for")
    def path_for(self, key: str) -> Path:
        """Return the path where the value for ``key`` is stored.

        Raises:
            InvalidKeyError: If key is missing or not a string.
        """
        return self._resolver.path_for(key)

    @instrument("has")
    async def has(self, key: str) -> bool:
        """Check whether an entry file exists for ``key``."""
        file_path = self.path_for(key)

        with log_context(cache_name=self.name, operation="has"):
            logger.debug("has", path=str(file_path))
            try:
                st = await aiofiles.os.stat(file_path)
            except (FileNotFoundError, NotADirectoryError):
                return False
            return stat.S_ISREG(st.st_mode)

    @instrument("get")
    async def get(self, key: str) -> CacheEntry:
        """Read the entry for ``key``.

        Returns:
            A hit entry, or CacheEntry.MISS when no file exists.

        Raises:
            CorruptEntryError: If the stored bytes fail to decode.
            OSError: For filesystem failures other than "not found".
        """
        file_path = self.path_for(key)

        with log_context(cache_name=self.name, operation="get"):
            logger.debug("get", path=str(file_path))
            try:
                async with aiofiles.open(file_path, "rb") as f:
                    stored = await f.read()
            except FileNotFoundError:
                logger.debug("miss", path=str(file_path))
                return CacheEntry.MISS

        return CacheEntry.hit(file_path, self._decode(file_path, stored))

    @instrument("set")
    async def set(self, key: str, value: CacheValue) -> Path:
        """Store ``value`` under ``key``.

        Args:
            key: Cache key.
            value: str (stored as UTF-8) or bytes-like value.

        Returns:
            Path of the written entry file.
        """
        file_path = self.path_for(key)

        with log_context(cache_name=self.name, operation="set"):
            logger.debug("set", path=str(file_path))

            data = self._codec.encode(self._to_bytes(value))

            await aiofiles.os.makedirs(file_path.parent, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
            await asyncio.to_thread(os.chmod, file_path, self.file_mode)

        return file_path

    @instrument("remove")
    async def remove(self, key: str) -> None:
        """Delete the entry for ``key``; a missing entry is not an error."""
        file_path = self.path_for(key)

        with log_context(cache_name=self.name, operation="remove"):
            logger.debug("remove", path=str(file_path))
            try:
                await aiofiles.os.remove(file_path)
            except FileNotFoundError:
                logger.debug("remove: already absent", path=str(file_path))

    @instrument("clear")
    async def clear(self) -> None:
        """Recursively delete the cache root and everything under it."""
        with log_context(cache_name=self.name, operation="clear"):
            logger.debug("clear", root=str(self.root))
            await asyncio.to_thread(_rmtree, self.root)

    def _to_bytes(self, value: CacheValue) -> bytes:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise TypeError(
            f"Cache values must be str or bytes, not {type(value).__name__}"
        )

    def _decode(self, file_path: Path, stored: bytes) -> CacheValue:
        try:
            data = self._codec.decode(stored)
        except (zlib.error, EOFError, OSError) as e:
            raise CorruptEntryError(
                "Stored entry could not be decoded",
                context={"path": str(file_path), "compression": self.compression.value},
            ) from e

        if self.support_buffer:
            return data
        # Non-UTF-8 bytes written in text mode are not recoverable.
        return data.decode("utf-8", errors="replace")


Cache = DiskCache
