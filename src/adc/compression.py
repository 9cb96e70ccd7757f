"""
Compression codecs for stored entry bytes.

The set of codecs is closed: each Compression variant maps to exactly one
Codec instance. Stored files use the standard container formats, so they
can be inspected with zlib/gzip tooling:

- none:       bytes stored as-is
- deflateRaw: raw deflate stream, no header or checksum
- deflate:    zlib-wrapped deflate (RFC 1950)
- gzip:       gzip member (RFC 1952)
"""

from __future__ import annotations

import gzip
import zlib
from abc import ABC, abstractmethod
from enum import Enum

from adc.exceptions import ConfigurationError

_ALIASES: dict[str, str] = {
    "raw_deflate": "deflateRaw",
    "deflate_raw": "deflateRaw",
    "deflateraw": "deflateRaw",
    "zlib_deflate": "deflate",
    "zlib": "deflate",
    "gz": "gzip",
}


# 10-byte member header plus 8-byte CRC32/ISIZE trailer.
_GZIP_MIN_SIZE = 18


class Compression(str, Enum):
    """Compression applied to entry bytes on disk."""

    NONE = "none"
    DEFLATE_RAW = "deflateRaw"
    DEFLATE = "deflate"
    GZIP = "gzip"

    @classmethod
    def parse(cls, value: str | Compression | None) -> Compression:
        """Parse a configuration value into a Compression variant.

        Args:
            value: Variant, canonical name, alias, or None/"" for no compression.

        Returns:
            The matching Compression variant.

        Raises:
            ConfigurationError: If the name is not a known codec.
        """
        if isinstance(value, Compression):
            return value
        if not value:
            return cls.NONE

        name = value.strip()
        name = _ALIASES.get(name.lower(), name)
        for member in cls:
            if member.value == name or member.value.lower() == name.lower():
                return member

        raise ConfigurationError(
            f"Unknown compression: {value!r}",
            context={"supported": [m.value for m in cls]},
        )


class Codec(ABC):
    """Reversible byte transform applied around disk I/O.

    decode() raises the underlying library error (zlib.error, OSError,
    EOFError) on malformed input; the cache translates it into
    CorruptEntryError.
    """

    compression: Compression

    @abstractmethod
    def encode(self, data: bytes) -> bytes:
        ...

    @abstractmethod
    def decode(self, data: bytes) -> bytes:
        ...


class IdentityCodec(Codec):
    compression = Compression.NONE

    def encode(self, data: bytes) -> bytes:
        return data

    def decode(self, data: bytes) -> bytes:
        return data


class DeflateRawCodec(Codec):
    compression = Compression.DEFLATE_RAW

    def encode(self, data: bytes) -> bytes:
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        return compressor.compress(data) + compressor.flush()

    def decode(self, data: bytes) -> bytes:
        decompressor = zlib.decompressobj(wbits=-zlib.MAX_WBITS)
        result = decompressor.decompress(data)
        # A raw stream has no trailer, so truncation only shows as an
        # unfinished stream.
        if not decompressor.eof:
            raise zlib.error("incomplete or truncated raw deflate stream")
        return result


class DeflateCodec(Codec):
    compression = Compression.DEFLATE

    def encode(self, data: bytes) -> bytes:
        return zlib.compress(data)

    def decode(self, data: bytes) -> bytes:
        return zlib.decompress(data)


class GzipCodec(Codec):
    compression = Compression.GZIP

    def encode(self, data: bytes) -> bytes:
        return gzip.compress(data)

    def decode(self, data: bytes) -> bytes:
        # gzip.decompress(b"") returns b"" instead of failing.
        if len(data) < _GZIP_MIN_SIZE:
            raise EOFError("gzip data shorter than header and trailer")
        return gzip.decompress(data)


_CODECS: dict[Compression, Codec] = {
    Compression.NONE: IdentityCodec(),
    Compression.DEFLATE_RAW: DeflateRawCodec(),
    Compression.DEFLATE: DeflateCodec(),
    Compression.GZIP: GzipCodec(),
}


def get_codec(compression: str | Compression | None) -> Codec:
    """Get the codec for a compression name or variant."""
    return _CODECS[Compression.parse(compression)]
