"""
Tests for compression codecs.
"""

from __future__ import annotations

import gzip
import zlib

import pytest

from adc.compression import Compression, get_codec
from adc.exceptions import ConfigurationError

SAMPLE = b"Some test value " * 32 + bytes(range(256))


class TestCompressionParse:
    """Test codec name parsing."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            (None, Compression.NONE),
            ("", Compression.NONE),
            ("none", Compression.NONE),
            ("deflate", Compression.DEFLATE),
            ("zlib_deflate", Compression.DEFLATE),
            ("zlib", Compression.DEFLATE),
            ("deflateRaw", Compression.DEFLATE_RAW),
            ("raw_deflate", Compression.DEFLATE_RAW),
            ("gzip", Compression.GZIP),
            ("GZIP", Compression.GZIP),
            (Compression.GZIP, Compression.GZIP),
        ],
    )
    def test_parse(self, name: str | None, expected: Compression) -> None:
        assert Compression.parse(name) is expected

    def test_unknown(self) -> None:
        """Test unknown names raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            Compression.parse("brotli")

        assert "gzip" in exc_info.value.context["supported"]


class TestCodecs:
    """Test encode/decode for every codec."""

    @pytest.mark.parametrize("compression", list(Compression))
    def test_round_trip(self, compression: Compression) -> None:
        codec = get_codec(compression)
        assert codec.compression is compression
        assert codec.decode(codec.encode(SAMPLE)) == SAMPLE
        assert codec.decode(codec.encode(b"")) == b""

    def test_identity(self) -> None:
        assert get_codec("none").encode(SAMPLE) == SAMPLE

    def test_formats_match_stdlib(self) -> None:
        """Test encoded bytes are readable by standard tooling."""
        assert zlib.decompress(get_codec("deflate").encode(SAMPLE)) == SAMPLE
        assert gzip.decompress(get_codec("gzip").encode(SAMPLE)) == SAMPLE
        assert zlib.decompress(get_codec("deflateRaw").encode(SAMPLE), -zlib.MAX_WBITS) == SAMPLE

    def test_reads_stdlib_output(self) -> None:
        """Test data compressed elsewhere decodes."""
        assert get_codec("deflate").decode(zlib.compress(SAMPLE)) == SAMPLE
        assert get_codec("gzip").decode(gzip.compress(SAMPLE)) == SAMPLE

    def test_raw_deflate_truncated(self) -> None:
        codec = get_codec("deflateRaw")
        encoded = codec.encode(SAMPLE)

        with pytest.raises(zlib.error):
            codec.decode(encoded[: len(encoded) // 2])

    def test_deflate_garbage(self) -> None:
        with pytest.raises(zlib.error):
            get_codec("deflate").decode(b"not compressed")

    def test_gzip_garbage(self) -> None:
        with pytest.raises(OSError):
            get_codec("gzip").decode(b"not compressed data, just plain text")

    @pytest.mark.parametrize("compression", ["deflateRaw", "deflate", "gzip"])
    def test_empty_input_fails(self, compression: str) -> None:
        """Test an empty payload is an error for every compressed codec."""
        with pytest.raises((zlib.error, EOFError)):
            get_codec(compression).decode(b"")

    def test_gzip_shorter_than_header_and_trailer(self) -> None:
        encoded = get_codec("gzip").encode(b"")

        with pytest.raises(EOFError):
            get_codec("gzip").decode(encoded[:17])
