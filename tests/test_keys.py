"""
Tests for key-to-path resolution.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from adc.exceptions import InvalidKeyError
from adc.keys import PathResolver, fingerprint


class TestFingerprint:
    """Test key fingerprints."""

    def test_sha1_hex(self) -> None:
        """Test the fingerprint is the SHA-1 hex digest of the UTF-8 key."""
        key = "path/to/file.js"
        assert fingerprint(key) == hashlib.sha1(key.encode("utf-8")).hexdigest()

    def test_fixed_length(self) -> None:
        """Test fingerprints are 40 characters regardless of key length."""
        assert len(fingerprint("")) == 40
        assert len(fingerprint("x" * 10_000)) == 40

    def test_known_value(self) -> None:
        """Test a stable digest across processes."""
        assert fingerprint("abc") == "a9993e364706816aba3e25717850c26c9cd0d89d"

    def test_distinct_keys(self) -> None:
        """Test different keys give different fingerprints."""
        assert fingerprint("a/b") != fingerprint("a_b")

    def test_none_key(self) -> None:
        """Test a missing key fails fast."""
        with pytest.raises(InvalidKeyError):
            fingerprint(None)

    def test_non_string_key(self) -> None:
        """Test non-string keys are rejected with their type in context."""
        with pytest.raises(InvalidKeyError) as exc_info:
            fingerprint(123)

        assert exc_info.value.context["key_type"] == "int"
        assert isinstance(exc_info.value, ValueError)


class TestPathResolver:
    """Test PathResolver."""

    def test_resolve_is_relative_filename(self) -> None:
        """Test resolve returns a bare filename."""
        resolved = PathResolver.resolve("../../escape")
        assert "/" not in resolved
        assert Path(resolved).name == resolved

    def test_path_for(self, temp_dir: Path) -> None:
        """Test path_for joins the root and the fingerprint."""
        resolver = PathResolver(temp_dir)
        assert resolver.path_for("key") == temp_dir / fingerprint("key")

    def test_path_for_none(self, temp_dir: Path) -> None:
        """Test path_for never returns the root for a missing key."""
        with pytest.raises(InvalidKeyError):
            PathResolver(temp_dir).path_for(None)

    def test_lone_surrogate_key(self, temp_dir: Path) -> None:
        """Test keys with unpaired surrogates resolve to distinct paths."""
        resolver = PathResolver(temp_dir)

        path = resolver.path_for("a\ud800b")
        assert len(path.name) == 40
        assert path != resolver.path_for("a\ud801b")
        assert path != resolver.path_for("a\ufffdb")
