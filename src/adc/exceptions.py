"""
Custom exception hierarchy for the disk cache.

All cache-specific exceptions inherit from ADCError, which carries optional
context for structured error handling and logging.

Filesystem failures other than "not found" are not wrapped: the builtin
OSError subclasses propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class ADCError(Exception):
    """Base exception for all disk cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(ADCError):
    """Raised when cache configuration is invalid.

    Examples:
        - Unknown compression name
        - Cache name that would escape the base directory
    """

    pass


class InvalidKeyError(ADCError, ValueError):
    """Raised when a key is missing or not a string at path-resolution time.

    Context should include:
        - key_type: The type name of the rejected key
    """

    pass


class CorruptEntryError(ADCError):
    """Raised when stored bytes cannot be decoded by the configured codec.

    Distinct from a cache miss: the entry file exists but is unreadable.

    Context should include:
        - path: The entry file that failed to decode
        - compression: The codec that was applied
    """

    pass


class MetricMisuseError(ADCError, RuntimeError):
    """Raised when Metric.stop() is called without an open start()."""

    pass
