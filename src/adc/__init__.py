"""
Async disk cache.

Store text or binary values under string keys as files below a root
directory, with optional compression and per-operation timing metrics.
"""

from adc.cache import SYSTEM_NAME, Cache, CacheProtocol, DiskCache
from adc.compression import Compression
from adc.exceptions import (
    ADCError,
    ConfigurationError,
    CorruptEntryError,
    InvalidKeyError,
    MetricMisuseError,
)
from adc.observability.metrics import Metric, MetricsRegistry, get_registry, stats_for
from adc.types import CacheEntry

__version__ = "0.1.0"

__all__ = [
    "ADCError",
    "Cache",
    "CacheEntry",
    "CacheProtocol",
    "Compression",
    "ConfigurationError",
    "CorruptEntryError",
    "DiskCache",
    "InvalidKeyError",
    "Metric",
    "MetricMisuseError",
    "MetricsRegistry",
    "SYSTEM_NAME",
    "__version__",
    "get_registry",
    "stats_for",
]
