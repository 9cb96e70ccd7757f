"""
Cache package.

This package provides:
- CacheProtocol (base.py): abstract async cache interface
- DiskCache (disk_cache.py): one file per entry under a root directory,
  with optional compression and per-operation metrics
"""

from adc.cache.base import CacheProtocol
from adc.cache.disk_cache import SYSTEM_NAME, Cache, DiskCache

__all__ = ["SYSTEM_NAME", "Cache", "CacheProtocol", "DiskCache"]
