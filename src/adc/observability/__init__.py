"""
Observability package.

Per-operation metrics published through a process-wide registry.
"""

from adc.observability.metrics import (
    Metric,
    MetricGroup,
    MetricsRegistry,
    get_registry,
    instrument,
    stats_for,
)

__all__ = [
    "Metric",
    "MetricGroup",
    "MetricsRegistry",
    "get_registry",
    "instrument",
    "stats_for",
]
