"""
Per-operation timing metrics.

Each cache operation gets a Metric counting completed start/stop cycles and
the cumulative time spent in them. Metrics live in a MetricsRegistry keyed
by a system name and an operation name, so timing can be inspected after the
fact without a reference to the cache that produced it:

    stats_for("async-disk-cache").get.to_json()
"""

from __future__ import annotations

import functools
import inspect
import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Callable, Generator, Iterator, TypeVar

from adc.exceptions import MetricMisuseError

F = TypeVar("F", bound=Callable[..., Any])


class Metric:
    """Invocation count and cumulative duration for one operation.

    start() may be called again while a cycle is open (nested or concurrent
    calls); each start is matched by one stop, and each stop counts one
    completed cycle. Time is tracked in nanoseconds from a monotonic clock
    and every wall-clock interval is counted once, however deeply nested.
    """

    def __init__(self) -> None:
        self.count = 0
        self.time = 0
        self.start_time: int | None = None
        self._depth = 0

    def start(self) -> None:
        """Open a cycle, or deepen the one already open."""
        if self.start_time is None:
            self.start_time = time.perf_counter_ns()
        self._depth += 1

    def stop(self) -> None:
        """Close the innermost open cycle.

        Raises:
            MetricMisuseError: If no cycle is open.
        """
        if self._depth == 0 or self.start_time is None:
            raise MetricMisuseError("Called stop more times than start was called")

        now = time.perf_counter_ns()
        self.time += now - self.start_time
        self.count += 1
        self._depth -= 1
        self.start_time = None if self._depth == 0 else now

    @property
    def is_open(self) -> bool:
        return self._depth > 0

    @contextmanager
    def measure(self) -> Generator[Metric, None, None]:
        """Time the enclosed block; the cycle is closed even if it raises."""
        self.start()
        try:
            yield self
        finally:
            self.stop()

    def to_json(self) -> dict[str, int]:
        return {"count": self.count, "time": self.time}

    def __repr__(self) -> str:
        return f"Metric(count={self.count}, time={self.time})"


class MetricGroup:
    """Metrics of one system, readable as attributes or by name."""

    def __init__(self, system: str) -> None:
        self.system = system
        self._metrics: dict[str, Metric] = {}

    def metric(self, operation: str) -> Metric:
        """Get or create the metric for an operation."""
        metric = self._metrics.get(operation)
        if metric is None:
            metric = self._metrics[operation] = Metric()
        return metric

    def __getitem__(self, operation: str) -> Metric:
        return self._metrics[operation]

    def __getattr__(self, operation: str) -> Metric:
        if operation.startswith("_"):
            raise AttributeError(operation)
        try:
            return self._metrics[operation]
        except KeyError:
            raise AttributeError(f"No metric {operation!r} for {self.system!r}") from None

    def __contains__(self, operation: object) -> bool:
        return operation in self._metrics

    def __iter__(self) -> Iterator[str]:
        return iter(self._metrics)

    def to_json(self) -> dict[str, dict[str, int]]:
        return {name: metric.to_json() for name, metric in self._metrics.items()}


class MetricsRegistry:
    """Registry of metric groups keyed by system name."""

    def __init__(self) -> None:
        self._groups: dict[str, MetricGroup] = {}

    def stats_for(self, system: str) -> MetricGroup:
        """Get or create the metric group for a system."""
        group = self._groups.get(system)
        if group is None:
            group = self._groups[system] = MetricGroup(system)
        return group

    def metric(self, system: str, operation: str) -> Metric:
        return self.stats_for(system).metric(operation)

    def snapshot(self) -> dict[str, dict[str, dict[str, int]]]:
        """Return count/time for every registered metric."""
        return {system: group.to_json() for system, group in self._groups.items()}

    def reset(self) -> None:
        """Drop all registered metrics."""
        self._groups.clear()


@lru_cache
def get_registry() -> MetricsRegistry:
    """Get the process-wide metrics registry (created on first use)."""
    return MetricsRegistry()


def stats_for(system: str) -> MetricGroup:
    """Get a system's metric group from the process-wide registry."""
    return get_registry().stats_for(system)


def instrument(operation: str) -> Callable[[F], F]:
    """Decorate a method so each call runs inside its operation metric.

    The instance must provide ``_metric(operation) -> Metric``. Works for
    both plain and ``async`` methods; the metric is stopped on every exit
    path, including exceptions raised before the first await.
    """

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                with self._metric(operation).measure():
                    return await func(self, *args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            with self._metric(operation).measure():
                return func(self, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
