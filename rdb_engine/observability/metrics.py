"""
Metrics collection for RDB_ENGINE.

Two collectors live here:

- CommandCounters: the per-client tally of dispatched commands. Counts only
  ever grow; snapshots are copies, never the live mapping.
- MetricsCollector: a process-wide collector of timed operations (pool
  dials, client lifecycle events) with count, latency and error rate.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from functools import wraps
from typing import Any


class CommandCounts(dict):
    """Snapshot of command counts keyed by upper-cased command name."""

    def count(self, command: str) -> int:
        """Return the count for a command, or -1 if it was never dispatched."""
        return self.get(command.upper(), -1)

    def total(self) -> int:
        return sum(self.values())


class CommandCounters:
    """
    Thread-safe, monotonic command counters.

    The lock is held only for the in-memory update or copy, never across a
    round-trip to the store.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, command: str) -> None:
        key = command.upper()
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + 1

    def snapshot(self) -> CommandCounts:
        """Return a copy of the current counts."""
        with self._lock:
            return CommandCounts(self._counts)


@dataclass
class OperationMetrics:
    """Aggregated timings for one named operation."""

    operation_name: str
    count: int = 0
    error_count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    last_execution: datetime | None = None

    @property
    def avg_duration_ms(self) -> float:
        return self.total_duration_ms / self.count if self.count else 0.0

    def record(self, duration_ms: float, success: bool = True) -> None:
        self.count += 1
        self.total_duration_ms += duration_ms
        self.max_duration_ms = max(self.max_duration_ms, duration_ms)
        if not success:
            self.error_count += 1
        self.last_execution = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation_name,
            "count": self.count,
            "error_count": self.error_count,
            "avg_duration_ms": round(self.avg_duration_ms, 2),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "last_execution": self.last_execution.isoformat() if self.last_execution else None,
        }


class MetricsCollector:
    """Process-wide collector of timed operations."""

    def __init__(self) -> None:
        self._metrics: dict[str, OperationMetrics] = {}
        self._lock = threading.Lock()

    def record_operation(self, operation_name: str, duration_ms: float, success: bool = True) -> None:
        with self._lock:
            metric = self._metrics.get(operation_name)
            if metric is None:
                metric = self._metrics[operation_name] = OperationMetrics(operation_name)
            metric.record(duration_ms, success)

    def get_metrics(self, prefix: str | None = None) -> dict[str, Any]:
        """
        Get metrics for recorded operations.

        Args:
            prefix: Optional operation-name prefix to filter by (e.g. "pool.")

        Returns:
            Dictionary with a timestamp and per-operation metrics
        """
        with self._lock:
            metrics = {
                name: m.to_dict()
                for name, m in self._metrics.items()
                if prefix is None or name.startswith(prefix)
            }
        return {"timestamp": datetime.now().isoformat(), "metrics": metrics}

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()


_metrics_collector: MetricsCollector | None = None
_collector_lock = threading.Lock()


def get_metrics_collector() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def record_operation(operation_name: str, duration_ms: float, success: bool = True) -> None:
    """Record an operation in the global metrics collector."""
    get_metrics_collector().record_operation(operation_name, duration_ms, success)


def timed_operation(operation_name: str) -> Callable:
    """
    Decorator that times a call and records it in the global collector.

    Usage:
        @timed_operation("client.select")
        def select(self, index): ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            success = False
            try:
                result = func(*args, **kwargs)
                success = True
                return result
            finally:
                duration_ms = (time.perf_counter() - start_time) * 1000
                record_operation(operation_name, duration_ms, success)

        return wrapper

    return decorator
