"""
Metrics collection for DocVault.

Tracks call counts, latency and error rates for store operations and
authorization checks.
"""

import functools
import inspect
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..constants import DEFAULT_MAX_METRICS


@dataclass
class OperationMetrics:
    """Latency and outcome counters for one operation series."""

    operation_name: str
    count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    error_count: int = 0

    def record(self, duration_ms: float, success: bool = True) -> None:
        self.count += 1
        self.total_duration_ms += duration_ms
        self.max_duration_ms = max(self.max_duration_ms, duration_ms)
        if not success:
            self.error_count += 1

    def merge(self, other: "OperationMetrics") -> None:
        self.count += other.count
        self.total_duration_ms += other.total_duration_ms
        self.max_duration_ms = max(self.max_duration_ms, other.max_duration_ms)
        self.error_count += other.error_count

    def to_dict(self) -> dict[str, Any]:
        avg = self.total_duration_ms / self.count if self.count else 0.0
        return {
            "operation": self.operation_name,
            "count": self.count,
            "avg_duration_ms": round(avg, 2),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "error_count": self.error_count,
        }


class MetricsCollector:
    """
    Thread-safe, bounded metrics collector.

    Series are keyed by operation name plus sorted tags; the least recently
    used series is evicted once ``max_metrics`` is reached.
    """

    def __init__(self, max_metrics: int = DEFAULT_MAX_METRICS):
        self._metrics: OrderedDict[str, OperationMetrics] = OrderedDict()
        self._lock = threading.Lock()
        self._max_metrics = max_metrics

    @staticmethod
    def _key(operation_name: str, tags: dict[str, Any]) -> str:
        if not tags:
            return operation_name
        tag_str = "_".join(f"{k}={v}" for k, v in sorted(tags.items()))
        return f"{operation_name}[{tag_str}]"

    def record_operation(
        self, operation_name: str, duration_ms: float, success: bool = True, **tags: Any
    ) -> None:
        key = self._key(operation_name, tags)
        with self._lock:
            metric = self._metrics.get(key)
            if metric is None:
                if len(self._metrics) >= self._max_metrics:
                    self._metrics.popitem(last=False)
                metric = self._metrics[key] = OperationMetrics(operation_name=operation_name)
            else:
                self._metrics.move_to_end(key)
            metric.record(duration_ms, success)

    def get_metrics(self, prefix: str | None = None) -> dict[str, Any]:
        """Every tagged series, optionally limited to keys starting with ``prefix``."""
        with self._lock:
            metrics = {
                k: v.to_dict()
                for k, v in self._metrics.items()
                if prefix is None or k.startswith(prefix)
            }
        return {"timestamp": datetime.now(timezone.utc).isoformat(), "metrics": metrics}

    def get_summary(self) -> dict[str, Any]:
        """Series merged per operation name, tags dropped."""
        with self._lock:
            aggregated: dict[str, OperationMetrics] = {}
            for metric in self._metrics.values():
                aggregated.setdefault(
                    metric.operation_name, OperationMetrics(metric.operation_name)
                ).merge(metric)
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "summary": {name: m.to_dict() for name, m in aggregated.items()},
        }


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get or create the process-wide metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


def timed_operation(operation_name: str, **tags: Any):
    """
    Decorator recording the duration and outcome of each call.

    Any exception marks the call as failed and is re-raised unchanged.

    Usage:
        @timed_operation("documents.create")
        async def create(self, subject, ...):
            ...
    """

    def decorator(func: Callable) -> Callable:
        def record(start: float, success: bool) -> None:
            duration_ms = (time.perf_counter() - start) * 1000
            get_metrics_collector().record_operation(operation_name, duration_ms, success, **tags)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    record(start, False)
                    raise
                record(start, True)
                return result

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                record(start, False)
                raise
            record(start, True)
            return result

        return sync_wrapper

    return decorator
