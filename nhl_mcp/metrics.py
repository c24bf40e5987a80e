"""In-process counters and latency summaries.

Tool calls, upstream fetches and HTTP requests report here; the /metrics
route serves ``get_metrics()`` as JSON. Nothing is exported or persisted.
"""
from __future__ import annotations
import inspect
import threading
import time
from collections import defaultdict, deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, UTC
from functools import wraps
from typing import Any, Callable, Deque, Dict, Iterator

RECENT_SAMPLES = 1000


def metric_key(name: str, labels: Dict[str, Any]) -> str:
    """'name|k1=v1|k2=v2' with labels sorted; bare name when unlabelled."""
    if not labels:
        return name
    return '|'.join([name, *(f'{k}={v}' for k, v in sorted(labels.items()))])


@dataclass
class LatencySummary:
    """Running aggregate over all samples plus a window of the most recent ones."""
    count: int = 0
    total_ms: float = 0.0
    min_ms: float | None = None
    max_ms: float | None = None
    last_updated: datetime | None = None
    recent: Deque[float] = field(default_factory=lambda: deque(maxlen=RECENT_SAMPLES))

    def add(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = duration_ms if self.min_ms is None else min(self.min_ms, duration_ms)
        self.max_ms = duration_ms if self.max_ms is None else max(self.max_ms, duration_ms)
        self.recent.append(duration_ms)
        self.last_updated = datetime.now(UTC)

    def snapshot(self) -> Dict[str, Any]:
        ordered = sorted(self.recent)
        return {
            'count': self.count,
            'min': self.min_ms if self.min_ms is not None else 0,
            'max': self.max_ms if self.max_ms is not None else 0,
            'avg': self.total_ms / self.count if self.count else 0.0,
            'p95': ordered[int(0.95 * (len(ordered) - 1))] if ordered else 0,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }


class MetricsCollector:
    def __init__(self):
        self._lock = threading.RLock()
        self._counters: Dict[str, int] = defaultdict(int)
        self._latencies: Dict[str, LatencySummary] = defaultdict(LatencySummary)

    def increment_counter(self, name: str, value: int = 1, **labels) -> None:
        with self._lock:
            self._counters[metric_key(name, labels)] += value

    def record_timing(self, name: str, duration_ms: float, **labels) -> None:
        with self._lock:
            self._latencies[metric_key(name, labels)].add(duration_ms)

    def get_counter(self, name: str, **labels) -> int:
        with self._lock:
            return self._counters.get(metric_key(name, labels), 0)

    def get_metrics(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'timestamp': datetime.now(UTC).isoformat(),
                'counters': dict(self._counters),
                'timings': {key: summary.snapshot() for key, summary in self._latencies.items()},
            }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._latencies.clear()


_metrics = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return _metrics


@contextmanager
def measure(metric_name: str, **labels) -> Iterator[None]:
    """Count the block as ``{metric_name}_total`` by status and time it as ``{metric_name}_duration``."""
    start = time.perf_counter()
    try:
        yield
    except Exception:
        _metrics.increment_counter(f"{metric_name}_total", status="error", **labels)
        raise
    else:
        _metrics.increment_counter(f"{metric_name}_total", status="success", **labels)
    finally:
        _metrics.record_timing(f"{metric_name}_duration", (time.perf_counter() - start) * 1000, **labels)


def timing_decorator(metric_name: str, **labels):
    """Apply ``measure`` to every call of a sync or async function."""
    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                with measure(metric_name, **labels):
                    return await func(*args, **kwargs)
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            with measure(metric_name, **labels):
                return func(*args, **kwargs)
        return sync_wrapper
    return decorator
