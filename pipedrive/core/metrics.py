"""
Request metrics.

Each executor owns a collector that counts requests, rate limit
backoffs and errors, and times every attempt. Only running totals are
kept, so a long-lived session stores a fixed amount of data per name.
"""

import time
from typing import Dict, Optional, Any
from dataclasses import dataclass
from collections import defaultdict


@dataclass
class TimingTotals:
    """Running count, sum and maximum of the durations recorded under one name."""
    count: int = 0
    total: float = 0.0
    maximum: float = 0.0

    def add(self, duration: float):
        self.count += 1
        self.total += duration
        self.maximum = max(self.maximum, duration)

    @property
    def average(self) -> Optional[float]:
        return self.total / self.count if self.count else None


class MetricsCollector:
    """
    Collects request counters, timing totals and error counts for one session.

    Counters are keyed by name, or by ``name:tag=value`` when tags are given,
    so memory grows with the number of distinct names, never with traffic.
    """

    def __init__(self):
        self.counters: Dict[str, int] = defaultdict(int)
        self.timings: Dict[str, TimingTotals] = defaultdict(TimingTotals)
        self.errors: Dict[str, int] = defaultdict(int)

    def increment(self, name: str, value: int = 1, tags: Optional[Dict[str, str]] = None):
        """
        Increment a counter, and its tagged variants.

        Args:
            name: Metric name
            value: Increment value
            tags: Optional tags, e.g. ``{'verb': 'GET'}``
        """
        self.counters[name] += value
        for key in _tag_keys(name, tags):
            self.counters[key] += value

    def record_timing(self, name: str, duration: float, tags: Optional[Dict[str, str]] = None):
        """
        Add a duration to the running totals of a timing metric.

        Args:
            name: Metric name
            duration: Duration in seconds
            tags: Optional tags
        """
        self.timings[name].add(duration)
        for key in _tag_keys(name, tags):
            self.timings[key].add(duration)

    def record_error(self, name: str, error_type: str = "unknown"):
        """Record an error of the given type (``transport``, ``api``) for an operation."""
        self.errors[f"{name}:{error_type}"] += 1
        self.counters[f"{name}_errors"] += 1

    def get_counter(self, name: str) -> int:
        return self.counters.get(name, 0)

    def get_avg_timing(self, name: str) -> Optional[float]:
        totals = self.timings.get(name)
        return totals.average if totals else None

    def get_error_count(self, name: str) -> int:
        return sum(count for key, count in self.errors.items() if key.startswith(f"{name}:"))

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of all metrics."""
        return {
            'counters': dict(self.counters),
            'avg_timings': {
                name: totals.average
                for name, totals in self.timings.items()
            },
            'max_timings': {
                name: totals.maximum
                for name, totals in self.timings.items()
            },
            'errors': dict(self.errors),
        }

    def reset(self):
        """Reset all metrics."""
        self.counters.clear()
        self.timings.clear()
        self.errors.clear()


class Timer:
    """
    Context manager for timing operations.

    Usage:
        with Timer("request", metrics_collector, {"verb": "GET"}):
            response = client.send(request)
    """

    def __init__(self, name: str, collector: Optional[MetricsCollector] = None, tags: Optional[Dict[str, str]] = None):
        self.name = name
        self.collector = collector
        self.tags = tags or {}
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None and self.collector:
            self.collector.record_timing(self.name, self.elapsed(), self.tags)
        return False

    def elapsed(self) -> float:
        """Get elapsed time."""
        if self.start_time is not None:
            return time.perf_counter() - self.start_time
        return 0.0


def _tag_keys(name: str, tags: Optional[Dict[str, str]]):
    return [f"{name}:{tag}={value}" for tag, value in sorted((tags or {}).items())]
