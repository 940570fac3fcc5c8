"""
In-Memory Metrics Collector.

Stores export timings and counters in memory, keyed by metric name and tags.
"""

from __future__ import annotations

from collections import defaultdict
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

TagKey = Tuple[Tuple[str, str], ...]


class InMemoryMetricsCollector:
    """Thread-safe in-memory metrics collector shared across exports."""

    def __init__(self) -> None:
        self._timings: Dict[str, Dict[TagKey, List[float]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._counts: Dict[str, Dict[TagKey, int]] = defaultdict(lambda: defaultdict(int))
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        with self._lock:
            self._timings[name][_tag_key(tags)].append(duration_seconds)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        with self._lock:
            self._counts[name][_tag_key(tags)] += value

    def count(self, name: str, tags: Optional[Dict[str, str]] = None) -> int:
        """Counter total for ``name``; all tag sets are summed when tags is None."""
        with self._lock:
            series = self._counts.get(name, {})
            if tags is None:
                return sum(series.values())
            return series.get(_tag_key(tags), 0)

    def get_metrics(self) -> Dict[str, Any]:
        """Summary of every metric, with tag sets flattened to strings."""
        with self._lock:
            summary: Dict[str, Any] = {}
            for name, series in self._timings.items():
                values = [v for samples in series.values() for v in samples]
                summary[name] = {
                    "count": len(values),
                    "total": sum(values),
                    "max": max(values) if values else 0.0,
                }
            for name, series in self._counts.items():
                summary[name] = {
                    "total": sum(series.values()),
                    "by_tags": {_tag_label(k): v for k, v in series.items()},
                }
            return summary

    def clear(self) -> None:
        with self._lock:
            self._timings.clear()
            self._counts.clear()


def _tag_key(tags: Optional[Dict[str, str]]) -> TagKey:
    return tuple(sorted((tags or {}).items()))


def _tag_label(key: TagKey) -> str:
    return ",".join(f"{k}={v}" for k, v in key) or "-"
