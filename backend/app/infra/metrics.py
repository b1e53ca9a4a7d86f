"""In-process counters, gauges and timing summaries for the journal API."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, DefaultDict, Dict

from .logging import get_logger

logger = get_logger(__name__)


class MetricsClient:  # pragma: no cover - interface
    def increment(self, metric: str, value: int = 1) -> None:
        raise NotImplementedError

    def gauge(self, metric: str, value: int) -> None:
        raise NotImplementedError

    def observe(self, metric: str, value: float) -> None:
        raise NotImplementedError


@dataclass
class TimingSummary:
    count: int = 0
    total: float = 0.0
    maximum: float = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.maximum = max(self.maximum, value)

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass
class InMemoryMetricsClient(MetricsClient):
    """Metrics sink kept in process memory; request threads share one instance."""

    counters: DefaultDict[str, int] = field(default_factory=lambda: defaultdict(int))
    gauges: Dict[str, int] = field(default_factory=dict)
    timings: DefaultDict[str, TimingSummary] = field(
        default_factory=lambda: defaultdict(TimingSummary)
    )
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def increment(self, metric: str, value: int = 1) -> None:
        with self._lock:
            self.counters[metric] += value
        logger.debug("metrics_increment", extra={"metric": metric, "value": value})

    def gauge(self, metric: str, value: int) -> None:
        with self._lock:
            self.gauges[metric] = value
        logger.debug("metrics_gauge", extra={"metric": metric, "value": value})

    def observe(self, metric: str, value: float) -> None:
        with self._lock:
            self.timings[metric].add(value)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self.counters),
                "gauges": dict(self.gauges),
                "timings": {
                    name: {
                        "count": summary.count,
                        "mean": round(summary.mean, 2),
                        "max": round(summary.maximum, 2),
                    }
                    for name, summary in self.timings.items()
                },
            }

    def reset(self) -> None:
        with self._lock:
            self.counters.clear()
            self.gauges.clear()
            self.timings.clear()


_metrics_singleton: InMemoryMetricsClient | None = None


def get_metrics_client() -> MetricsClient:
    """Return the shared metrics client."""

    global _metrics_singleton
    if _metrics_singleton is None:
        _metrics_singleton = InMemoryMetricsClient()
    return _metrics_singleton
