"""Thread-safe registry of the service's operational counters and gauges."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class MetricFamily:
    """Declarative group of metrics expanded into concrete entries at startup."""

    name: str
    resettable: bool
    submetrics: Tuple[str, ...] = ()
    initial_value: Number = 0

    def metric_names(self) -> List[str]:
        if not self.submetrics:
            return [self.name]
        return [f"{self.name}_{submetric}" for submetric in self.submetrics]


@dataclass
class Metric:
    name: str
    value: Number
    resettable: bool
    initial_value: Number = 0


METRIC_FAMILIES: Tuple[MetricFamily, ...] = (
    MetricFamily("requestCounts", True, ("GET", "POST", "DELETE", "PUT")),
    MetricFamily("authAttempts", True, ("successful", "failed")),
    MetricFamily("activeUsers", False),
    MetricFamily("systemMetrics", False, ("cpuUsage", "memoryUsage")),
    MetricFamily("pizzaMetrics", True, ("sold", "creationFailures", "revenue")),
    MetricFamily("latencyMetrics", False, ("serviceEndpoint", "pizzaCreation")),
)


class MetricsRegistry:
    """Fixed table of named metrics shared by request handlers and the reporter.

    Metrics are registered once from ``families``; referencing any other name
    logs a warning and is otherwise ignored so instrumentation can never fail
    a request.
    """

    def __init__(self, families: Iterable[MetricFamily] = METRIC_FAMILIES):
        self._lock = threading.Lock()
        self._metrics: Dict[str, Metric] = {}
        for family in families:
            for name in family.metric_names():
                self._metrics[name] = Metric(
                    name=name,
                    value=family.initial_value,
                    resettable=family.resettable,
                    initial_value=family.initial_value,
                )

    def __contains__(self, name: str) -> bool:
        return name in self._metrics

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._metrics)

    def names(self) -> List[str]:
        return list(self._metrics)

    def is_resettable(self, name: str) -> bool:
        metric = self._metrics.get(name)
        return bool(metric and metric.resettable)

    def increment(self, name: str, amount: Number = 1) -> None:
        with self._lock:
            metric = self._lookup(name)
            if metric is not None:
                metric.value += amount

    def decrement(self, name: str, amount: Number = 1) -> None:
        with self._lock:
            metric = self._lookup(name)
            if metric is not None:
                metric.value -= amount

    def set(self, name: str, value: Number) -> None:
        with self._lock:
            metric = self._lookup(name)
            if metric is not None:
                metric.value = value

    def get(self, name: str) -> Number:
        """Return the current value, or 0 for an unregistered name."""
        with self._lock:
            metric = self._metrics.get(name)
            return metric.value if metric else 0

    def format_metric(self, name: str, source: str) -> str:
        with self._lock:
            value = self._metrics[name].value
        return f"{name},source={source} value={value}"

    def render(self, source: str) -> Tuple[str, List[str]]:
        """Serialize every metric into line protocol.

        Returns:
            Tuple of the newline-joined payload and the names of the
            resettable metrics it contains.
        """
        lines = []
        resettable = []
        with self._lock:
            for name, metric in self._metrics.items():
                lines.append(f"{name},source={source} value={metric.value}")
                if metric.resettable:
                    resettable.append(name)
        return "\n".join(lines), resettable

    def reset_resettable(self, names: Optional[Iterable[str]] = None) -> None:
        """Zero resettable metrics, either all of them or only ``names``."""
        with self._lock:
            targets = self._metrics.keys() if names is None else names
            for name in targets:
                metric = self._metrics.get(name)
                if metric is not None and metric.resettable:
                    metric.value = 0

    def reset(self) -> None:
        """Restore every metric to its initial value. Intended for test isolation."""
        with self._lock:
            for metric in self._metrics.values():
                metric.value = metric.initial_value

    def snapshot(self) -> Dict[str, Dict[str, object]]:
        with self._lock:
            return {
                name: {"value": metric.value, "resettable": metric.resettable}
                for name, metric in self._metrics.items()
            }

    def _lookup(self, name: str) -> Optional[Metric]:
        metric = self._metrics.get(name)
        if metric is None:
            logger.warning(f'Metric "{name}" not found.')
        return metric


# Shared singleton registry used by the application.
metrics_registry = MetricsRegistry()
