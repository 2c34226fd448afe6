"""Host CPU and memory sampling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

import psutil

from .registry import MetricsRegistry

logger = logging.getLogger(__name__)

CPU_METRIC = "systemMetrics_cpuUsage"
MEMORY_METRIC = "systemMetrics_memoryUsage"


def get_cpu_usage_percentage() -> float:
    """One-minute load average normalised by CPU count, as a percentage."""
    load_1m = psutil.getloadavg()[0]
    cpu_count = psutil.cpu_count() or 1
    return round(load_1m / cpu_count * 100, 2)


def get_memory_usage_percentage() -> float:
    memory = psutil.virtual_memory()
    if not memory.total:
        return 0.0
    used = memory.total - memory.free
    return round(used / memory.total * 100, 2)


@dataclass
class SystemSnapshot:
    """Snapshot of system metrics at a point in time."""

    cpu_percent: float
    memory_percent: float

    def to_dict(self) -> Dict[str, float]:
        return {"cpu_percent": self.cpu_percent, "memory_percent": self.memory_percent}


class SystemMetricsCollector:
    """Writes host utilization gauges into a metrics registry."""

    def __init__(self, registry: MetricsRegistry):
        self.registry = registry

    def sample(self) -> SystemSnapshot:
        return SystemSnapshot(
            cpu_percent=get_cpu_usage_percentage(),
            memory_percent=get_memory_usage_percentage(),
        )

    def collect(self) -> SystemSnapshot:
        """Sample the host and store the readings as gauges."""
        snapshot = self.sample()
        self.registry.set(CPU_METRIC, snapshot.cpu_percent)
        self.registry.set(MEMORY_METRIC, snapshot.memory_percent)
        logger.debug(
            f"Collected system metrics: cpu={snapshot.cpu_percent}% "
            f"memory={snapshot.memory_percent}%"
        )
        return snapshot
