"""Metrics package exposing the shared registry and its background reporter."""

from .registry import METRIC_FAMILIES, MetricFamily, MetricsRegistry, metrics_registry
from .system_metrics import SystemMetricsCollector
from .reporter import MetricsReporter
from .middleware import install_request_tracker
from . import events

metrics_reporter = MetricsReporter(metrics_registry)

__all__ = [
    "METRIC_FAMILIES",
    "MetricFamily",
    "MetricsRegistry",
    "metrics_registry",
    "SystemMetricsCollector",
    "MetricsReporter",
    "metrics_reporter",
    "install_request_tracker",
    "events",
]
