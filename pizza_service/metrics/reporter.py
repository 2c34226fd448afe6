"""Periodic export of the metrics registry to a remote time-series endpoint."""

from __future__ import annotations

import logging
import threading
from typing import Optional

import requests

from .registry import MetricsRegistry
from .system_metrics import SystemMetricsCollector

logger = logging.getLogger(__name__)


class MetricsReporter:
    """Collects host gauges and pushes every metric on a fixed interval.

    Each cycle samples the host, serializes the registry into line protocol
    and POSTs it to the configured endpoint. Pushing is best-effort: transport
    errors and non-2xx responses are logged and the cycle is skipped.
    Resettable metrics are zeroed only after a successful push so a failed
    cycle's counts are carried into the next one.
    """

    def __init__(
        self,
        registry: MetricsRegistry,
        collector: Optional[SystemMetricsCollector] = None,
    ):
        self.registry = registry
        self.collector = collector or SystemMetricsCollector(registry)

        self.enabled = True
        self.url = ""
        self.source = "jwt-pizza-service"
        self.user_id = ""
        self.api_key = ""
        self.interval_seconds = 30.0
        self.timeout_seconds = 10.0

        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def configure(
        self,
        enabled: bool = True,
        url: str = "",
        source: str = "jwt-pizza-service",
        user_id: str = "",
        api_key: str = "",
        interval_seconds: float = 30.0,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.enabled = enabled
        self.url = url or ""
        self.source = source
        self.user_id = user_id or ""
        self.api_key = api_key or ""
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds

    @property
    def authorization(self) -> str:
        return f"Bearer {self.user_id}:{self.api_key}"

    def start(self) -> None:
        """Start the background reporting thread."""
        if not self.enabled:
            return
        if not self.url:
            logger.warning("METRICS_URL is not configured; metrics will not be reported")
            return

        with self._lock:
            if self._thread and self._thread.is_alive():
                return
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._report_loop,
                name="MetricsReporter",
                daemon=True,
            )
            self._thread.start()
        logger.info(
            f"Reporting metrics to {self.url} every {self.interval_seconds:g}s"
        )

    def stop(self) -> None:
        """Stop the background reporting thread."""
        self._stop_event.set()
        with self._lock:
            if self._thread and self._thread.is_alive():
                self._thread.join(timeout=2.0)
            self._thread = None

    def is_running(self) -> bool:
        with self._lock:
            return bool(self._thread and self._thread.is_alive())

    def _report_loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.run_cycle()
            except Exception:
                logger.exception("Metrics reporting cycle failed")

    def run_cycle(self) -> bool:
        """Collect host gauges, then flush the registry."""
        try:
            self.collector.collect()
        except Exception:
            logger.exception("Failed to collect system metrics")
        return self.flush()

    def flush(self) -> bool:
        """Push every metric once.

        Returns:
            True when the endpoint accepted the payload.
        """
        payload, resettable = self.registry.render(self.source)
        if not payload:
            return False
        if not self.url:
            logger.debug("Skipping metrics flush: no endpoint configured")
            return False

        try:
            response = requests.post(
                self.url,
                data=payload,
                headers={"Authorization": self.authorization},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"Error pushing metrics: {e}")
            return False

        if not response.ok:
            logger.error(
                f"Failed to push metrics: {response.status_code} {response.reason}"
            )
            return False

        self.registry.reset_resettable(resettable)
        return True
