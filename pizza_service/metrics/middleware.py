"""Request instrumentation for the Flask application."""

import time

from flask import Flask, g, request

from . import events

REQUEST_COUNT_PREFIX = "requestCounts_"
ENDPOINT_LATENCY_METRIC = "latencyMetrics_serviceEndpoint"


def _track_request_start():
    g.metrics_request_started = time.perf_counter()
    events.increment(f"{REQUEST_COUNT_PREFIX}{request.method}")


def _track_request_finish(response):
    started = g.pop("metrics_request_started", None)
    if started is not None:
        latency_ms = (time.perf_counter() - started) * 1000.0
        events.set_value(ENDPOINT_LATENCY_METRIC, round(latency_ms, 3))
    return response


def install_request_tracker(app: Flask) -> None:
    """Count requests per HTTP method and record the latest endpoint latency."""
    app.before_request(_track_request_start)
    app.after_request(_track_request_finish)
