from flask import current_app, jsonify

from . import monitoring
from ...metrics import metrics_registry, metrics_reporter


@monitoring.route("/api/metrics/summary")
def metrics_summary():
    """Return the current value of every registered metric."""
    if not current_app.config.get("METRICS_ENABLED", True):
        return jsonify({"enabled": False, "metrics": {}})

    return jsonify({
        "enabled": True,
        "metrics": metrics_registry.snapshot(),
        "reporter": {
            "running": metrics_reporter.is_running(),
            "source": metrics_reporter.source,
            "interval_seconds": metrics_reporter.interval_seconds,
            "endpoint_configured": bool(metrics_reporter.url),
        },
    })
