"""In-process metric events.

Request handlers and services publish metric changes as blinker signals
instead of touching the registry directly; the registry subscribes once at
startup. Publishing while nothing is subscribed is a no-op.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from blinker import Namespace

from .registry import MetricsRegistry, Number

logger = logging.getLogger(__name__)

_signals = Namespace()

metric_increment = _signals.signal("metric:increment")
metric_decrement = _signals.signal("metric:decrement")
metric_set = _signals.signal("metric:set")


def increment(metric_name: str, amount: Number = 1, sender: Any = None) -> None:
    metric_increment.send(sender, metric_name=metric_name, amount=amount)


def decrement(metric_name: str, amount: Number = 1, sender: Any = None) -> None:
    metric_decrement.send(sender, metric_name=metric_name, amount=amount)


def set_value(metric_name: str, value: Number, sender: Any = None) -> None:
    metric_set.send(sender, metric_name=metric_name, value=value)


class RegistrySubscriber:
    """Applies metric events to a registry."""

    def __init__(self, registry: MetricsRegistry):
        self.registry = registry

    def on_increment(self, sender, metric_name: str, amount: Number = 1, **_) -> None:
        self.registry.increment(metric_name, amount)

    def on_decrement(self, sender, metric_name: str, amount: Number = 1, **_) -> None:
        self.registry.decrement(metric_name, amount)

    def on_set(self, sender, metric_name: str, value: Number = 0, **_) -> None:
        self.registry.set(metric_name, value)


_subscribers = {}


def connect(registry: MetricsRegistry) -> RegistrySubscriber:
    """Subscribe ``registry`` to all metric events. Repeated calls are no-ops."""
    subscriber = _subscribers.get(id(registry))
    if subscriber is not None:
        return subscriber

    subscriber = RegistrySubscriber(registry)
    metric_increment.connect(subscriber.on_increment, weak=False)
    metric_decrement.connect(subscriber.on_decrement, weak=False)
    metric_set.connect(subscriber.on_set, weak=False)
    _subscribers[id(registry)] = subscriber
    logger.debug(f"Metrics registry {id(registry):#x} subscribed to metric events")
    return subscriber


def disconnect(registry: MetricsRegistry) -> Optional[RegistrySubscriber]:
    subscriber = _subscribers.pop(id(registry), None)
    if subscriber is None:
        return None
    metric_increment.disconnect(subscriber.on_increment)
    metric_decrement.disconnect(subscriber.on_decrement)
    metric_set.disconnect(subscriber.on_set)
    return subscriber
