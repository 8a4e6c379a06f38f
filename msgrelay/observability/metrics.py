"""Counters and gauges for publish, delivery and reset activity."""

from typing import Callable, Dict

MESSAGES_PUBLISHED = "messages_published"
PUBLISH_REJECTED = "publish_rejected"
VERSION_CONFLICTS = "version_conflicts"
DELIVERIES = "deliveries"
DELIVERY_FAILURES = "delivery_failures"
RESETS = "resets"

SUBSCRIBERS = "subscribers"
KEYS = "keys"


class Metrics:
    """In-memory metrics owned by one relay instance.

    Gauges are either set explicitly or watched: a watched gauge is read from its
    source (e.g. the live subscriber set) each time it is queried, so it can never
    drift from the state it describes.
    """

    def __init__(self) -> None:
        self._counters: Dict[str, int] = {}
        self._gauges: Dict[str, int] = {}
        self._watched: Dict[str, Callable[[], int]] = {}

    def increment(self, name: str, value: int = 1) -> None:
        self._counters[name] = self._counters.get(name, 0) + value

    def set_gauge(self, name: str, value: int) -> None:
        self._gauges[name] = value

    def watch(self, name: str, source: Callable[[], int]) -> None:
        """Derive gauge ``name`` from ``source()``; replaces any value set before."""
        self._gauges.pop(name, None)
        self._watched[name] = source

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def get_gauge(self, name: str) -> int:
        source = self._watched.get(name)
        if source is not None:
            return source()
        return self._gauges.get(name, 0)

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Counters and gauges as plain dicts, with watched gauges read now."""
        gauges = dict(self._gauges)
        for name, source in self._watched.items():
            gauges[name] = source()
        return {
            "counters": dict(self._counters),
            "gauges": gauges,
        }
