"""BroadcastHub: the live subscriber set and filtered fan-out of accepted messages."""

from typing import List, Optional, Set

from msgrelay.observability import Metrics, get_logger
from msgrelay.observability import metrics as m
from msgrelay.subscriber import Subscriber

logger = get_logger("msgrelay.hub")


class BroadcastHub:
    """Delivers event frames to every registered subscriber whose filter accepts the key."""

    def __init__(self, metrics: Optional[Metrics] = None) -> None:
        self._subscribers: Set[Subscriber] = set()
        self._metrics = metrics or Metrics()
        self._metrics.watch(m.SUBSCRIBERS, lambda: len(self._subscribers))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def register(self, subscriber: Subscriber) -> None:
        """Add a subscriber to the live set."""
        self._subscribers.add(subscriber)

    def deregister(self, subscriber: Subscriber) -> bool:
        """Remove a subscriber. Returns False if it was not registered."""
        if subscriber not in self._subscribers:
            return False
        self._subscribers.discard(subscriber)
        return True

    def get_subscribers(self) -> List[Subscriber]:
        return list(self._subscribers)

    def deliver(self, frame: str, key: str) -> int:
        """Write frame to each interested subscriber; return how many accepted it.

        A failing sink is logged and skipped, it never affects other subscribers or
        the caller.
        """
        subscribers = [s for s in self._subscribers if s.accepts(key)]
        logger.debug(
            "delivering",
            extra={"key": key, "subscriber_count": len(subscribers)},
        )
        delivered = 0
        for subscriber in subscribers:
            try:
                subscriber.write(frame)
            except Exception as e:
                self._metrics.increment(m.DELIVERY_FAILURES)
                logger.exception(
                    "delivery_failed",
                    extra={
                        "subscriber_id": subscriber.subscriber_id,
                        "key": key,
                        "error": str(e),
                    },
                )
                continue
            delivered += 1
        self._metrics.increment(m.DELIVERIES, delivered)
        return delivered

    def __contains__(self, subscriber: object) -> bool:
        return subscriber in self._subscribers

    def __len__(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"BroadcastHub(subscribers={len(self._subscribers)})"
