"""MessageRelay: the service object holding store, hub, publisher and idle clock."""

import time
from typing import Any, Callable, Dict, List, Optional, Union

from msgrelay.filters import ALL_KEYS, FilterPredicate
from msgrelay.hub import BroadcastHub
from msgrelay.idle import IdleResetManager
from msgrelay.observability import Metrics, get_logger
from msgrelay.observability import metrics as m
from msgrelay.protocol import snapshot_body
from msgrelay.publisher import MessagePublisher
from msgrelay.record import MessageRecord
from msgrelay.store import VersionedStore
from msgrelay.subscriber import Subscriber

logger = get_logger("msgrelay.relay")


class MessageRelay:
    """In-memory relay for one process.

    Every method is synchronous and must be called from the event loop thread, so
    publish, subscribe and snapshot never interleave. That is what makes the version
    check race-free and replay-then-register gap-free.
    """

    def __init__(
        self,
        reset_after: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.metrics = Metrics()
        self.store = VersionedStore()
        self.hub = BroadcastHub(self.metrics)
        self.publisher = MessagePublisher(self.store, self.hub, self.metrics)
        self.idle = IdleResetManager(self.store, reset_after, clock, self.metrics)
        self.metrics.watch(m.KEYS, lambda: len(self.store))

    # ---- Publish ----

    def publish(self, key: str, version: Union[str, int], data: Any = None) -> MessageRecord:
        self.idle.touch()
        return self.publisher.publish(key, version, data)

    def publish_request(
        self,
        key: str,
        version: str,
        body: Optional[bytes],
        content_type: Optional[str],
    ) -> MessageRecord:
        self.idle.touch()
        return self.publisher.publish_request(key, version, body, content_type)

    # ---- Subscribe ----

    def subscribe(self, subscriber: Subscriber) -> Subscriber:
        """Replay current records matching the subscriber's filter, then register it.

        Nothing here awaits, so no publish can land between replay and registration.
        """
        self.idle.touch()
        replayed = 0
        for key, record in self.store.latest_records():
            if subscriber.accepts(key):
                subscriber.write(record.event_frame)
                replayed += 1
        self.hub.register(subscriber)
        subscriber.on_subscribe()
        logger.debug(
            "replayed",
            extra={"subscriber_id": subscriber.subscriber_id, "records": replayed},
        )
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Deregister and close the sink. Safe to call more than once."""
        removed = self.hub.deregister(subscriber)
        subscriber.close()
        if removed:
            subscriber.on_unsubscribe()

    # ---- Snapshot ----

    def snapshot(self, predicate: FilterPredicate = ALL_KEYS) -> List[str]:
        """Serialized snapshots of the latest record per matching key, in store order."""
        self.idle.touch()
        return [record.snapshot for _, record in predicate.select(self.store.latest_records())]

    def snapshot_body(self, predicate: FilterPredicate = ALL_KEYS) -> str:
        return snapshot_body(self.snapshot(predicate))

    # ---- Lifecycle ----

    def reset_all(self) -> None:
        """Drop every key now, regardless of activity."""
        self.store.clear_all()
        self.metrics.increment(m.RESETS)
        logger.info("server_reset", extra={"reason": "explicit"})

    def stats(self) -> Dict[str, Any]:
        return self.metrics.snapshot()
