"""Abstract Subscriber: a filtered, append-only delivery sink for one connection."""

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from msgrelay.filters import ALL_KEYS, FilterPredicate
from msgrelay.observability import get_logger


class SinkClosed(Exception):
    """Raised when writing to a subscriber whose sink has been closed."""


class Subscriber(ABC):
    """Abstract base class for subscribers that receive event frames."""

    def __init__(
        self,
        predicate: FilterPredicate = ALL_KEYS,
        subscriber_id: Optional[str] = None,
    ) -> None:
        self._subscriber_id = subscriber_id or f"sub_{uuid.uuid4().hex[:8]}"
        self._predicate = predicate
        self._closed = False
        self._logger = get_logger(f"msgrelay.subscriber.{self._subscriber_id}")

    @property
    def subscriber_id(self) -> str:
        return self._subscriber_id

    @property
    def predicate(self) -> FilterPredicate:
        return self._predicate

    @property
    def closed(self) -> bool:
        return self._closed

    def accepts(self, key: str) -> bool:
        return self._predicate(key)

    @abstractmethod
    def write(self, frame: str) -> None:
        """Append one event frame to the sink. Must be implemented by subclasses."""

    def close(self) -> None:
        """Close the sink. Further writes raise SinkClosed. Idempotent."""
        self._closed = True

    def on_subscribe(self) -> None:
        """Called once replay is done and the subscriber is live (for observability)."""
        self._logger.info(
            "subscribed",
            extra={
                "subscriber_id": self._subscriber_id,
                "matches": sorted(self._predicate.matches),
                "starts_with": list(self._predicate.starts_with),
            },
        )

    def on_unsubscribe(self) -> None:
        """Called when this subscriber is removed from the hub (for observability)."""
        self._logger.info("unsubscribed", extra={"subscriber_id": self._subscriber_id})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._subscriber_id!r})"
