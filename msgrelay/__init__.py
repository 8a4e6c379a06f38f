"""In-memory versioned message relay with filtered fan-out (single process, no broker)."""

from msgrelay.default_subscriber import DefaultSubscriber
from msgrelay.errors import (
    BadBody,
    BadFilters,
    BadKey,
    BadVersion,
    RelayError,
    VersionConflict,
    WrongContentType,
)
from msgrelay.filters import ALL_KEYS, FilterPredicate, parse_filters
from msgrelay.hub import BroadcastHub
from msgrelay.idle import IdleResetManager
from msgrelay.publisher import MessagePublisher
from msgrelay.record import MessageRecord
from msgrelay.relay import MessageRelay
from msgrelay.store import VersionedStore
from msgrelay.stream_subscriber import StreamSubscriber
from msgrelay.subscriber import SinkClosed, Subscriber

__all__ = [
    "ALL_KEYS",
    "BadBody",
    "BadFilters",
    "BadKey",
    "BadVersion",
    "BroadcastHub",
    "DefaultSubscriber",
    "FilterPredicate",
    "IdleResetManager",
    "MessagePublisher",
    "MessageRecord",
    "MessageRelay",
    "RelayError",
    "SinkClosed",
    "StreamSubscriber",
    "Subscriber",
    "VersionConflict",
    "VersionedStore",
    "WrongContentType",
    "parse_filters",
]
