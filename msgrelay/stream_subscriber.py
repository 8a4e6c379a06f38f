"""Stream subscriber for text/event-stream connections: per-consumer asyncio queue drained by the response."""

import asyncio
from typing import AsyncIterator, Awaitable, Callable, Optional

from msgrelay.filters import ALL_KEYS, FilterPredicate
from msgrelay.subscriber import SinkClosed, Subscriber

# Sentinel that ends frames() after close()
_CLOSED = object()

# Seconds between disconnect checks while no frame is pending
DISCONNECT_POLL_SEC = 1.0

# Default max frames buffered per consumer once live (env SUBSCRIBER_QUEUE_MAX_SIZE overrides)
DEFAULT_QUEUE_MAX_SIZE = 1024


class StreamSubscriber(Subscriber):
    """Subscriber with a per-consumer queue; the HTTP response iterates frames().

    Replay is always buffered in full. Once live, if more than ``max_size`` frames
    are waiting the oldest one is dropped.
    """

    def __init__(
        self,
        predicate: FilterPredicate = ALL_KEYS,
        subscriber_id: Optional[str] = None,
        max_size: int = DEFAULT_QUEUE_MAX_SIZE,
    ) -> None:
        super().__init__(predicate, subscriber_id)
        self._queue: asyncio.Queue = asyncio.Queue()
        self._max_size = max(1, max_size)
        self._live = False

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def write(self, frame: str) -> None:
        if self._closed:
            raise SinkClosed(self.subscriber_id)
        if self._live and self._queue.qsize() >= self._max_size:
            self._queue.get_nowait()
            self._logger.warning(
                "queue_full_dropped_oldest",
                extra={"subscriber_id": self.subscriber_id, "max_size": self._max_size},
            )
        self._queue.put_nowait(frame)

    def on_subscribe(self) -> None:
        self._live = True
        super().on_subscribe()

    def close(self) -> None:
        if self._closed:
            return
        super().close()
        self._queue.put_nowait(_CLOSED)

    async def frames(
        self,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
        poll_interval: float = DISCONNECT_POLL_SEC,
    ) -> AsyncIterator[str]:
        """Yield buffered and future frames until closed or the client goes away.

        ``is_disconnected`` is polled whenever no frame arrives within ``poll_interval``.
        """
        while True:
            if is_disconnected is None:
                frame = await self._queue.get()
            else:
                try:
                    frame = await asyncio.wait_for(self._queue.get(), timeout=poll_interval)
                except asyncio.TimeoutError:
                    if await is_disconnected():
                        return
                    continue
            if frame is _CLOSED:
                return
            yield frame
