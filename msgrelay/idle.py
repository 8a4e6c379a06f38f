"""Idle reset: wipe the whole store after a period with no publish or read activity."""

import asyncio
import time
from typing import Callable, Optional

from msgrelay.observability import Metrics, get_logger
from msgrelay.observability import metrics as m
from msgrelay.store import VersionedStore

logger = get_logger("msgrelay.idle")


class IdleResetManager:
    """Single global idle clock over a VersionedStore.

    ``reset_after`` is the idle window in seconds; None disables resets. After a
    reset every key starts again from version 1, so a connected subscriber can see
    a key's version go down. Subscribers are not notified.
    """

    def __init__(
        self,
        store: VersionedStore,
        reset_after: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self._store = store
        self._reset_after = reset_after if reset_after and reset_after > 0 else None
        self._clock = clock
        self._metrics = metrics or Metrics()
        self._last_activity = clock()

    @property
    def reset_after(self) -> Optional[float]:
        return self._reset_after

    @property
    def last_activity(self) -> float:
        return self._last_activity

    def touch(self) -> None:
        """Record activity now."""
        self._last_activity = self._clock()

    def idle_for(self) -> float:
        return self._clock() - self._last_activity

    def check(self) -> bool:
        """Clear the store if idle longer than the window. Returns True if it did."""
        if self._reset_after is None:
            return False
        idle = self.idle_for()
        if idle <= self._reset_after:
            return False
        keys = len(self._store)
        self._store.clear_all()
        self._metrics.increment(m.RESETS)
        logger.info("server_reset", extra={"idle_sec": round(idle, 3), "keys_cleared": keys})
        return True

    async def run(self, interval: float) -> None:
        """Check every ``interval`` seconds until cancelled. Each check finishes before the next sleep."""
        if self._reset_after is None or interval <= 0:
            return
        self.touch()
        while True:
            await asyncio.sleep(interval)
            try:
                self.check()
            except Exception:
                logger.exception("server_reset_failed")
