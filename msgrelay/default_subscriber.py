"""Concrete Subscriber that collects frames in memory."""

from typing import List

from msgrelay.subscriber import SinkClosed, Subscriber


class DefaultSubscriber(Subscriber):
    """Subscriber that keeps every frame it receives (in-process consumers, tests)."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.frames: List[str] = []

    def write(self, frame: str) -> None:
        if self._closed:
            raise SinkClosed(self.subscriber_id)
        self.frames.append(frame)
        self._logger.debug("frame_received", extra={"subscriber_id": self.subscriber_id})
