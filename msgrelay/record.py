"""MessageRecord: the latest accepted message for one key."""

from dataclasses import dataclass
from typing import Any

from msgrelay.protocol import event_frame, snapshot_entry


@dataclass(frozen=True)
class MessageRecord:
    """One publish, pre-serialized for streaming and snapshot export.

    Records are immutable; the store swaps a whole record per publish so version,
    event frame and snapshot are always from the same publish.
    """

    key: str
    version: int
    data: Any
    event_frame: str
    snapshot: str

    @classmethod
    def build(cls, key: str, version: int, data: Any) -> "MessageRecord":
        return cls(
            key=key,
            version=version,
            data=data,
            event_frame=event_frame(key, version, data),
            snapshot=snapshot_entry(key, version, data),
        )

    def to_dict(self) -> dict:
        """Serialize for logging or inspection."""
        return {"id": {"key": self.key, "version": self.version}, "data": self.data}
