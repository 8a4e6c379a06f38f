"""Per-key versioned store of the latest message (in-memory only)."""

from typing import Any, Dict, List, Optional, Tuple

from msgrelay.record import MessageRecord


class VersionedStore:
    """Latest MessageRecord per key, in first-publish order.

    Not thread-safe: callers run on a single event loop and never await between
    reading ``current_version`` and calling ``accept``.
    """

    def __init__(self) -> None:
        self._records: Dict[str, MessageRecord] = {}

    def current_version(self, key: str) -> int:
        """Last accepted version for key, or 0 if never published."""
        record = self._records.get(key)
        return record.version if record is not None else 0

    def accept(self, key: str, data: Any) -> MessageRecord:
        """Store data as the next version of key. The caller has already checked the version."""
        record = MessageRecord.build(key, self.current_version(key) + 1, data)
        self._records[key] = record
        return record

    def get(self, key: str) -> Optional[MessageRecord]:
        return self._records.get(key)

    def latest_records(self) -> List[Tuple[str, MessageRecord]]:
        """Copy of (key, record) pairs in insertion order."""
        return list(self._records.items())

    def clear_all(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __repr__(self) -> str:
        return f"VersionedStore(keys={len(self._records)})"
