"""Publish protocol: validation, optimistic-concurrency check, store update and broadcast."""

import json
from typing import Any, NoReturn, Optional, Union

from msgrelay.errors import BadBody, BadKey, BadVersion, VersionConflict, WrongContentType
from msgrelay.hub import BroadcastHub
from msgrelay.observability import Metrics, get_logger
from msgrelay.observability import metrics as m
from msgrelay.protocol import JSON_MEDIA_TYPE, is_valid_key, is_valid_version
from msgrelay.record import MessageRecord
from msgrelay.store import VersionedStore


def is_json_content_type(content_type: Optional[str]) -> bool:
    """True for ``application/json``, with or without parameters such as charset."""
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == JSON_MEDIA_TYPE


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_body(body: Optional[bytes]) -> Any:
    """Decode a JSON request body; an empty body is null. NaN and Infinity are rejected."""
    if not body or not body.strip():
        return None
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as e:
        raise BadBody() from e


class MessagePublisher:
    """Appends the next version of a key and broadcasts it.

    A publisher must declare exactly ``current_version + 1``; anything else is a
    VersionConflict and leaves the store untouched.
    """

    def __init__(
        self,
        store: VersionedStore,
        hub: BroadcastHub,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self._store = store
        self._hub = hub
        self._metrics = metrics or Metrics()
        self._logger = get_logger("msgrelay.publisher")

    def publish(self, key: str, version: Union[str, int], data: Any = None) -> MessageRecord:
        """Publish already-decoded data. Raises BadKey, BadVersion or VersionConflict."""
        version = str(version)
        self._check_identity(key, version)
        return self._append(key, version, data)

    def publish_request(
        self,
        key: str,
        version: str,
        body: Optional[bytes],
        content_type: Optional[str],
    ) -> MessageRecord:
        """Publish a raw HTTP body. Checks run in order: key, version, content type, body, version match."""
        self._check_identity(key, version)
        if not is_json_content_type(content_type):
            self._reject(key, WrongContentType())
        try:
            data = decode_body(body)
        except BadBody as e:
            self._reject(key, e)
        return self._append(key, version, data)

    def _check_identity(self, key: str, version: str) -> None:
        if not is_valid_key(key):
            self._reject(key, BadKey())
        if not is_valid_version(version):
            self._reject(key, BadVersion())

    def _append(self, key: str, version: str, data: Any) -> MessageRecord:
        expected = self._store.current_version(key) + 1
        if version != str(expected):
            self._metrics.increment(m.VERSION_CONFLICTS)
            self._logger.info(
                "version_conflict",
                extra={"key": key, "declared": version, "expected": expected},
            )
            self._reject(key, VersionConflict(key, expected, version))
        try:
            record = self._store.accept(key, data)
        except (TypeError, ValueError) as e:
            # Data that cannot be encoded as strict JSON; the store is untouched.
            self._reject(key, BadBody(f"Data is not JSON-serializable: {e}"))
        self._metrics.increment(m.MESSAGES_PUBLISHED)
        self._logger.info("published", extra={"key": key, "version": record.version})
        self._hub.deliver(record.event_frame, key)
        return record

    def _reject(self, key: str, error: Exception) -> NoReturn:
        self._metrics.increment(m.PUBLISH_REJECTED)
        raise error
