"""Wire shapes: key/version patterns, event-stream frames, snapshots and error bodies."""

import json
import re
from typing import Any, Dict, List, Optional

KEY_PATTERN = r"^(\w|-|\.)+$"
VERSION_PATTERN = r"^[1-9][0-9]*$"
MAX_VERSION_DIGITS = 15

_key_re = re.compile(KEY_PATTERN)
_version_re = re.compile(VERSION_PATTERN)

# Error codes (returned in the "code" field of error bodies)
ERROR_BAD_KEY = "BAD_KEY"
ERROR_BAD_VERSION = "BAD_VERSION"
ERROR_WRONG_CONTENT_TYPE = "WRONG_CONTENT_TYPE"
ERROR_BAD_BODY = "BAD_BODY"
ERROR_VERSION_CONFLICT = "VERSION_CONFLICT"
ERROR_BAD_FILTERS = "BAD_FILTERS"

HEALTH_TEXT = "Message server running"

JSON_MEDIA_TYPE = "application/json"
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"
EVENT_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def is_valid_key(key: str) -> bool:
    return bool(_key_re.fullmatch(key))


def is_valid_version(version: str) -> bool:
    """Positive integer, no leading zero, at most 15 digits."""
    return len(version) <= MAX_VERSION_DIGITS and bool(_version_re.fullmatch(version))


def dumps(value: Any) -> str:
    """Compact JSON, matching what browsers' JSON.parse expects on the other end."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def message_id(key: str, version: int) -> Dict[str, Any]:
    return {"key": key, "version": version}


def event_frame(key: str, version: int, data: Any) -> str:
    """text/event-stream frame: id line carries the message identity, data line the payload."""
    return f"id: {dumps(message_id(key, version))}\ndata: {dumps(data)}\n\n"


def snapshot_entry(key: str, version: int, data: Any) -> str:
    return dumps({"id": message_id(key, version), "data": data})


def snapshot_body(entries: List[str]) -> str:
    """Join precomputed snapshot entries into a JSON array without re-encoding them."""
    return "[" + ",".join(entries) + "]"


def error_body(code: str, message: str, cause: Optional[Any] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"error": message, "code": code}
    if cause is not None:
        out["cause"] = cause
    return out
