"""Client input errors raised by the relay core and rendered by the HTTP layer."""

from typing import Any, Dict, Optional

from msgrelay.protocol import (
    ERROR_BAD_BODY,
    ERROR_BAD_FILTERS,
    ERROR_BAD_KEY,
    ERROR_BAD_VERSION,
    ERROR_VERSION_CONFLICT,
    ERROR_WRONG_CONTENT_TYPE,
    error_body,
)


class RelayError(Exception):
    """Base class for rejected requests. Carries an error code and an HTTP status."""

    code = "BAD_REQUEST"
    status_code = 400
    message = "Bad request"

    def __init__(self, message: Optional[str] = None, cause: Optional[Any] = None) -> None:
        self.message = message or self.message
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return error_body(self.code, self.message, self.cause)


class BadKey(RelayError):
    code = ERROR_BAD_KEY
    message = "Bad key"


class BadVersion(RelayError):
    code = ERROR_BAD_VERSION
    message = "Bad version"


class WrongContentType(RelayError):
    code = ERROR_WRONG_CONTENT_TYPE
    message = "Use content-type: application/json for JSON request bodies"


class BadBody(RelayError):
    code = ERROR_BAD_BODY
    message = "Request body is not valid JSON"


class VersionConflict(RelayError):
    code = ERROR_VERSION_CONFLICT
    status_code = 409
    message = "Version conflict"

    def __init__(self, key: str, expected: int, declared: str) -> None:
        super().__init__()
        self.key = key
        self.expected = expected
        self.declared = declared


class BadFilters(RelayError):
    code = ERROR_BAD_FILTERS
    message = "Bad filters"
