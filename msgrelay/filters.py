"""Subscription filters: request validation and the key predicate built from it."""

from dataclasses import dataclass
from typing import Annotated, Any, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from msgrelay.errors import BadFilters
from msgrelay.protocol import KEY_PATTERN

FilterKey = Annotated[str, StringConstraints(pattern=KEY_PATTERN)]
FilterKeys = Annotated[List[FilterKey], Field(min_length=1)]

MATCHES_PARAM = "matches"
STARTS_WITH_PARAM = "starts-with"


class MessageFilters(BaseModel):
    """Query filters for GET /messages and /messages/snapshot."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    matches: Optional[FilterKeys] = None
    starts_with: Optional[FilterKeys] = Field(default=None, alias=STARTS_WITH_PARAM)


@dataclass(frozen=True)
class FilterPredicate:
    """Accepts a key that is in ``matches`` or starts with one of ``starts_with``.

    With neither criterion every key is accepted.
    """

    matches: FrozenSet[str] = frozenset()
    starts_with: Tuple[str, ...] = ()

    @classmethod
    def from_filters(cls, filters: MessageFilters) -> "FilterPredicate":
        return cls(
            matches=frozenset(filters.matches or ()),
            starts_with=tuple(filters.starts_with or ()),
        )

    @property
    def unfiltered(self) -> bool:
        return not self.matches and not self.starts_with

    def __call__(self, key: str) -> bool:
        if self.unfiltered:
            return True
        return key in self.matches or any(key.startswith(p) for p in self.starts_with)

    def select(self, items: Iterable[Tuple[str, Any]]) -> List[Tuple[str, Any]]:
        """Keep the (key, value) pairs whose key is accepted, preserving order."""
        return [(key, value) for key, value in items if self(key)]


ALL_KEYS = FilterPredicate()


def parse_filters(params: Mapping[str, Any]) -> FilterPredicate:
    """Build a predicate from query parameters; raise BadFilters if they are invalid.

    ``params`` is a multi-value mapping (e.g. starlette's QueryParams) or a plain dict
    of lists. Parameters that are absent stay unset; repeated parameters accumulate.
    """
    raw = {}
    for name in (MATCHES_PARAM, STARTS_WITH_PARAM):
        values = _getlist(params, name)
        if values is not None:
            raw[name] = values
    try:
        filters = MessageFilters.model_validate(raw)
    except ValidationError as e:
        raise BadFilters(cause=e.errors(include_url=False, include_context=False)) from e
    return FilterPredicate.from_filters(filters)


def _getlist(params: Mapping[str, Any], name: str) -> Optional[List[str]]:
    if name not in params:
        return None
    if hasattr(params, "getlist"):
        return list(params.getlist(name))
    value = params[name]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
