import pytest
from starlette.datastructures import QueryParams

from msgrelay.errors import BadFilters
from msgrelay.filters import ALL_KEYS, FilterPredicate, MessageFilters, parse_filters


def test_unfiltered_accepts_everything():
    assert ALL_KEYS.unfiltered
    assert ALL_KEYS("anything")


def test_matches_and_prefixes_are_or_ed():
    predicate = FilterPredicate(matches=frozenset({"a"}), starts_with=("order.",))
    assert predicate("a")
    assert predicate("order.1")
    assert not predicate("ab")
    assert not predicate("user.1")


def test_select_preserves_order():
    predicate = FilterPredicate(starts_with=("x",))
    items = [("x2", 1), ("y", 2), ("x1", 3)]
    assert predicate.select(items) == [("x2", 1), ("x1", 3)]


def test_parse_repeated_query_params():
    params = QueryParams("matches=a&matches=b&starts-with=c.")
    predicate = parse_filters(params)
    assert predicate.matches == frozenset({"a", "b"})
    assert predicate.starts_with == ("c.",)


def test_parse_without_filters_is_unfiltered():
    assert parse_filters(QueryParams("")).unfiltered
    assert parse_filters({}).unfiltered


def test_parse_plain_dict():
    predicate = parse_filters({"matches": "a", "starts-with": ["b", "c"]})
    assert predicate.matches == frozenset({"a"})
    assert predicate.starts_with == ("b", "c")


@pytest.mark.parametrize(
    "query",
    ["matches=bad%20key", "starts-with=", "matches=a&matches=a/b", "starts-with=%21"],
)
def test_parse_rejects_invalid_values(query):
    with pytest.raises(BadFilters) as exc_info:
        parse_filters(QueryParams(query))
    assert exc_info.value.status_code == 400
    assert exc_info.value.cause


def test_empty_list_rejected():
    with pytest.raises(BadFilters):
        parse_filters({"matches": []})


def test_model_accepts_alias_and_field_name():
    assert MessageFilters.model_validate({"starts-with": ["a"]}).starts_with == ["a"]
    assert MessageFilters(starts_with=["a"]).starts_with == ["a"]
