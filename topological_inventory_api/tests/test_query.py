from __future__ import annotations

import pytest

from src.api.query import parse_nested_query
from src.core.exceptions import ParameterTypeError


def test_plain_and_nested_keys():
    params = parse_nested_query(
        [
            ("limit", "10"),
            ("filter[name][eq]", "a"),
            ("filter[id][]", "1"),
            ("filter[id][]", "2"),
        ]
    )
    assert params == {"limit": "10", "filter": {"name": {"eq": "a"}, "id": ["1", "2"]}}


def test_array_of_hashes():
    params = parse_nested_query(
        [("items[][name]", "a"), ("items[][value]", "1"), ("items[][name]", "b")]
    )
    assert params == {"items": [{"name": "a", "value": "1"}, {"name": "b"}]}


def test_last_value_wins_for_plain_keys():
    assert parse_nested_query([("offset", "1"), ("offset", "5")]) == {"offset": "5"}


def test_unbalanced_brackets_keep_the_raw_key():
    assert parse_nested_query([("filter[name", "x")]) == {"filter[name": "x"}


def test_empty_keys_are_ignored():
    assert parse_nested_query([("", "x")]) == {}


def test_hash_over_string_conflict():
    with pytest.raises(ParameterTypeError) as exc:
        parse_nested_query([("filter", "x"), ("filter[name]", "y")])
    assert exc.value.message == "expected Hash (got String) for param `filter'"
    assert exc.value.status_code == 400


def test_array_over_hash_conflict():
    with pytest.raises(ParameterTypeError, match="expected Array \\(got Hash\\)"):
        parse_nested_query([("filter[id]", "1"), ("filter[]", "2")])
