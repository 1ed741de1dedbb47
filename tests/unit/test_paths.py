"""Dotted-path lookups and flattening.

``data_get`` never raises on shape mismatches; these tests pin that contract
together with the wildcard plucking rules.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from lib_ordered_collection import MISSING, Collection, CollectionValueError, data_get, flatten
from lib_ordered_collection.domain.paths import collapse_values, container_values, value


@dataclass
class Address:
    city: str


@dataclass
class User:
    name: str
    address: Address


def test_nested_mapping_lookup() -> None:
    assert data_get({"a": {"b": {"c": 1}}}, "a.b.c") == 1
    assert data_get({"a": {"b": {"c": 1}}}, "a.b") == {"c": 1}


def test_none_path_returns_target() -> None:
    target = {"a": 1}
    assert data_get(target, None) is target


def test_missing_segments_return_default() -> None:
    assert data_get({"a": 1}, "b") is None
    assert data_get({"a": 1}, "a.b", "fallback") == "fallback"
    assert data_get(None, "a", "fallback") == "fallback"
    assert data_get({"a": 1}, "b", lambda: "lazy") == "lazy"


def test_stored_none_is_not_replaced_by_default() -> None:
    assert data_get({"a": None}, "a", "fallback") is None


def test_sequence_indexing_with_numeric_segments() -> None:
    target = {"items": ["zero", "one"]}
    assert data_get(target, "items.1") == "one"
    assert data_get(target, "items.2", "none") == "none"
    assert data_get(target, "items.x", "none") == "none"
    assert data_get(["a", "b"], 1) == "b"


def test_numeric_segment_falls_back_to_int_key() -> None:
    assert data_get({0: {"name": "zero"}}, "0.name") == "zero"
    assert data_get({"0": "string key"}, "0") == "string key"


def test_int_segment_falls_back_to_string_key() -> None:
    assert data_get({"1": "x"}, 1) == "x"
    assert data_get({"1": {"a": 2}}, [1, "a"]) == 2
    assert data_get({"2": "x"}, 1, default="none") == "none"


def test_list_of_segments_keeps_dots_inside_keys() -> None:
    assert data_get({"a.b": 1}, ["a.b"]) == 1


def test_collection_targets() -> None:
    target = Collection({"user": Collection({"name": "ann"})})
    assert data_get(target, "user.name") == "ann"
    assert data_get(Collection([{"id": 7}]), "0.id") == 7


def test_object_attributes() -> None:
    user = User(name="ann", address=Address(city="Vienna"))
    assert data_get(user, "address.city") == "Vienna"
    assert data_get(user, "address.zip", "none") == "none"
    assert data_get({"user": user}, "user.name") == "ann"


def test_strings_are_leaves() -> None:
    assert data_get({"a": "text"}, "a.upper", "none") == "none"
    assert data_get({"a": "text"}, "a.0", "none") == "none"


def test_wildcard_plucks_rest_of_path() -> None:
    target = {"rows": [{"id": 1}, {"id": 2}, {"other": 3}]}
    assert data_get(target, "rows.*.id") == [1, 2, None]
    assert data_get({"m": {"x": {"v": 1}, "y": {"v": 2}}}, "m.*.v") == [1, 2]


def test_trailing_wildcard_returns_values() -> None:
    assert data_get({"m": {"x": 1, "y": 2}}, "m.*") == [1, 2]


def test_nested_wildcards_collapse_one_level() -> None:
    target = [{"tags": [{"n": "x"}, {"n": "y"}]}, {"tags": [{"n": "z"}]}, {"tags": None}]
    assert data_get(target, "*.tags.*.n") == ["x", "y", "z"]


def test_wildcard_on_scalar_returns_default() -> None:
    assert data_get({"a": 5}, "a.*", "none") == "none"


def test_flatten_without_limit() -> None:
    assert flatten([1, [2, (3, [4])], {"k": [5]}]) == [1, 2, 3, 4, 5]


def test_flatten_depth_limits_levels() -> None:
    nested = [[1, [2, [3]]]]
    assert flatten(nested, 1) == [1, [2, [3]]]
    assert flatten(nested, 2) == [1, 2, [3]]
    assert flatten(nested, 3) == [1, 2, 3]


def test_flatten_keeps_strings_and_expands_collections() -> None:
    assert flatten(["ab", Collection(["c", ["d"]])]) == ["ab", "c", "d"]


def test_flatten_rejects_negative_depth() -> None:
    with pytest.raises(CollectionValueError):
        flatten([1], -1)


def test_collapse_and_container_helpers() -> None:
    assert collapse_values([[1], "x", {"a": 2}]) == [1, 2]
    assert container_values("text") is None
    assert container_values(Collection({"a": 1})) == [1]


def test_missing_sentinel_and_value_helper() -> None:
    assert not MISSING
    assert repr(MISSING) == "MISSING"
    assert value(MISSING) is MISSING
    assert value(lambda: 3) == 3
