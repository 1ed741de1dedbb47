from __future__ import annotations

from lib_ordered_collection import Collection, describe_operations
from lib_ordered_collection.application.catalog import MUTATION, QUERY, REDUCTION, TRANSFORM, find_operation


def test_every_catalogued_operation_exists_and_is_documented() -> None:
    entries = describe_operations()
    for entry in entries:
        assert callable(getattr(Collection, entry["name"]))
        assert entry["summary"]
        assert entry["category"] in {QUERY, TRANSFORM, MUTATION, REDUCTION}


def test_catalog_names_are_unique() -> None:
    names = [entry["name"] for entry in describe_operations()]
    assert len(names) == len(set(names))


def test_every_public_method_is_catalogued() -> None:
    public = {
        name
        for name in vars(Collection)
        if not name.startswith("_") and callable(getattr(Collection, name)) and name != "create"
    }
    assert public == {entry["name"] for entry in describe_operations()}


def test_find_operation() -> None:
    entry = find_operation("group_by")
    assert entry is not None
    assert entry["category"] == TRANSFORM
    assert entry["needs_callable"] is False
    assert find_operation("reduce")["needs_callable"] is True  # type: ignore[index]
    assert find_operation("missing") is None
