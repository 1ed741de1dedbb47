"""Catalog of the public collection operations.

Purpose
-------
Publish the names, categories and one-line descriptions of every public
:class:`~lib_ordered_collection.domain.collection.Collection` operation.
Documentation tooling renders reference pages from this list, and the
pipeline uses it to decide which operations may be invoked from text.

Contents
--------
* :class:`OperationInfo` – typed description of one operation.
* :func:`describe_operations` – the full catalog in a stable order.
* :func:`find_operation` – look up a single entry by name.
"""

from __future__ import annotations

import inspect
from typing import Final, TypedDict

from ..domain.collection import Collection

QUERY: Final[str] = "query"
TRANSFORM: Final[str] = "transform"
MUTATION: Final[str] = "mutation"
REDUCTION: Final[str] = "reduction"

_CATEGORIES: Final[dict[str, tuple[str, ...]]] = {
    QUERY: (
        "all",
        "items",
        "count",
        "is_empty",
        "is_not_empty",
        "has",
        "get",
        "contains",
        "search",
        "first",
        "last",
    ),
    TRANSFORM: (
        "keys",
        "values",
        "map",
        "filter",
        "reject",
        "where",
        "only",
        "except_",
        "sort",
        "sort_by",
        "sort_by_desc",
        "reverse",
        "slice",
        "take",
        "for_page",
        "chunk",
        "every",
        "collapse",
        "flatten",
        "merge",
        "diff",
        "intersect",
        "unique",
        "group_by",
        "key_by",
        "column",
        "flip",
        "combine",
        "zip",
        "shuffle",
        "random",
        "push",
        "prepend",
    ),
    MUTATION: ("put", "pull", "forget", "transform", "pop", "shift", "splice"),
    REDUCTION: ("each", "reduce", "sum", "avg", "min", "max", "implode", "to_plain", "as_dict", "to_json"),
}

# Operations whose first argument must be a Python callable.
_NEEDS_CALLABLE: Final[frozenset[str]] = frozenset({"map", "transform", "each", "reduce"})


class OperationInfo(TypedDict):
    """Describe one public collection operation.

    Attributes
    ----------
    name:
        Method name on :class:`Collection`.
    category:
        ``"query"``, ``"transform"``, ``"mutation"`` or ``"reduction"``.
    summary:
        First line of the method docstring.
    needs_callable:
        ``True`` when the operation cannot run without a Python callable.
    """

    name: str
    category: str
    summary: str
    needs_callable: bool


def describe_operations() -> list[OperationInfo]:
    """Return the catalog grouped by category, in declaration order.

    Examples
    --------
    >>> entries = describe_operations()
    >>> entries[0]["name"], entries[0]["category"]
    ('all', 'query')
    >>> all(entry["summary"] for entry in entries)
    True
    """

    return [_describe(name, category) for category, names in _CATEGORIES.items() for name in names]


def find_operation(name: str) -> OperationInfo | None:
    """Return the catalog entry for *name* or ``None`` when it is not public.

    Examples
    --------
    >>> find_operation("sort_by")["category"]
    'transform'
    >>> find_operation("_adopt") is None
    True
    """

    for category, names in _CATEGORIES.items():
        if name in names:
            return _describe(name, category)
    return None


def _describe(name: str, category: str) -> OperationInfo:
    """Build the catalog entry for one method."""

    return OperationInfo(
        name=name,
        category=category,
        summary=_summary(name),
        needs_callable=name in _NEEDS_CALLABLE,
    )


def _summary(name: str) -> str:
    """Return the first docstring line of ``Collection.<name>``."""

    doc = inspect.getdoc(getattr(Collection, name)) or ""
    return doc.splitlines()[0] if doc else ""
