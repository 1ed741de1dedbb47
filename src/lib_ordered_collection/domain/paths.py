"""Dotted-path access and flattening helpers shared by the collection type.

Purpose
-------
Host the two pieces of non-trivial traversal logic: :func:`data_get`, which
resolves ``"a.b.c"`` style paths (with ``*`` wildcards) against nested
mappings, sequences, keyed containers and objects, and :func:`flatten`, which
collapses nested containers with an optional depth limit.

Contents
--------
* :data:`MISSING` – sentinel returned by lookups that found nothing.
* :func:`value` – unwrap a default that may be a zero-argument callable.
* :func:`data_get` – dotted-path accessor that never raises on shape mismatch.
* :func:`flatten` / :func:`collapse_values` – depth-first flatteners.
* :func:`container_values` – classify a value as container (returns its
  values) or leaf (returns ``None``).

System Role
-----------
Pure functions with no I/O and no logging. Path selectors in
:mod:`lib_ordered_collection.domain.selectors` and most ``Collection``
operations delegate here.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final, Iterable

from .capabilities import KeyedItems
from .errors import CollectionValueError

_SCALAR_TYPES: Final[tuple[type, ...]] = (str, bytes, bytearray, int, float, complex, bool, type(None))
WILDCARD: Final[str] = "*"


class _Missing:
    """Marker type for :data:`MISSING`."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final[Any] = _Missing()
"""Sentinel distinguishing "not found" from a stored ``None``."""


def value(default: Any) -> Any:
    """Return ``default``, calling it first when it is callable.

    Examples
    --------
    >>> value(3)
    3
    >>> value(lambda: "lazy")
    'lazy'
    """

    return default() if callable(default) else default


def data_get(target: Any, path: Any, default: Any = None) -> Any:
    """Resolve *path* against *target*, returning *default* when it cannot.

    Why
    ----
    Selectors such as ``"user.address.city"`` or ``"tags.*.name"`` let callers
    address nested data without guard code at every level.

    What
    ----
    ``path`` is a dotted string, a sequence of segments, an integer key, or
    ``None`` (returns *target* unchanged). Each segment is looked up in
    mappings and keyed containers (``"1"`` and ``1`` fall back to each other),
    sequences (numeric segments index them) and finally object attributes.
    Presence is an explicit key test, so stored
    ``None`` values are returned as-is. The ``*`` segment plucks the rest of
    the path from every element of the current target; when another ``*``
    remains further down the path the plucked lists are collapsed one level.

    Parameters
    ----------
    target:
        Value to traverse.
    path:
        Dotted path, list of segments, integer key, or ``None``.
    default:
        Returned when a segment cannot be resolved. Called without arguments
        when callable.

    Returns
    -------
    Any
        The resolved value, a plucked ``list`` for wildcard paths, or the
        default.

    Examples
    --------
    >>> data_get({"a": {"b": {"c": 1}}}, "a.b.c")
    1
    >>> data_get({"a": {"b": None}}, "a.b", default="fallback") is None
    True
    >>> data_get({"a": 1}, "a.b", default="fallback")
    'fallback'
    >>> data_get({"rows": [{"id": 1}, {"id": 2}]}, "rows.*.id")
    [1, 2]
    >>> data_get([{"tags": ["x", "y"]}, {"tags": ["z"]}], "*.tags.*")
    ['x', 'y', 'z']
    >>> data_get({"items": ["zero", "one"]}, "items.1")
    'one'
    """

    if path is None:
        return target

    segments = _split_path(path)
    for position, segment in enumerate(segments):
        if segment == WILDCARD:
            elements = container_values(target)
            if elements is None:
                return value(default)
            rest = segments[position + 1 :]
            plucked = [data_get(element, rest) for element in elements]
            if WILDCARD in rest:
                return collapse_values(plucked)
            return plucked

        found = _lookup(target, segment)
        if found is MISSING:
            return value(default)
        target = found
    return target


def flatten(values: Iterable[Any], depth: int = 0) -> list[Any]:
    """Collapse nested containers found in *values* into a single list.

    Why
    ----
    Nested lists, mappings and collections frequently need to be processed as
    one flat sequence of leaves.

    What
    ----
    Lists, tuples, mappings (their values) and keyed containers are expanded
    depth-first, left-to-right. ``depth == 0`` expands without limit; ``depth
    == N`` expands at most ``N`` levels. Strings, bytes and every other value
    are kept as leaves.

    Raises
    ------
    CollectionValueError
        When ``depth`` is negative.

    Examples
    --------
    >>> flatten([[1, [2, 3]], [4]])
    [1, 2, 3, 4]
    >>> flatten([[1, [2, 3]], [4]], depth=1)
    [1, [2, 3], 4]
    >>> flatten([{"a": "x", "b": ["y"]}, "z"])
    ['x', 'y', 'z']
    """

    if depth < 0:
        raise CollectionValueError(f"flatten depth must be >= 0, got {depth}")
    flat: list[Any] = []
    _flatten_into(flat, values, depth, 0)
    return flat


def collapse_values(values: Iterable[Any]) -> list[Any]:
    """Merge the values of every container in *values* into one list; drop leaves.

    Examples
    --------
    >>> collapse_values([[1, 2], "skip", (3,), {"k": 4}])
    [1, 2, 3, 4]
    """

    collapsed: list[Any] = []
    for item in values:
        children = container_values(item)
        if children is not None:
            collapsed.extend(children)
    return collapsed


def container_values(item: Any) -> list[Any] | None:
    """Return the ordered values of a container, or ``None`` for leaves."""

    if isinstance(item, Mapping):
        return list(item.values())
    if isinstance(item, KeyedItems):
        return item.all()
    if isinstance(item, Sequence) and not isinstance(item, (str, bytes, bytearray)):
        return list(item)
    return None


def _flatten_into(flat: list[Any], values: Iterable[Any], depth: int, level: int) -> None:
    """Append leaves of *values* to *flat*, expanding containers below *depth*."""

    for item in values:
        children = container_values(item)
        if children is not None and (depth == 0 or depth > level):
            _flatten_into(flat, children, depth, level + 1)
        else:
            flat.append(item)


def _split_path(path: Any) -> list[Any]:
    """Normalise *path* into a list of segments."""

    if isinstance(path, str):
        return path.split(".")
    if isinstance(path, (list, tuple)):
        return list(path)
    return [path]


def _lookup(target: Any, segment: Any) -> Any:
    """Return ``target[segment]`` (or the attribute) or :data:`MISSING`."""

    if isinstance(target, Mapping):
        return _lookup_keyed(segment, lambda key: key in target, target.__getitem__)
    if isinstance(target, KeyedItems):
        return _lookup_keyed(segment, target.has, target.get)
    if isinstance(target, Sequence) and not isinstance(target, (str, bytes, bytearray)):
        index = _as_index(segment)
        if index is not None and index < len(target):
            return target[index]
        return MISSING
    if isinstance(target, _SCALAR_TYPES) or not isinstance(segment, str):
        return MISSING
    return getattr(target, segment, MISSING)


def _lookup_keyed(segment: Any, contains: Any, fetch: Any) -> Any:
    """Look up *segment*, falling back to its other key form (``"0"`` ↔ ``0``).

    Examples
    --------
    >>> _lookup_keyed(1, {"1": "x"}.__contains__, {"1": "x"}.__getitem__)
    'x'
    >>> _lookup_keyed("0", {0: "y"}.__contains__, {0: "y"}.__getitem__)
    'y'
    """

    if _safe_contains(contains, segment):
        return fetch(segment)
    alternate = _alternate_key(segment)
    if alternate is not None and _safe_contains(contains, alternate):
        return fetch(alternate)
    return MISSING


def _alternate_key(segment: Any) -> Any:
    """Return the string form of an integer segment or the integer form of a digit string."""

    if isinstance(segment, str):
        return _as_index(segment)
    if isinstance(segment, int) and not isinstance(segment, bool):
        return str(segment)
    return None


def _safe_contains(contains: Any, key: Any) -> bool:
    """Membership test that treats unhashable segments as absent."""

    try:
        return bool(contains(key))
    except TypeError:
        return False


def _as_index(segment: Any) -> int | None:
    """Return the non-negative integer form of *segment* when it has one."""

    if isinstance(segment, bool):
        return None
    if isinstance(segment, int):
        return segment if segment >= 0 else None
    if isinstance(segment, str) and segment.isdecimal():
        return int(segment)
    return None
