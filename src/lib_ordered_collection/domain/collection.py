"""Ordered collection value object.

Purpose
-------
Anchor the :class:`Collection` type: a fluent wrapper over an ordered
key→value mapping exposing array-style operations (map, filter, reduce, sort,
grouping, set operations, slicing, statistical aggregates). The module belongs
to the domain layer and performs no I/O and no logging.

Contents
--------
* :class:`Collection` – the wrapper and its operation set.
* :func:`collect` – factory shortcut equivalent to :meth:`Collection.create`.
* :func:`_renumber` / :func:`_pairs_of` – internal helpers implementing key
  renumbering and argument normalisation.

Mutation Rules
--------------
* Queries (``get``, ``has``, ``contains``...) never modify the receiver.
* Transforms (``map``, ``filter``, ``sort_by``, ``push``, ``prepend``...)
  return a new collection with its own backing ``dict``; the receiver is left
  untouched.
* In-place mutations (``put``, ``pull``, ``forget``, ``transform``, ``pop``,
  ``shift``, ``splice``, item assignment) change the receiver and return it
  or the extracted value.

Key Renumbering
---------------
Operations that reindex (``values``, ``merge``, ``collapse``, ``reverse``,
``slice`` and friends) renumber integer keys from ``0`` while string keys are
kept, so mixed collections behave like ordered arrays.
"""

from __future__ import annotations

import json
import numbers
from collections.abc import Iterable, Iterator, Mapping
from functools import cmp_to_key
from random import Random
from typing import Any, Callable

from .capabilities import RandomSource, ToPlainStructure
from .errors import CollectionKeyError, CollectionTypeError, CollectionValueError, EmptyCollectionError
from .paths import MISSING, container_values, data_get
from .paths import value as evaluate_default
from .paths import flatten as flatten_values
from .selectors import as_selector, bind_callback, resolve

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool, type(None))


class Collection:
    """Fluent wrapper over an ordered key→value mapping.

    Why
    ----
    Callers chain read and transform operations over in-memory data without
    re-deriving the underlying storage at every step.

    What
    ----
    Stores a private ``dict``. Keys are unique and insertion order is
    observable through iteration, :meth:`all`, :meth:`first` and every
    unsorted result. Iterating a collection yields its values; ``in`` tests
    value membership; ``collection[key]`` reads a key.

    Parameters
    ----------
    data:
        Initial content. Mappings keep their keys, other iterables receive
        positional keys, another :class:`Collection` is copied, ``None``
        produces an empty collection and any other value becomes a single
        element.

    Examples
    --------
    >>> Collection({"a": 1, "b": 2, "c": 3}).filter(lambda v: v > 1).values().all()
    [2, 3]
    >>> Collection([3, 1, 2]).sort().values().all()
    [1, 2, 3]
    >>> Collection([{"age": 20}, {"age": 30}, {"age": 20}]).group_by("age").keys().all()
    [20, 30]
    """

    __slots__ = ("_data",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data: Any = None) -> None:
        self._data: dict[Any, Any] = _as_dict(data)

    @classmethod
    def create(cls, data: Any = None) -> Collection:
        """Create a collection from *data* (see the class docstring)."""

        return cls(data)

    @classmethod
    def _adopt(cls, data: dict[Any, Any]) -> Collection:
        """Wrap a freshly built ``dict`` without copying it again."""

        instance = cls.__new__(cls)
        instance._data = data
        return instance

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._data.values()))

    def __contains__(self, item: Any) -> bool:
        return item in self._data.values()

    def __getitem__(self, key: Any) -> Any:
        if not self._has_key(key):
            raise CollectionKeyError(key)
        return self._data[key]

    def __setitem__(self, key: Any, item: Any) -> None:
        self.put(key, item)

    def __delitem__(self, key: Any) -> None:
        if not self._has_key(key):
            raise CollectionKeyError(key)
        del self._data[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return list(self._data.items()) == list(other._data.items())

    def __repr__(self) -> str:
        return f"Collection({self._data!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all(self) -> list[Any]:
        """Return the values in insertion order as a new list."""

        return list(self._data.values())

    def items(self) -> list[tuple[Any, Any]]:
        """Return ``(key, value)`` pairs in insertion order."""

        return list(self._data.items())

    def count(self) -> int:
        """Return the number of stored elements."""

        return len(self._data)

    def is_empty(self) -> bool:
        """Return ``True`` when no element is stored."""

        return not self._data

    def is_not_empty(self) -> bool:
        """Return ``True`` when at least one element is stored."""

        return bool(self._data)

    def has(self, key: Any, *keys: Any) -> bool:
        """Return ``True`` when every given key is stored (``None`` values count)."""

        return all(self._has_key(candidate) for candidate in (key, *keys))

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the value stored under *key* or *default*.

        Why
        ----
        Lookups must not confuse a stored ``None``/falsy value with absence.

        What
        ----
        Tests the key for presence explicitly. When absent, *default* is
        returned, or called without arguments first when it is callable.

        Examples
        --------
        >>> c = Collection({"a": None, "b": 0})
        >>> c.get("a", "fallback") is None
        True
        >>> c.get("missing", lambda: "computed")
        'computed'
        """

        if self._has_key(key):
            return self._data[key]
        return evaluate_default(default)

    def contains(self, needle: Any, value: Any = MISSING) -> bool:
        """Return whether an element matches *needle*.

        * callable *needle*: ``True`` when it returns truthy for any element;
        * two arguments: ``True`` when ``data_get(element, needle) == value``;
        * otherwise: ``True`` when *needle* equals one of the values.

        Examples
        --------
        >>> Collection([1, 2, 3]).contains(2)
        True
        >>> Collection([{"name": "desk"}]).contains("name", "desk")
        True
        """

        if value is not MISSING:
            return any(data_get(item, needle, MISSING) == value for item in self._data.values())
        if callable(needle):
            callback = bind_callback(needle)
            return any(callback(item, key) for key, item in self._data.items())
        return needle in self._data.values()

    def search(self, needle: Any, strict: bool = False) -> Any:
        """Return the key of the first element matching *needle*, or ``None``.

        A callable *needle* is called with ``(value, key)``; otherwise values are
        compared with ``==`` (and by type when *strict*).
        """

        if callable(needle):
            callback = bind_callback(needle)
            for key, item in self._data.items():
                if callback(item, key):
                    return key
            return None
        for key, item in self._data.items():
            if _equals(item, needle, strict):
                return key
        return None

    def first(self, callback: Callable[..., Any] | None = None, default: Any = None) -> Any:
        """Return the first value (passing *callback*, when given) or *default*."""

        if callback is None:
            for item in self._data.values():
                return item
            return evaluate_default(default)
        test = bind_callback(callback)
        for key, item in self._data.items():
            if test(item, key):
                return item
        return evaluate_default(default)

    def last(self, callback: Callable[..., Any] | None = None, default: Any = None) -> Any:
        """Return the last value (passing *callback*, when given) or *default*."""

        if callback is None:
            for item in reversed(self._data.values()):
                return item
            return evaluate_default(default)
        test = bind_callback(callback)
        found = MISSING
        for key, item in self._data.items():
            if test(item, key):
                found = item
        return evaluate_default(default) if found is MISSING else found

    # ------------------------------------------------------------------
    # Transforms (new instance, receiver untouched)
    # ------------------------------------------------------------------

    def keys(self) -> Collection:
        """Return the keys as a positional collection."""

        return Collection(list(self._data.keys()))

    def values(self) -> Collection:
        """Return the values as a positional collection."""

        return Collection(list(self._data.values()))

    def map(self, callback: Callable[..., Any]) -> Collection:
        """Return a collection with ``callback(value, key)`` under the same keys."""

        fn = bind_callback(callback)
        return Collection._adopt({key: fn(item, key) for key, item in self._data.items()})

    def filter(self, callback: Callable[..., Any] | None = None) -> Collection:
        """Keep elements for which *callback* is truthy (truthy values when omitted); keys are kept."""

        if callback is None:
            return Collection._adopt({key: item for key, item in self._data.items() if item})
        test = bind_callback(callback)
        return Collection._adopt({key: item for key, item in self._data.items() if test(item, key)})

    def reject(self, callback: Any) -> Collection:
        """Drop elements for which *callback* is truthy, or that equal a non-callable *callback*."""

        if not callable(callback):
            return Collection._adopt({key: item for key, item in self._data.items() if item != callback})
        test = bind_callback(callback)
        return Collection._adopt({key: item for key, item in self._data.items() if not test(item, key)})

    def where(self, key: Any, value: Any, strict: bool = False) -> Collection:
        """Keep records whose ``data_get(record, key)`` equals *value*; keys are kept.

        Raises
        ------
        CollectionTypeError
            When an element is a scalar and therefore not a record.

        Examples
        --------
        >>> rows = Collection([{"role": "admin"}, {"role": "user"}, {"role": "admin"}])
        >>> rows.where("role", "admin").keys().all()
        [0, 2]
        """

        kept: dict[Any, Any] = {}
        for item_key, item in self._data.items():
            if isinstance(item, _SCALAR_TYPES):
                raise CollectionTypeError(
                    f"where() expects record-like elements, got {type(item).__name__} at key {item_key!r}"
                )
            if _equals(data_get(item, key, MISSING), value, strict):
                kept[item_key] = item
        return Collection._adopt(kept)

    def only(self, keys: Any) -> Collection:
        """Return the elements stored under *keys* (a key or an iterable of keys)."""

        wanted = _key_list(keys)
        return Collection._adopt({key: item for key, item in self._data.items() if key in wanted})

    def except_(self, keys: Any) -> Collection:
        """Return every element except those stored under *keys*."""

        unwanted = _key_list(keys)
        return Collection._adopt({key: item for key, item in self._data.items() if key not in unwanted})

    def sort(self, comparator: Callable[[Any, Any], int] | None = None, descending: bool = False) -> Collection:
        """Return the elements sorted by value, keys preserved.

        *comparator* is an optional ``cmp(a, b) -> int`` function. The sort is
        stable, so equal elements keep their relative order. Without a
        comparator ``None`` values sort before every other value.

        Raises
        ------
        CollectionTypeError
            When non-``None`` values cannot be ordered and no comparator is given.

        Examples
        --------
        >>> Collection([2, None, 1]).sort().all()
        [None, 1, 2]
        """

        pairs = list(self._data.items())
        if comparator is not None:
            ordered = sorted(pairs, key=cmp_to_key(lambda a, b: comparator(a[1], b[1])), reverse=descending)
            return Collection._adopt(dict(ordered))
        try:
            ordered = sorted(pairs, key=lambda pair: _none_first(pair[1]), reverse=descending)
        except TypeError as exc:
            raise CollectionTypeError(f"Cannot sort values of mixed or unordered types: {exc}") from exc
        return Collection._adopt(dict(ordered))

    def sort_by(self, selector: Any, descending: bool = False) -> Collection:
        """Return the elements ordered by a computed key, keys preserved.

        Why
        ----
        Records are usually ordered by one of their fields or by a derived
        value rather than by the record itself.

        What
        ----
        Resolves *selector* once (callable → ``fn(value, key)``, anything else →
        dotted path via :func:`data_get`), computes every element's sort key,
        then applies a stable sort. Descending order is stable as well: elements
        with equal sort keys keep their original relative order. Elements whose
        path does not resolve get a ``None`` key, and ``None`` sorts first.

        Raises
        ------
        CollectionTypeError
            When non-``None`` computed keys cannot be compared with each other.

        Examples
        --------
        >>> people = Collection([{"n": "b", "age": 30}, {"n": "a", "age": 20}, {"n": "c", "age": 30}])
        >>> [row["n"] for row in people.sort_by("age")]
        ['a', 'b', 'c']
        >>> [row["n"] for row in people.sort_by("age", descending=True)]
        ['b', 'c', 'a']
        """

        chosen = as_selector(selector)
        pairs = list(self._data.items())
        computed = [_none_first(resolve(chosen, item, key)) for key, item in pairs]
        try:
            order = sorted(range(len(pairs)), key=computed.__getitem__, reverse=descending)
        except TypeError as exc:
            raise CollectionTypeError(f"sort_by() produced keys that cannot be compared: {exc}") from exc
        return Collection._adopt({pairs[index][0]: pairs[index][1] for index in order})

    def sort_by_desc(self, selector: Any) -> Collection:
        """Shortcut for ``sort_by(selector, descending=True)``."""

        return self.sort_by(selector, descending=True)

    def reverse(self, preserve_keys: bool = False) -> Collection:
        """Return the elements in reverse order; integer keys are renumbered unless *preserve_keys*."""

        pairs = list(reversed(self._data.items()))
        return Collection._adopt(dict(pairs) if preserve_keys else _renumber(pairs))

    def slice(self, offset: int, length: int | None = None, preserve_keys: bool = False) -> Collection:
        """Return a positional window of the collection.

        Negative *offset* counts from the end; negative *length* stops that
        many elements before the end. Integer keys are renumbered unless
        *preserve_keys*; string keys are always kept.

        Examples
        --------
        >>> Collection([1, 2, 3, 4, 5]).slice(1, 2).all()
        [2, 3]
        >>> Collection([1, 2, 3, 4, 5]).slice(-2).all()
        [4, 5]
        """

        pairs = list(self._data.items())
        start, end = _window(len(pairs), offset, length)
        selected = pairs[start:end]
        return Collection._adopt(dict(selected) if preserve_keys else _renumber(selected))

    def take(self, limit: int) -> Collection:
        """Return the first *limit* elements, or the last ``-limit`` when negative."""

        if limit < 0:
            return self.slice(limit, -limit)
        return self.slice(0, limit)

    def for_page(self, page: int, per_page: int) -> Collection:
        """Return the values shown on 1-indexed *page* with *per_page* items per page.

        The window starts at ``(page - 1) * per_page`` and ends, exclusively,
        ``per_page`` items later. Values are reindexed from ``0``.

        Raises
        ------
        CollectionValueError
            When *page* is lower than 1 or *per_page* is negative.

        Examples
        --------
        >>> Collection(range(1, 10)).for_page(2, 3).all()
        [4, 5, 6]
        >>> Collection(range(1, 10)).for_page(4, 3).all()
        []
        """

        if page < 1:
            raise CollectionValueError(f"for_page() pages start at 1, got {page}")
        if per_page < 0:
            raise CollectionValueError(f"for_page() needs a non-negative page size, got {per_page}")
        start = (page - 1) * per_page
        return Collection(list(self._data.values())[start : start + per_page])

    def chunk(self, size: int, preserve_keys: bool = False) -> Collection:
        """Split into collections of at most *size* elements."""

        if size < 1:
            raise CollectionValueError(f"chunk() size must be >= 1, got {size}")
        pairs = list(self._data.items())
        chunks = []
        for start in range(0, len(pairs), size):
            window = pairs[start : start + size]
            chunks.append(Collection._adopt(dict(window) if preserve_keys else _renumber_all(window)))
        return Collection(chunks)

    def every(self, step: int, offset: int = 0) -> Collection:
        """Return every *step*-th value starting at position *offset*."""

        if step < 1:
            raise CollectionValueError(f"every() step must be >= 1, got {step}")
        if offset < 0:
            raise CollectionValueError(f"every() offset must be >= 0, got {offset}")
        return Collection(list(self._data.values())[offset::step])

    def collapse(self) -> Collection:
        """Merge nested lists, mappings and collections one level; scalar elements are dropped."""

        pairs: list[tuple[Any, Any]] = []
        for item in self._data.values():
            nested = _nested_pairs(item)
            if nested is not None:
                pairs.extend(nested)
        return Collection._adopt(_renumber(pairs))

    def flatten(self, depth: int = 0) -> Collection:
        """Flatten nested containers into a positional collection.

        ``depth == 0`` flattens without limit; ``depth == N`` collapses at most
        ``N`` levels. Leaves keep their depth-first, left-to-right order.

        Examples
        --------
        >>> Collection([[1, [2, 3]], [4]]).flatten(1).all()
        [1, [2, 3], 4]
        >>> Collection([[1, [2, 3]], [4]]).flatten().all()
        [1, 2, 3, 4]
        """

        return Collection(flatten_values(self._data.values(), depth))

    def merge(self, other: Any) -> Collection:
        """Merge *other* into a copy: string keys are overwritten, integer keys appended."""

        return Collection._adopt(_renumber([*self._data.items(), *_pairs_of(other, "merge")]))

    def diff(self, other: Any) -> Collection:
        """Keep elements whose value does not appear in *other*; keys are kept."""

        others = [item for _, item in _pairs_of(other, "diff")]
        return Collection._adopt({key: item for key, item in self._data.items() if item not in others})

    def intersect(self, other: Any) -> Collection:
        """Keep elements whose value also appears in *other*; keys are kept."""

        others = [item for _, item in _pairs_of(other, "intersect")]
        return Collection._adopt({key: item for key, item in self._data.items() if item in others})

    def unique(self, selector: Any = None, strict: bool = False) -> Collection:
        """Drop elements whose computed key was already seen; keys are kept.

        Why
        ----
        De-duplication commonly happens on a field (``"email"``) rather than on
        whole records.

        What
        ----
        Iterates in insertion order and keeps the first element for every
        distinct computed key. Without *selector* the raw values are compared
        with ``==``; *strict* additionally requires matching types.

        Examples
        --------
        >>> Collection([1, 2, 2, 3, 1]).unique().values().all()
        [1, 2, 3]
        >>> Collection([{"id": 1, "v": "a"}, {"id": 1, "v": "b"}]).unique("id").count()
        1
        """

        chosen = None if selector is None else as_selector(selector)
        seen: list[Any] = []
        kept: dict[Any, Any] = {}
        for key, item in self._data.items():
            marker = item if chosen is None else resolve(chosen, item, key)
            if any(_equals(previous, marker, strict) for previous in seen):
                continue
            seen.append(marker)
            kept[key] = item
        return Collection._adopt(kept)

    def group_by(self, selector: Any, preserve_keys: bool = False) -> Collection:
        """Bucket elements by a computed key.

        Buckets are collections; bucket keys appear in first-seen order and
        every bucket keeps insertion order. Without *preserve_keys* each bucket
        is positional.

        Raises
        ------
        CollectionTypeError
            When a computed key is not hashable.

        Examples
        --------
        >>> grouped = Collection([{"age": 20}, {"age": 30}, {"age": 20}]).group_by("age")
        >>> grouped.get(20).all()
        [{'age': 20}, {'age': 20}]
        >>> grouped.get(30).all()
        [{'age': 30}]
        """

        chosen = as_selector(selector)
        buckets: dict[Any, dict[Any, Any]] = {}
        for key, item in self._data.items():
            group = _hashable(resolve(chosen, item, key), "group_by")
            bucket = buckets.setdefault(group, {})
            bucket[key if preserve_keys else len(bucket)] = item
        return Collection._adopt({group: Collection._adopt(bucket) for group, bucket in buckets.items()})

    def key_by(self, selector: Any) -> Collection:
        """Re-key elements by a computed key; later elements win on collisions.

        With a path selector, elements on which the path does not resolve are
        skipped.
        """

        chosen = as_selector(selector)
        keyed: dict[Any, Any] = {}
        for key, item in self._data.items():
            new_key = resolve(chosen, item, key, MISSING)
            if new_key is MISSING:
                continue
            keyed[_hashable(new_key, "key_by")] = item
        return Collection._adopt(keyed)

    def column(self, key: Any, index: Any = None) -> Collection:
        """Pluck ``data_get(record, key)`` from every record (the record itself for ``None``).

        With *index*, results are keyed by ``data_get(record, index)``; records
        without that index are appended positionally. Records that do not
        contain *key* are skipped.
        """

        plucked: dict[Any, Any] = {}
        next_index = 0
        for item in self._data.values():
            picked = item if key is None else data_get(item, key, MISSING)
            if picked is MISSING:
                continue
            new_key = MISSING if index is None else data_get(item, index, MISSING)
            if new_key is MISSING:
                new_key = next_index
            new_key = _hashable(new_key, "column")
            plucked[new_key] = picked
            if _is_int_key(new_key):
                next_index = max(next_index, new_key + 1)
        return Collection._adopt(plucked)

    def flip(self) -> Collection:
        """Swap keys and values."""

        return Collection._adopt({_hashable(item, "flip"): key for key, item in self._data.items()})

    def combine(self, values: Any) -> Collection:
        """Use this collection's values as keys for *values*."""

        new_values = [item for _, item in _pairs_of(values, "combine")]
        if len(new_values) != len(self._data):
            raise CollectionValueError(
                f"combine() needs as many values as keys ({len(self._data)}), got {len(new_values)}"
            )
        new_keys = [_hashable(item, "combine") for item in self._data.values()]
        return Collection._adopt(dict(zip(new_keys, new_values)))

    def zip(self, other: Any) -> Collection:
        """Pair every element with its counterpart in *other*.

        Why
        ----
        Parallel data (names and scores, keys and labels) is often held in two
        containers that need to be combined element by element.

        What
        ----
        When both sides are associative (not positional) elements are paired by
        key, otherwise by position. The result keeps this collection's keys and
        length. Every value is a ``(mine, theirs)`` tuple, or ``(mine,)`` when
        *other* has no counterpart. Extra elements of *other* are ignored.

        Raises
        ------
        CollectionTypeError
            When *other* is not a collection, mapping or non-string sequence.

        Examples
        --------
        >>> Collection(["a", "b", "c"]).zip([1, 2]).all()
        [('a', 1), ('b', 2), ('c',)]
        >>> Collection({"x": 1, "y": 2}).zip({"y": 20, "z": 30}).to_plain()
        {'x': (1,), 'y': (2, 20)}
        """

        other_pairs = _pairs_of(other, "zip")
        if not _is_positional(self._data.keys()) and not _is_positional(key for key, _ in other_pairs):
            lookup = dict(other_pairs)
            zipped = {key: (item, lookup[key]) if key in lookup else (item,) for key, item in self._data.items()}
            return Collection._adopt(zipped)
        others = [item for _, item in other_pairs]
        zipped = {}
        for position, (key, item) in enumerate(self._data.items()):
            zipped[key] = (item, others[position]) if position < len(others) else (item,)
        return Collection._adopt(zipped)

    def shuffle(self, *, rng: RandomSource | None = None) -> Collection:
        """Return the values in random order drawn from *rng* (a fresh ``Random()`` by default)."""

        shuffled = list(self._data.values())
        (rng or Random()).shuffle(shuffled)
        return Collection(shuffled)

    def random(self, count: int = 1, *, rng: RandomSource | None = None) -> Any:
        """Sample *count* values uniformly without replacement.

        Why
        ----
        Random picks must be reproducible in tests, so the generator is an
        explicit argument instead of the interpreter-wide one.

        What
        ----
        Draws from *rng* (any :class:`RandomSource`, for example
        ``random.Random(seed)``); a fresh unseeded ``Random()`` is used when it
        is omitted. ``count == 1`` returns the bare value, every other count a
        positional collection.

        Raises
        ------
        CollectionValueError
            When *count* is negative or larger than the collection.

        Examples
        --------
        >>> import random
        >>> picked = Collection([1, 2, 3, 4]).random(2, rng=random.Random(3))
        >>> picked.count(), set(picked.all()) <= {1, 2, 3, 4}
        (2, True)
        """

        if count < 0 or count > len(self._data):
            raise CollectionValueError(f"random() cannot pick {count} of {len(self._data)} elements")
        picked = (rng or Random()).sample(list(self._data.values()), count)
        if count == 1:
            return picked[0]
        return Collection(picked)

    def push(self, value: Any, key: Any = None) -> Collection:
        """Return a copy with *value* appended (at the next integer key, or under *key*)."""

        data = dict(self._data)
        if key is None:
            data[_next_index(data)] = value
        else:
            data[_hashable(key, "push")] = value
        return Collection._adopt(data)

    def prepend(self, value: Any, key: Any = None) -> Collection:
        """Return a copy with *value* placed first.

        Without *key* integer keys are renumbered; with *key* the value is
        stored under that key (replacing any previous element with that key).
        """

        if key is None:
            return Collection._adopt(_renumber([(0, value), *self._data.items()]))
        data = {_hashable(key, "prepend"): value}
        for existing, item in self._data.items():
            if existing != key:
                data[existing] = item
        return Collection._adopt(data)

    # ------------------------------------------------------------------
    # In-place mutations
    # ------------------------------------------------------------------

    def put(self, key: Any, value: Any) -> Collection:
        """Store *value* under *key* and return this collection."""

        self._data[_hashable(key, "put")] = value
        return self

    def pull(self, key: Any, default: Any = None) -> Any:
        """Remove *key* and return its value; a missing key returns *default* and changes nothing."""

        if self._has_key(key):
            return self._data.pop(key)
        return evaluate_default(default)

    def forget(self, keys: Any) -> Collection:
        """Remove *keys* (a key or an iterable of keys) and return this collection; missing keys are ignored."""

        for key in _key_list(keys):
            if self._has_key(key):
                del self._data[key]
        return self

    def transform(self, callback: Callable[..., Any]) -> Collection:
        """Replace every value with ``callback(value, key)`` in place and return this collection."""

        fn = bind_callback(callback)
        self._data = {key: fn(item, key) for key, item in self._data.items()}
        return self

    def pop(self) -> Any:
        """Remove and return the last value (``None`` when empty)."""

        if not self._data:
            return None
        return self._data.pop(next(reversed(self._data)))

    def shift(self) -> Any:
        """Remove and return the first value (``None`` when empty); integer keys are renumbered."""

        if not self._data:
            return None
        first_value = self._data.pop(next(iter(self._data)))
        self._data = _renumber(list(self._data.items()))
        return first_value

    def splice(self, offset: int, length: int | None = None, replacement: Any = None) -> Collection:
        """Remove a positional window in place, optionally inserting *replacement*.

        Window semantics match :meth:`slice`. Integer keys of the receiver are
        renumbered afterwards. Returns the removed elements.

        Examples
        --------
        >>> c = Collection([1, 2, 3, 4])
        >>> c.splice(1, 2, ["x"]).all()
        [2, 3]
        >>> c.all()
        [1, 'x', 4]
        """

        pairs = list(self._data.items())
        start, end = _window(len(pairs), offset, length)
        inserted = [] if replacement is None else [(0, item) for _, item in _pairs_of(replacement, "splice")]
        removed = pairs[start:end]
        self._data = _renumber([*pairs[:start], *inserted, *pairs[max(start, end) :]])
        return Collection._adopt(_renumber(removed))

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------

    def each(self, callback: Callable[..., Any]) -> Collection:
        """Call ``callback(value, key)`` for every element; stop when it returns ``False``."""

        fn = bind_callback(callback)
        for key, item in list(self._data.items()):
            if fn(item, key) is False:
                break
        return self

    def reduce(self, callback: Callable[[Any, Any], Any], initial: Any = None) -> Any:
        """Fold the values with ``callback(carry, value)`` starting from *initial*."""

        carry = initial
        for item in list(self._data.values()):
            carry = callback(carry, item)
        return carry

    def sum(self, selector: Any = None) -> Any:
        """Add the values (or the values picked by *selector*) starting from ``0``.

        Raises
        ------
        CollectionTypeError
            When a contribution is not a number.

        Examples
        --------
        >>> Collection({0: 1, 1: 2, 2: 3, 3: 4}).sum()
        10
        >>> Collection([{"price": 2.5}, {"price": 1.5}]).sum("price")
        4.0
        """

        total: Any = 0
        for contribution in self._selected(selector):
            if not isinstance(contribution, numbers.Number):
                raise CollectionTypeError(f"sum() expects numbers, got {type(contribution).__name__}")
            total += contribution
        return total

    def avg(self, selector: Any = None) -> Any:
        """Return ``sum(selector) / count()``.

        Raises
        ------
        EmptyCollectionError
            When the collection is empty; the average is undefined.
        """

        if not self._data:
            raise EmptyCollectionError("avg() of an empty collection is undefined")
        return self.sum(selector) / len(self._data)

    def min(self, selector: Any = None, default: Any = None) -> Any:
        """Return the smallest value (ignoring ``None``) or *default* when there is none."""

        return self._extreme(min, selector, default)

    def max(self, selector: Any = None, default: Any = None) -> Any:
        """Return the largest value (ignoring ``None``) or *default* when there is none."""

        return self._extreme(max, selector, default)

    def implode(self, glue_or_key: Any, glue: str | None = None) -> str:
        """Join the values into a string.

        ``implode(", ")`` joins scalar values; ``implode("name", ", ")`` joins
        the ``name`` field of every record. ``None`` renders as an empty string.

        Raises
        ------
        CollectionTypeError
            When joining nested containers without naming a key.

        Examples
        --------
        >>> Collection(["a", "b"]).implode("-")
        'a-b'
        >>> Collection([{"n": "x"}, {"n": "y"}]).implode("n", ", ")
        'x, y'
        """

        if glue is None:
            parts = []
            for item in self._data.values():
                if container_values(item) is not None:
                    raise CollectionTypeError("implode() needs a key to join nested values")
                parts.append(_stringify(item))
            return str(glue_or_key).join(parts)
        return glue.join(_stringify(data_get(item, glue_or_key)) for item in self._data.values())

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_plain(self) -> Any:
        """Return a plain structure: a ``list`` when positional, otherwise a ``dict``.

        Nested values implementing :class:`ToPlainStructure` (collections
        included) are converted recursively, also inside plain dicts, lists and
        tuples. Other leaves pass through unchanged.

        Examples
        --------
        >>> Collection({"a": Collection([1, 2])}).to_plain()
        {'a': [1, 2]}
        >>> Collection([Collection({"k": "v"})]).to_plain()
        [{'k': 'v'}]
        """

        if _is_positional(self._data.keys()):
            return [_plain(item) for item in self._data.values()]
        return {key: _plain(item) for key, item in self._data.items()}

    def as_dict(self) -> dict[Any, Any]:
        """Return a ``dict`` copy (nested values converted as in :meth:`to_plain`)."""

        return {key: _plain(item) for key, item in self._data.items()}

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise :meth:`to_plain` to JSON.

        Raises
        ------
        CollectionTypeError
            When a value has no JSON representation.

        Examples
        --------
        >>> Collection({"a": [1, 2]}).to_json()
        '{"a":[1,2]}'
        """

        try:
            return json.dumps(self.to_plain(), indent=indent, separators=(",", ":"), ensure_ascii=False)
        except TypeError as exc:
            raise CollectionTypeError(f"Collection is not JSON serialisable: {exc}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _has_key(self, key: Any) -> bool:
        try:
            return key in self._data
        except TypeError:
            return False

    def _selected(self, selector: Any) -> list[Any]:
        if selector is None:
            return list(self._data.values())
        chosen = as_selector(selector)
        return [resolve(chosen, item, key) for key, item in self._data.items()]

    def _extreme(self, pick: Callable[..., Any], selector: Any, default: Any) -> Any:
        candidates = [item for item in self._selected(selector) if item is not None]
        if not candidates:
            return default
        try:
            return pick(candidates)
        except TypeError as exc:
            raise CollectionTypeError(f"{pick.__name__}() over values that cannot be compared: {exc}") from exc


def collect(data: Any = None) -> Collection:
    """Create a :class:`Collection` from *data*.

    Examples
    --------
    >>> collect([1, 2, 3]).sum()
    6
    """

    return Collection(data)


def _as_dict(data: Any) -> dict[Any, Any]:
    """Copy *data* into a fresh backing ``dict``."""

    if data is None:
        return {}
    if isinstance(data, Collection):
        return dict(data._data)
    if isinstance(data, Mapping):
        return dict(data.items())
    if isinstance(data, Iterable) and not isinstance(data, (str, bytes, bytearray)):
        return dict(enumerate(data))
    return {0: data}


def _pairs_of(other: Any, operation: str) -> list[tuple[Any, Any]]:
    """Normalise an argument into ``(key, value)`` pairs."""

    if isinstance(other, Collection):
        return other.items()
    if isinstance(other, Mapping):
        return list(other.items())
    if isinstance(other, Iterable) and not isinstance(other, (str, bytes, bytearray)):
        return list(enumerate(other))
    raise CollectionTypeError(f"{operation}() expects a collection, mapping or sequence, got {type(other).__name__}")


def _nested_pairs(item: Any) -> list[tuple[Any, Any]] | None:
    """Return the pairs of a nested container or ``None`` for scalars."""

    if isinstance(item, Collection):
        return item.items()
    if isinstance(item, Mapping):
        return list(item.items())
    if isinstance(item, (list, tuple)):
        return list(enumerate(item))
    return None


def _is_int_key(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _is_positional(keys: Iterable[Any]) -> bool:
    """Return ``True`` when *keys* are exactly ``0, 1, 2, ...``."""

    return all(_is_int_key(key) and key == position for position, key in enumerate(keys))


def _renumber(pairs: Iterable[tuple[Any, Any]]) -> dict[Any, Any]:
    """Renumber integer keys from 0 in order; string keys keep (and overwrite) their slot.

    Examples
    --------
    >>> _renumber([(5, "a"), ("x", "b"), (9, "c"), ("x", "d")])
    {0: 'a', 'x': 'd', 1: 'c'}
    """

    renumbered: dict[Any, Any] = {}
    position = 0
    for key, item in pairs:
        if _is_int_key(key):
            renumbered[position] = item
            position += 1
        else:
            renumbered[key] = item
    return renumbered


def _renumber_all(pairs: Iterable[tuple[Any, Any]]) -> dict[int, Any]:
    """Discard every key and number the values from 0."""

    return {position: item for position, (_, item) in enumerate(pairs)}


def _next_index(data: Mapping[Any, Any]) -> int:
    """Return one past the largest integer key (0 without integer keys)."""

    int_keys = [key for key in data if _is_int_key(key)]
    return max(int_keys) + 1 if int_keys else 0


def _window(size: int, offset: int, length: int | None) -> tuple[int, int]:
    """Translate ``(offset, length)`` into ``[start, end)`` list indices."""

    start = offset if offset >= 0 else max(size + offset, 0)
    if length is None:
        return start, size
    if length < 0:
        return start, max(size + length, start)
    return start, start + length


def _key_list(keys: Any) -> list[Any]:
    """Interpret *keys* as a list of keys (a single key becomes a one-element list)."""

    if isinstance(keys, (list, tuple, set, frozenset, Collection)):
        return list(keys)
    return [keys]


def _hashable(key: Any, operation: str) -> Any:
    """Return *key* or raise :class:`CollectionTypeError` when it cannot be a key."""

    try:
        hash(key)
    except TypeError as exc:
        raise CollectionTypeError(f"{operation}() produced an unhashable key of type {type(key).__name__}") from exc
    return key


def _equals(left: Any, right: Any, strict: bool) -> bool:
    if strict and type(left) is not type(right):
        return False
    return bool(left == right)


def _none_first(item: Any) -> tuple[bool, Any]:
    """Sort key placing ``None`` before every other value.

    Examples
    --------
    >>> sorted([3, None, 1], key=_none_first)
    [None, 1, 3]
    """

    return (item is not None, item)


def _stringify(item: Any) -> str:
    return "" if item is None else str(item)


def _plain(item: Any) -> Any:
    """Convert nested plain-structure-capable values, walking dicts, lists and tuples."""

    if isinstance(item, ToPlainStructure):
        return item.to_plain()
    if isinstance(item, Mapping):
        return {key: _plain(child) for key, child in item.items()}
    if type(item) is list:
        return [_plain(child) for child in item]
    if type(item) is tuple:
        return tuple(_plain(child) for child in item)
    return item
