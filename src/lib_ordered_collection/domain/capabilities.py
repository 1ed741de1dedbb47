"""Structural capabilities recognised by the domain helpers.

Purpose
-------
Replace ad-hoc ``hasattr`` checks with named protocols. Nested values opt into
plain-structure conversion by implementing :class:`ToPlainStructure`; random
sampling accepts any :class:`RandomSource`; :func:`data_get` and
:func:`flatten` walk any :class:`KeyedItems` container the same way they walk
dictionaries.

Contents
--------
* :class:`ToPlainStructure` – ``to_plain()`` returns nested ``dict``/``list``
  data.
* :class:`KeyedItems` – ordered keyed container exposing ``has``, ``get`` and
  ``all``.
* :class:`RandomSource` – the subset of :class:`random.Random` used for
  sampling and shuffling.
"""

from __future__ import annotations

from typing import Any, MutableSequence, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ToPlainStructure(Protocol):
    """Values that can render themselves as plain nested dicts and lists."""

    def to_plain(self) -> Any:
        """Return a structure made of ``dict``, ``list`` and leaf values."""


@runtime_checkable
class KeyedItems(Protocol):
    """Ordered keyed containers that are not ``Mapping`` subclasses."""

    def has(self, key: Any, *keys: Any) -> bool:
        """Return ``True`` when every key is stored."""

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the stored value or ``default``."""

    def all(self) -> list[Any]:
        """Return the stored values in insertion order."""


@runtime_checkable
class RandomSource(Protocol):
    """Injectable random generator; :class:`random.Random` satisfies it.

    Examples
    --------
    >>> import random
    >>> isinstance(random.Random(7), RandomSource)
    True
    """

    def sample(self, population: Sequence[Any], k: int) -> list[Any]:
        """Return ``k`` unique elements chosen from ``population``."""

    def shuffle(self, x: MutableSequence[Any]) -> None:
        """Shuffle ``x`` in place."""
