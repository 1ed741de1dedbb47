"""Selector variants used by key-extracting collection operations.

Purpose
-------
Operations such as ``sort_by``, ``group_by``, ``unique`` or ``sum`` accept
either a callable or a dotted path. Instead of re-checking ``callable()`` per
element, the raw argument is classified once into a :data:`Selector` and then
evaluated per element through :func:`resolve`.

Contents
--------
* :class:`PathSelector` – dotted path evaluated with :func:`data_get`.
* :class:`CallableSelector` – user callable invoked with ``(value, key)``.
* :func:`as_selector` – classify a raw selector argument.
* :func:`resolve` – evaluate a selector for one element.
* :func:`bind_callback` – adapt one-argument callables to ``(value, key)``.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Union

from .errors import CollectionTypeError
from .paths import data_get

Callback = Callable[[Any, Any], Any]


@dataclass(frozen=True, slots=True)
class PathSelector:
    """Select a nested value by dotted path (``None`` selects the element itself)."""

    path: Any


@dataclass(frozen=True, slots=True)
class CallableSelector:
    """Select a value by calling ``fn(value, key)``."""

    fn: Callback


Selector = Union[PathSelector, CallableSelector]


def as_selector(raw: Any) -> Selector:
    """Classify *raw* as a callable or a path selector.

    Examples
    --------
    >>> as_selector("user.name")
    PathSelector(path='user.name')
    >>> isinstance(as_selector(len), CallableSelector)
    True
    """

    if isinstance(raw, (PathSelector, CallableSelector)):
        return raw
    if callable(raw):
        return CallableSelector(bind_callback(raw))
    return PathSelector(raw)


def resolve(selector: Selector, value: Any, key: Any, default: Any = None) -> Any:
    """Evaluate *selector* against one element.

    Path selectors never raise; an unresolved path yields *default*.

    Examples
    --------
    >>> resolve(as_selector("age"), {"age": 30}, 0)
    30
    >>> resolve(as_selector(lambda value, key: key), "x", "k")
    'k'
    """

    if isinstance(selector, CallableSelector):
        return selector.fn(value, key)
    return data_get(value, selector.path, default)


def bind_callback(fn: Callable[..., Any]) -> Callback:
    """Return a ``(value, key)`` callable for *fn*.

    Why
    ----
    Element callbacks receive the value and its key. Plenty of useful
    callables (``str.upper``, ``len``, ``lambda item: ...``) only take the
    value, so those are wrapped to drop the key.

    Raises
    ------
    CollectionTypeError
        When *fn* is not callable.

    Examples
    --------
    >>> bind_callback(len)("abc", 0)
    3
    >>> bind_callback(lambda value, key: (key, value))("v", "k")
    ('k', 'v')
    """

    if not callable(fn):
        raise CollectionTypeError(f"Expected a callable, got {type(fn).__name__}")
    if _positional_capacity(fn) < 2:
        return lambda value, key: fn(value)
    return fn


def _positional_capacity(fn: Callable[..., Any]) -> int:
    """Count required positional parameters of *fn*; ``*args`` counts as two.

    Optional positional parameters are not counted, so ``sum``, ``round`` or
    ``str.split`` never receive the key as ``start``/``ndigits``/``sep``.
    Builtins without a signature count as one.
    """

    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return 1
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return 2
        if (
            parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            and parameter.default is inspect.Parameter.empty
        ):
            count += 1
    return count
