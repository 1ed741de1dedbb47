"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the collection type, the pipeline,
the adapters, and consuming applications. The hierarchy lives in the domain
layer so inner modules never import from outer layers.

Contents
--------
* :class:`CollectionError` – umbrella base class for all library failures.
* :class:`CollectionKeyError` – subscript access to a key that is not stored.
* :class:`CollectionTypeError` – elements have the wrong shape for an
  operation (non-numeric ``sum``, scalar records in ``where``...).
* :class:`CollectionValueError` – invalid arguments such as a zero chunk size.
* :class:`EmptyCollectionError` – aggregates that are undefined without items.
* :class:`InvalidFormat` / :class:`NotFound` – input artifacts that cannot be
  loaded by the adapters.

System Role
-----------
Errors are raised to the immediate caller and never logged by the domain.
Exceptions raised inside caller-supplied callbacks are not wrapped; they
propagate unchanged. Callers catch :class:`CollectionError` to handle all
library failures uniformly.
"""

from __future__ import annotations


class CollectionError(Exception):
    """Base type for all exceptions emitted by ``lib_ordered_collection``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class CollectionKeyError(CollectionError, KeyError):
    """Raised when ``collection[key]`` addresses a key that is not stored.

    Lookups through :meth:`Collection.get` and :meth:`Collection.pull` return a
    default instead.
    """


class CollectionTypeError(CollectionError, TypeError):
    """Raised when elements are incompatible with the requested operation.

    Typical Sources
    ---------------
    ``sum`` over strings, ``min``/``max`` over values that cannot be ordered,
    ``where`` over scalar elements, ``flip`` over unhashable values.
    """


class CollectionValueError(CollectionError, ValueError):
    """Raised for arguments outside an operation's domain (sizes, pages, counts)."""


class EmptyCollectionError(CollectionValueError):
    """Signals that an aggregate has no defined result for an empty collection.

    Current Usage
    -------------
    Raised by :meth:`Collection.avg` instead of dividing by zero.
    """


class InvalidFormat(CollectionError):
    """Raised when an input artifact cannot be parsed into structured data."""


class NotFound(CollectionError):
    """Represents a missing input artifact (file, optional parser)."""
