"""Domain layer: the collection value object, its helpers and error taxonomy."""

from __future__ import annotations

from .collection import Collection, collect
from .errors import (
    CollectionError,
    CollectionKeyError,
    CollectionTypeError,
    CollectionValueError,
    EmptyCollectionError,
    InvalidFormat,
    NotFound,
)
from .paths import MISSING, data_get, flatten

__all__ = [
    "Collection",
    "collect",
    "data_get",
    "flatten",
    "MISSING",
    "CollectionError",
    "CollectionKeyError",
    "CollectionTypeError",
    "CollectionValueError",
    "EmptyCollectionError",
    "InvalidFormat",
    "NotFound",
]
