"""Public package surface for ``lib_ordered_collection``.

``Collection`` is a fluent wrapper over an ordered key→value mapping with
array-style operations; ``collect`` is its factory shortcut. ``data_get`` and
``flatten`` are the traversal helpers the collection is built on, exported for
direct use on plain dicts and lists.
"""

from __future__ import annotations

from .application.catalog import OperationInfo, describe_operations
from .application.pipeline import PipelineError, Step, parse_step, run_pipeline
from .core import load_collection, query
from .domain.capabilities import RandomSource, ToPlainStructure
from .domain.collection import Collection, collect
from .domain.errors import (
    CollectionError,
    CollectionKeyError,
    CollectionTypeError,
    CollectionValueError,
    EmptyCollectionError,
    InvalidFormat,
    NotFound,
)
from .domain.paths import MISSING, data_get, flatten
from .observability import bind_trace_id, get_logger

__all__ = [
    "Collection",
    "collect",
    "data_get",
    "flatten",
    "MISSING",
    "RandomSource",
    "ToPlainStructure",
    "CollectionError",
    "CollectionKeyError",
    "CollectionTypeError",
    "CollectionValueError",
    "EmptyCollectionError",
    "InvalidFormat",
    "NotFound",
    "PipelineError",
    "Step",
    "parse_step",
    "run_pipeline",
    "OperationInfo",
    "describe_operations",
    "load_collection",
    "query",
    "bind_trace_id",
    "get_logger",
]
