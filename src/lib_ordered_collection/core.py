"""Composition root for ``lib_ordered_collection``.

Purpose
-------
Wire the file loaders, the collection factory and the operation pipeline
together for callers that start from a file on disk (the CLI, scripts).
Library users working with in-memory data use
:class:`~lib_ordered_collection.domain.collection.Collection` directly.

Contents
--------
* :func:`load_collection` – read a JSON/TOML/YAML file into a collection.
* :func:`query` – load a file and run pipeline steps over it.

System Role
-----------
Connects adapters with the domain value object while emitting structured
observability signals. The canonical place to register new input formats or
change how runs are seeded.
"""

from __future__ import annotations

from random import Random
from typing import Any, Iterable

from .adapters.file_loaders.structured import loader_for
from .application.pipeline import PipelineError, Step, run_pipeline
from .application.ports import FileLoader
from .domain.collection import Collection
from .domain.errors import CollectionError, InvalidFormat, NotFound
from .observability import bind_trace_id, log_debug, log_info, make_event


def load_collection(path: str) -> Collection:
    """Return a :class:`Collection` built from the structured file at *path*.

    Raises
    ------
    NotFound
        When the file does not exist.
    InvalidFormat
        When the suffix is unsupported or the content cannot be parsed.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / "rows.json"
    >>> _ = target.write_text('[{"age": 30}, {"age": 20}]', encoding="utf-8")
    >>> load_collection(str(target)).sum("age")
    50
    >>> tmp.cleanup()
    """

    loader: FileLoader = loader_for(path)
    data = loader.load(path)
    collection = Collection(data)
    log_debug("collection_loaded", **make_event("load", path, {"count": collection.count()}))
    return collection


def query(
    path: str,
    steps: Iterable[Step | str],
    *,
    seed: int | None = None,
    trace_id: str | None = None,
) -> Any:
    """Load *path* and apply *steps*, returning the final pipeline result.

    Parameters
    ----------
    path:
        JSON, TOML or YAML input file.
    steps:
        Pipeline steps (see :mod:`lib_ordered_collection.application.pipeline`).
    seed:
        Seed for ``random``/``shuffle`` steps. ``None`` draws fresh entropy.
    trace_id:
        Identifier attached to every log event of this run.

    Side Effects
    ------------
    Binds *trace_id* for the duration of the call and emits ``query_complete``.
    """

    bind_trace_id(trace_id)
    try:
        collection = load_collection(path)
        step_list = list(steps)
        result = run_pipeline(collection, step_list, rng=Random(seed))
        log_info("query_complete", **make_event("query", path, {"steps": len(step_list)}))
        return result
    finally:
        bind_trace_id(None)


__all__ = [
    "Collection",
    "CollectionError",
    "InvalidFormat",
    "NotFound",
    "PipelineError",
    "load_collection",
    "query",
]
