"""Application-layer pipeline of textual collection operations.

Purpose
-------
Let the CLI (and any other text-driven caller) describe a chain of collection
operations as strings such as ``"sort_by:age"`` or ``'where:["role","admin"]'``
and apply them in order.

Contents
    - ``Step``: parsed operation name and positional arguments.
    - ``PipelineError``: raised for steps that cannot be applied.
    - ``parse_step``: turn ``"name:ARGS"`` into a :class:`Step`.
    - ``run_pipeline``: apply steps to a collection, logging each one.

Step Syntax
-----------
``name`` alone calls the operation without arguments. ``name:ARGS`` parses
``ARGS`` as JSON: an array supplies positional arguments, any other JSON value
is a single argument, and text that is not JSON is passed as one string.
"""

from __future__ import annotations

import inspect
import json
from dataclasses import dataclass
from typing import Any, Iterable

from ..domain.capabilities import RandomSource
from ..domain.collection import Collection
from ..domain.errors import CollectionValueError
from ..observability import log_debug, make_event
from .catalog import find_operation

_RANDOMISED = frozenset({"random", "shuffle"})


class PipelineError(CollectionValueError):
    """Raised when a pipeline step names an unusable operation or follows a terminal result."""


@dataclass(frozen=True, slots=True)
class Step:
    """One parsed pipeline step."""

    operation: str
    args: tuple[Any, ...] = ()


def parse_step(text: str) -> Step:
    """Parse ``"name"`` or ``"name:ARGS"`` into a :class:`Step`.

    Examples
    --------
    >>> parse_step("values")
    Step(operation='values', args=())
    >>> parse_step("take:3")
    Step(operation='take', args=(3,))
    >>> parse_step('where:["role", "admin"]')
    Step(operation='where', args=('role', 'admin'))
    >>> parse_step("sort_by:user.age")
    Step(operation='sort_by', args=('user.age',))
    """

    name, separator, raw_args = text.partition(":")
    name = name.strip()
    if not name:
        raise PipelineError(f"Pipeline step {text!r} does not name an operation")
    if not separator:
        return Step(name)
    return Step(name, _parse_args(raw_args))


def run_pipeline(
    collection: Collection,
    steps: Iterable[Step | str],
    *,
    rng: RandomSource | None = None,
) -> Any:
    """Apply *steps* to *collection* in order and return the final result.

    Why
    ----
    Keeps the CLI thin: it only parses options and prints the result, while
    validation and sequencing live here.

    What
    ----
    Each step must name a catalogued operation that does not require a
    Python callable. Collection results feed the next step; any other result
    is terminal and must be the last step. ``random`` and ``shuffle`` receive
    *rng* so runs are reproducible.

    Raises
    ------
    PipelineError
        For unknown operations, operations needing callables, arguments the
        operation does not accept, or steps that follow a terminal result.

    Examples
    --------
    >>> run_pipeline(Collection([3, 1, 2]), ["sort", "values", "all"])
    [1, 2, 3]
    """

    current: Any = collection
    for index, raw in enumerate(steps):
        step = parse_step(raw) if isinstance(raw, str) else raw
        if not isinstance(current, Collection):
            raise PipelineError(
                f"Step {index + 1} ({step.operation}) follows a step that returned {type(current).__name__}"
            )
        current = _apply(current, step, rng)
        log_debug(
            "pipeline_step",
            **make_event(step.operation, None, {"index": index, "result": type(current).__name__}),
        )
    return current


def _apply(collection: Collection, step: Step, rng: RandomSource | None) -> Any:
    """Invoke one catalogued operation on *collection*."""

    info = find_operation(step.operation)
    if info is None:
        raise PipelineError(f"Unknown collection operation: {step.operation}")
    if info["needs_callable"]:
        raise PipelineError(f"Operation {step.operation} needs a Python callable and cannot run in a pipeline")
    method = getattr(collection, step.operation)
    keywords: dict[str, Any] = {"rng": rng} if step.operation in _RANDOMISED else {}
    try:
        inspect.signature(method).bind(*step.args, **keywords)
    except TypeError as exc:
        raise PipelineError(f"Operation {step.operation} cannot take arguments {list(step.args)!r}: {exc}") from exc
    return method(*step.args, **keywords)


def _parse_args(raw: str) -> tuple[Any, ...]:
    """Decode the argument part of a step."""

    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return (raw,)
    if isinstance(decoded, list):
        return tuple(decoded)
    return (decoded,)
