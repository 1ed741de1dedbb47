"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts that collaborators satisfy so the pipeline and
the composition root can work against abstractions.

Contents
--------
* :class:`FileLoader` – parses a structured input file into collection data.
* :class:`ToPlainStructure` – nested values convertible to plain dicts/lists
  (re-exported from the domain).
* :class:`RandomSource` – injectable generator for ``random``/``shuffle``
  (re-exported from the domain).

System Role
-----------
These protocols enforce Dependency Inversion. Loaders in
:mod:`lib_ordered_collection.adapters` implement :class:`FileLoader`; callers
pass any :class:`RandomSource` (``random.Random(seed)`` in tests) to make
sampling deterministic.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..domain.capabilities import RandomSource, ToPlainStructure


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured file into a mapping or a list.

    Why
    ----
    Segregate parsing concerns (JSON/TOML/YAML) from pipeline orchestration.
    """

    def load(self, path: str) -> Any:
        """Read *path* and return its data or raise ``InvalidFormat``/``NotFound``."""


__all__ = ["FileLoader", "RandomSource", "ToPlainStructure"]
