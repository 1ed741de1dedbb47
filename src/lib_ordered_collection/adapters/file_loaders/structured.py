"""Structured input loaders feeding collections from files.

Purpose
-------
Convert on-disk artifacts into Python data the collection factory accepts.
Adapters are small wrappers around ``json``/``tomllib``/``yaml.safe_load`` so
error handling and observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  parser outputs.
* :class:`JSONFileLoader` – JSON documents (top-level object or array).
* :class:`TOMLFileLoader` – TOML documents (always a table).
* :class:`YAMLFileLoader` – YAML documents via PyYAML.
* :func:`loader_for` – pick a loader from a file suffix.

System Role
-----------
Invoked by :func:`lib_ordered_collection.core.load_collection`; the domain
never reads files itself.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Side Effects
        ------------
        Emits ``input_file_read`` debug events.
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Input file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("input_file_read", operation="load", source=path, size=len(payload))
        return payload

    @staticmethod
    def _ensure_container(data: object, *, path: str) -> Any:
        """Ensure *data* is a mapping or a list, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_container([1, 2], path="demo")
        [1, 2]
        >>> BaseFileLoader._ensure_container(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_ordered_collection.domain.errors.InvalidFormat: File demo did not produce a mapping or a list
        """

        if not isinstance(data, (Mapping, list)):
            raise InvalidFormat(f"File {path} did not produce a mapping or a list")
        return data


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    def load(self, path: str) -> Any:
        """Return the object or array stored in the JSON file at *path*."""

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_error("input_file_invalid", operation="load", source=path, format="json", error=str(exc))
            raise InvalidFormat(f"Invalid JSON in {path}: {exc}") from exc
        result = self._ensure_container(data, path=path)
        log_debug("input_file_loaded", operation="load", source=path, format="json")
        return result


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    def load(self, path: str) -> Any:
        """Return the table stored in the TOML file at *path*."""

        try:
            text = self._read(path).decode("utf-8")
            data = tomllib.loads(text)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            log_error("input_file_invalid", operation="load", source=path, format="toml", error=str(exc))
            raise InvalidFormat(f"Invalid TOML in {path}: {exc}") from exc
        result = self._ensure_container(data, path=path)
        log_debug("input_file_loaded", operation="load", source=path, format="toml")
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents with PyYAML's safe loader."""

    def load(self, path: str) -> Any:
        """Return the mapping or sequence stored in the YAML file at *path*.

        An empty document yields an empty list.
        """

        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            log_error("input_file_invalid", operation="load", source=path, format="yaml", error=str(exc))
            raise InvalidFormat(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            data = []
        result = self._ensure_container(data, path=path)
        log_debug("input_file_loaded", operation="load", source=path, format="yaml")
        return result


_LOADERS: dict[str, BaseFileLoader] = {
    ".json": JSONFileLoader(),
    ".toml": TOMLFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


def loader_for(path: str) -> JSONFileLoader | TOMLFileLoader | YAMLFileLoader:
    """Return the loader registered for the suffix of *path*.

    Raises
    ------
    InvalidFormat
        When the suffix is not supported.

    Examples
    --------
    >>> type(loader_for("rows.yml")).__name__
    'YAMLFileLoader'
    """

    suffix = Path(path).suffix.lower()
    try:
        return _LOADERS[suffix]  # type: ignore[return-value]
    except KeyError as exc:
        supported = ", ".join(sorted(_LOADERS))
        raise InvalidFormat(f"Unsupported input format {suffix or '<none>'} for {path}; expected one of {supported}") from exc
