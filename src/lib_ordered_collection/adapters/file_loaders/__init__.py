"""Structured file loaders (JSON, TOML, YAML)."""

from __future__ import annotations

from .structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader, loader_for

__all__ = ["JSONFileLoader", "TOMLFileLoader", "YAMLFileLoader", "loader_for"]
