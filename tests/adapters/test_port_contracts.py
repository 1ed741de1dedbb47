"""Adapter contract tests for the application-layer ports.

Verify the default adapters and the standard library generator keep satisfying
the protocols in ``application/ports.py`` so dependency inversion stays
enforceable through automated tests.
"""

from __future__ import annotations

import random

import pytest

from lib_ordered_collection import Collection
from lib_ordered_collection.application import ports
from lib_ordered_collection.adapters.file_loaders.structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader


@pytest.mark.parametrize("loader", [JSONFileLoader(), TOMLFileLoader(), YAMLFileLoader()])
def test_structured_loaders_fulfil_file_loader_port(loader) -> None:
    assert isinstance(loader, ports.FileLoader)


def test_random_random_fulfils_random_source_port() -> None:
    assert isinstance(random.Random(3), ports.RandomSource)


def test_collection_fulfils_plain_structure_port() -> None:
    assert isinstance(Collection(), ports.ToPlainStructure)
    assert not isinstance({"a": 1}, ports.ToPlainStructure)
