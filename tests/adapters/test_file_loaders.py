from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from lib_ordered_collection.adapters.file_loaders import loader_for
from lib_ordered_collection.adapters.file_loaders.structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader
from lib_ordered_collection.domain.errors import InvalidFormat, NotFound


def test_toml_loader(tmp_path: Path) -> None:
    path = tmp_path / "rows.toml"
    path.write_text('[[rows]]\nname = "ann"\nage = 30\n')
    data = TOMLFileLoader().load(str(path))
    assert data["rows"][0]["age"] == 30


def test_toml_loader_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "missing.toml"
    with pytest.raises(NotFound):
        TOMLFileLoader().load(str(missing))


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "rows.json"
    path.write_text("{invalid}")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))


def test_json_loader_accepts_top_level_array(tmp_path: Path) -> None:
    path = tmp_path / "rows.json"
    path.write_text(json.dumps([{"feature": True}]), encoding="utf-8")
    data = JSONFileLoader().load(str(path))
    assert data == [{"feature": True}]


def test_json_loader_rejects_scalar_document(tmp_path: Path) -> None:
    path = tmp_path / "rows.json"
    path.write_text("42")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))


def test_yaml_loader_handles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "rows.yaml"
    path.write_text("# empty file\n")
    assert YAMLFileLoader().load(str(path)) == []


def test_yaml_loader_reads_sequences(tmp_path: Path) -> None:
    path = tmp_path / "rows.yml"
    path.write_text("- name: ann\n  age: 30\n- name: bob\n  age: 20\n")
    assert [row["name"] for row in YAMLFileLoader().load(str(path))] == ["ann", "bob"]


def test_yaml_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "rows.yaml"
    path.write_text("key: [unclosed\n")
    with pytest.raises(InvalidFormat):
        YAMLFileLoader().load(str(path))


def test_loader_for_picks_by_suffix() -> None:
    assert isinstance(loader_for("a.JSON"), JSONFileLoader)
    assert isinstance(loader_for("a.toml"), TOMLFileLoader)
    assert isinstance(loader_for("a.yaml"), YAMLFileLoader)
    with pytest.raises(InvalidFormat):
        loader_for("a.csv")
    with pytest.raises(InvalidFormat):
        loader_for("no_suffix")


def test_invalid_input_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="lib_ordered_collection")
    path = tmp_path / "rows.json"
    path.write_text("[1,")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))
    context = getattr(caplog.records[-1], "context")
    assert context["operation"] == "load"
    assert context["format"] == "json"
