"""End-to-end CLI coverage for the public commands exposed by lib_ordered_collection.

These tests exercise the documented CLI workflows (query, operations, metadata
lookups) through Click's runner and through ``main`` so the shared exit code
handling of ``lib_cli_exit_tools`` is covered too.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import lib_cli_exit_tools

from lib_ordered_collection import cli

ROWS = [
    {"name": "ann", "age": 30, "role": "admin"},
    {"name": "bob", "age": 20, "role": "user"},
    {"name": "cid", "age": 40, "role": "user"},
]


def _runner() -> CliRunner:
    """Return a fresh CLI runner so each test starts from a clean state."""

    return CliRunner()


def _rows_file(tmp_path: Path) -> Path:
    path = tmp_path / "rows.json"
    path.write_text(json.dumps(ROWS), encoding="utf-8")
    return path


def test_cli_query_applies_steps_in_order(tmp_path: Path) -> None:
    """`cli query` should pipe the loaded rows through every --step."""

    source = _rows_file(tmp_path)
    result = _runner().invoke(
        cli.cli,
        ["query", str(source), "--step", 'where:["role","user"]', "--step", "sort_by_desc:age", "--step", "column:name"],
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == ["cid", "bob"]


def test_cli_query_without_steps_echoes_data(tmp_path: Path) -> None:
    source = _rows_file(tmp_path)
    result = _runner().invoke(cli.cli, ["query", str(source), "--indent", "2"])
    assert result.exit_code == 0
    assert json.loads(result.output) == ROWS
    assert "\n  " in result.output


def test_cli_query_renders_grouped_collections(tmp_path: Path) -> None:
    source = _rows_file(tmp_path)
    result = _runner().invoke(cli.cli, ["query", str(source), "--step", "group_by:role", "--step", "keys"])
    assert json.loads(result.output) == ["admin", "user"]
    result = _runner().invoke(cli.cli, ["query", str(source), "--step", "group_by:role"])
    assert json.loads(result.output)["user"][0]["name"] == "bob"


def test_cli_query_scalar_result(tmp_path: Path) -> None:
    source = _rows_file(tmp_path)
    result = _runner().invoke(cli.cli, ["query", str(source), "--step", "avg:age"])
    assert json.loads(result.output) == 30


def test_cli_query_seed_from_environment(tmp_path: Path) -> None:
    source = _rows_file(tmp_path)
    env = {"LIB_ORDERED_COLLECTION_SEED": "7"}
    first = _runner().invoke(cli.cli, ["query", str(source), "--step", "shuffle", "--step", "column:name"], env=env)
    second = _runner().invoke(cli.cli, ["query", str(source), "--step", "shuffle", "--step", "column:name"], env=env)
    assert first.exit_code == 0
    assert first.output == second.output
    assert sorted(json.loads(first.output)) == ["ann", "bob", "cid"]


def test_cli_query_missing_file_is_usage_error(tmp_path: Path) -> None:
    result = _runner().invoke(cli.cli, ["query", str(tmp_path / "absent.json")])
    assert result.exit_code == 2


def test_cli_query_bad_step_fails(tmp_path: Path) -> None:
    source = _rows_file(tmp_path)
    result = _runner().invoke(cli.cli, ["query", str(source), "--step", "explode"])
    assert result.exit_code != 0
    assert "Unknown collection operation" in str(result.exception)


def test_cli_operations_lists_catalog() -> None:
    result = _runner().invoke(cli.cli, ["operations"])
    assert result.exit_code == 0
    names = [entry["name"] for entry in json.loads(result.output)]
    assert names[0] == "all"
    assert "group_by" in names


def test_cli_operations_filters_by_category() -> None:
    result = _runner().invoke(cli.cli, ["operations", "--category", "MUTATION", "--category", "reduction"])
    categories = {entry["category"] for entry in json.loads(result.output)}
    assert categories == {"mutation", "reduction"}


def test_cli_info_runs() -> None:
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "Info for" in result.output or "metadata unavailable" in result.output


def test_cli_info_handles_missing_metadata(monkeypatch: pytest.MonkeyPatch) -> None:
    """`cli info` must degrade gracefully when package metadata is unavailable."""

    def _raise_pkg_not_found(*_args, **_kwargs):
        raise cli.metadata.PackageNotFoundError()

    monkeypatch.setattr(cli.metadata, "metadata", _raise_pkg_not_found)
    result = _runner().invoke(cli.cli, ["info"])
    assert result.exit_code == 0
    assert "metadata unavailable" in result.output


def test_cli_version_option() -> None:
    result = _runner().invoke(cli.cli, ["--version"])
    assert result.exit_code == 0
    assert "lib_ordered_collection version" in result.output


def test_main_restores_traceback_flag(tmp_path: Path) -> None:
    source = _rows_file(tmp_path)
    previous = lib_cli_exit_tools.config.traceback
    exit_code = cli.main(["--traceback", "query", str(source), "--step", "count"])
    assert exit_code == 0
    assert lib_cli_exit_tools.config.traceback == previous


def test_main_reports_failures_with_nonzero_exit(tmp_path: Path) -> None:
    source = _rows_file(tmp_path)
    exit_code = cli.main(["query", str(source), "--step", "count", "--step", "all"])
    assert exit_code != 0
