"""CLI adapter for ``lib_ordered_collection`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose collection pipelines over JSON/TOML/YAML files and the operation
catalog on the command line, so data can be inspected without writing Python.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_operations` – prints the operation catalog as JSON.
* :func:`cli_query` – loads a file, runs ``--step`` operations, prints JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root
(:func:`lib_ordered_collection.core.query`) and the catalog, never the
adapters directly. ``lib_cli_exit_tools`` centralises the exit code strategy.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .application.catalog import MUTATION, QUERY, REDUCTION, TRANSFORM, describe_operations
from .core import query
from .domain.capabilities import ToPlainStructure

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

CATEGORY_CHOICES: Final[tuple[str, ...]] = (QUERY, TRANSFORM, MUTATION, REDUCTION)
SEED_ENVVAR: Final[str] = "LIB_ORDERED_COLLECTION_SEED"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is missing."""

    try:
        return metadata.version("lib_ordered_collection")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Fluent ordered collections over JSON, TOML and YAML data",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_ordered_collection",
    message="lib_ordered_collection version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_ordered_collection")
    except metadata.PackageNotFoundError:
        click.echo("lib_ordered_collection (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_ordered_collection')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.11')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("operations", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--category",
    "categories",
    multiple=True,
    type=click.Choice(CATEGORY_CHOICES, case_sensitive=False),
    help="Only list operations of this category (repeatable)",
)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_operations(categories: Sequence[str], indent: Optional[int]) -> None:
    """Print the public collection operations with their one-line summaries.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["operations", "--category", "mutation"])
    >>> json.loads(result.output)[0]["name"]
    'put'
    """

    wanted = {category.lower() for category in categories}
    entries = [entry for entry in describe_operations() if not wanted or entry["category"] in wanted]
    click.echo(json.dumps(entries, indent=indent))


@cli.command("query", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument(
    "source",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
)
@click.option(
    "--step",
    "steps",
    multiple=True,
    help="Operation to apply, e.g. 'sort_by:age' or 'where:[\"role\",\"admin\"]' (repeatable, applied in order)",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    envvar=SEED_ENVVAR,
    show_envvar=True,
    help="Seed for random and shuffle steps",
)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_query(source: Path, steps: Sequence[str], seed: Optional[int], indent: Optional[int]) -> None:
    """Load SOURCE (JSON, TOML or YAML), apply every --step and print the result as JSON."""

    result = query(str(source), steps, seed=seed)
    click.echo(_render(result, indent))


def _render(result: Any, indent: Optional[int]) -> str:
    """Serialise a pipeline result, converting nested collections."""

    return json.dumps(result, indent=indent, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def _json_default(obj: Any) -> Any:
    """Convert values implementing ``to_plain`` for :func:`json.dumps`."""

    if isinstance(obj, ToPlainStructure):
        return obj.to_plain()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_ordered_collection",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
