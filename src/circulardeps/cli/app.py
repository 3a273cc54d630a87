"""circulardeps CLI application entry point.

Built with `Typer <https://typer.tiangolo.com/>`_ and
`Rich <https://rich.readthedocs.io/>`_.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from circulardeps.check import CheckOptions, CheckReport, CircularDependencyCheck
from circulardeps.cli.config import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    CircularDepsConfig,
    default_config_toml,
    load_config,
)
from circulardeps.cli.errors import CLIError, ConfigError, error_handler
from circulardeps.cli.logging_setup import setup_logging
from circulardeps.models.module import ModuleManifest

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="circulardeps",
    help="circulardeps – detect circular dependencies in a module graph.",
    add_completion=False,
    no_args_is_help=True,
)

_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Version callback
# ---------------------------------------------------------------------------

def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from circulardeps import __version__

        typer.echo(f"circulardeps {__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Main callback (global options)
# ---------------------------------------------------------------------------

@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) output.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration TOML file.",
    ),
) -> None:
    """Global options for the circulardeps CLI."""
    setup_logging("DEBUG" if verbose else "INFO")
    ctx.obj = {"verbose": verbose, "config_path": config}


# ---------------------------------------------------------------------------
# Init command
# ---------------------------------------------------------------------------

@app.command()
def init(
    path: Optional[Path] = typer.Argument(
        None,
        help="Project directory. Defaults to current directory.",
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
) -> None:
    """Write a default ``.circulardeps/config.toml``."""
    with error_handler(_console):
        project_dir = (path or Path.cwd()).resolve()
        config_file = project_dir / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
        if config_file.exists() and not force:
            raise CLIError(f"Configuration already exists: {config_file}")
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(default_config_toml(), encoding="utf-8")
        _console.print(f"[green]Wrote {config_file}[/green]")


# ---------------------------------------------------------------------------
# Check command
# ---------------------------------------------------------------------------

@app.command()
def check(
    ctx: typer.Context,
    manifest: Path = typer.Argument(
        ..., help="Path to the module manifest (JSON)."
    ),
    exclude: Optional[str] = typer.Option(
        None, "--exclude", "-e", help="Regex of resources not to scan."
    ),
    include: Optional[str] = typer.Option(
        None, "--include", "-i", help="Regex of resources to scan."
    ),
    allow_async_cycles: Optional[bool] = typer.Option(
        None,
        "--allow-async-cycles/--no-allow-async-cycles",
        help="Ignore cycles closed only by weak (asynchronous) imports.",
    ),
    fail_on_error: Optional[bool] = typer.Option(
        None,
        "--fail-on-error/--no-fail-on-error",
        help="Report cycles as errors and exit with status 1.",
    ),
    cwd: Optional[Path] = typer.Option(
        None, "--cwd", help="Directory reported paths are relative to."
    ),
    json_output: bool = typer.Option(
        False, "--json", "-j", help="Print the report as JSON to stdout."
    ),
) -> None:
    """Check a module manifest for circular dependencies.

    Example::

        circulardeps check modules.json --exclude node_modules
        circulardeps check modules.json --fail-on-error --json
    """
    with error_handler(_console):
        state = ctx.obj or {}
        cfg = load_config(config_path=state.get("config_path"))
        if not state.get("verbose"):
            setup_logging(cfg.log_level, cfg.log_file)

        options = _build_options(
            cfg,
            exclude=exclude,
            include=include,
            allow_async_cycles=allow_async_cycles,
            fail_on_error=fail_on_error,
            cwd=cwd,
        )
        modules = _read_manifest(manifest)
        logger.debug("Loaded %d modules from %s", modules.module_count, manifest)

        report = CircularDependencyCheck(options).run(modules.modules)

        if json_output:
            typer.echo(json.dumps(report.to_dict(), indent=2))
        else:
            _print_report(report)

        if report.errors:
            raise CLIError(
                f"{len(report.errors)} circular dependencies detected"
            )


def _compile(pattern: Optional[str], option: str) -> Optional[re.Pattern[str]]:
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"Invalid {option} pattern {pattern!r}: {exc}") from exc


def _build_options(
    cfg: CircularDepsConfig,
    *,
    exclude: Optional[str],
    include: Optional[str],
    allow_async_cycles: Optional[bool],
    fail_on_error: Optional[bool],
    cwd: Optional[Path],
) -> CheckOptions:
    """Merge command-line flags over the loaded configuration."""
    return CheckOptions(
        exclude=_compile(exclude if exclude is not None else cfg.exclude, "exclude"),
        include=_compile(include if include is not None else cfg.include, "include"),
        allow_async_cycles=(
            cfg.allow_async_cycles if allow_async_cycles is None else allow_async_cycles
        ),
        fail_on_error=cfg.fail_on_error if fail_on_error is None else fail_on_error,
        cwd=cwd or cfg.report_cwd,
    )


def _read_manifest(path: Path) -> ModuleManifest:
    if not path.exists():
        raise ConfigError(f"Manifest not found: {path}")
    try:
        return ModuleManifest.from_json(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid manifest {path}: {exc}") from exc


def _print_report(report: CheckReport) -> None:
    for warning in report.warnings:
        _console.print(f"[yellow]WARNING[/yellow] {escape(warning)}", highlight=False)
    for error in report.errors:
        _console.print(f"[red]ERROR[/red] {escape(str(error))}", highlight=False)
    if not report.has_cycles:
        _console.print(
            f"[green]No circular dependencies in {report.module_count} modules.[/green]"
        )
