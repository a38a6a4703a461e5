"""Shared CLI app objects and store helpers."""

from dataclasses import fields
from typing import Any

import typer
from rich.console import Console

from proberunner.config import get_db_path, get_db_url, get_run_defaults, get_verbose
from proberunner.errors import InvalidSettingsError
from proberunner.modules.run import RunSettings

app = typer.Typer(
    name="proberunner",
    help="Categorized HTTP access-control probe runner",
    no_args_is_help=True,
)
console = Console()

SETTING_FIELDS = {f.name for f in fields(RunSettings)}


def fail(message: str) -> None:
    """Print an error in red and exit with status 1."""
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


def settings_from_config() -> RunSettings:
    """Default run settings from the ``run`` section of config.yml.

    Unknown keys are ignored. ``PROBERUNNER_VERBOSE`` overrides ``verbose_log``.
    """
    values: dict[str, Any] = {
        key: value for key, value in get_run_defaults().items() if key in SETTING_FIELDS
    }
    values["verbose_log"] = get_verbose(bool(values.get("verbose_log", True)))
    try:
        return RunSettings(**values)
    except (InvalidSettingsError, TypeError) as e:
        console.print(f"[yellow]Ignoring invalid run defaults in config.yml: {e}[/yellow]")
        return RunSettings(verbose_log=values["verbose_log"])


def store_location() -> dict[str, Any]:
    """Keyword arguments that point a store at the configured database."""
    return {"db_path": get_db_path(), "db_url": get_db_url()}
