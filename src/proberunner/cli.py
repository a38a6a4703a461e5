"""proberunner CLI - categorized HTTP access-control probes."""

import typer

from proberunner.cli_commands.shared import app, console
from proberunner.config import (
    create_global_config,
    get_follow_redirects,
    get_history_limit,
    get_results_dir,
    get_user_agent,
    get_verify_ssl,
    load_global_config,
)
from proberunner.modules.catalogue import default_catalogue
from proberunner.modules.report import ReportExporter
from proberunner.modules.run import RunController
from proberunner.modules.storage import HistoryStore, PresetStore, SettingsStore
from proberunner.tools.http import HTTPClient
from proberunner.utils.debug import set_debug_enabled
from proberunner.utils.logging_setup import setup_logging

# Command registration (import for side effects)
from proberunner.cli_commands import (  # noqa: F401
    catalogue_command,
    config_command,
    history_command,
    preset_command,
    run_command,
)

__all__ = [
    "HTTPClient",
    "HistoryStore",
    "PresetStore",
    "ReportExporter",
    "RunController",
    "SettingsStore",
    "app",
    "console",
    "create_global_config",
    "default_catalogue",
    "get_follow_redirects",
    "get_history_limit",
    "get_results_dir",
    "get_user_agent",
    "get_verify_ssl",
    "load_global_config",
    "main",
]


@app.callback()
def root(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Categorized HTTP access-control probe runner."""
    setup_logging(debug)
    if debug:
        set_debug_enabled(True)


@app.command()
def version() -> None:
    """Show the installed proberunner version."""
    from proberunner import get_version

    console.print(f"proberunner {get_version()}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
