"""Debug utilities for verbose probe tracing.

Thread-safe debug printing with rich formatting for CLI sessions.
"""

import json
import threading
from typing import Any

from rich.console import Console
from rich.syntax import Syntax

from proberunner.modules.probe import ProbeResult, ProbeStatus

# Thread-local storage for debug state
_debug_state = threading.local()

STATUS_STYLES = {
    ProbeStatus.SUCCESS: "bold green",
    ProbeStatus.PARTIAL: "yellow",
    ProbeStatus.BLOCKED: "dim",
    ProbeStatus.ERROR: "red",
}


def set_debug_enabled(enabled: bool) -> None:
    """Set debug mode for the current thread/session."""
    _debug_state.enabled = enabled


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled for the current thread/session."""
    return getattr(_debug_state, "enabled", False)


def _console() -> Console:
    console = getattr(_debug_state, "console", None)
    if console is None:
        console = Console(stderr=True)
        _debug_state.console = console
    return console


def set_debug_console(console: Console | None) -> None:
    """Route debug output to ``console`` (None restores the default)."""
    _debug_state.console = console


def debug_print(category: str, message: str, **data: Any) -> None:
    """Print debug information if debug mode is enabled.

    Args:
        category: Debug category (probe, run, config)
        message: Main message to display
        **data: Additional key-value pairs to display
    """
    if not is_debug_enabled():
        return
    console = _console()
    console.print(f"[DEBUG:{category}] {message}", style="bold cyan")
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            try:
                json_str = json.dumps(value, indent=2)
                syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)
                console.print(f"  {key}:", style="dim")
                console.print(syntax)
            except (TypeError, ValueError):
                console.print(f"  {key}: {value}", style="dim")
        elif isinstance(value, str) and len(value) > 100:
            console.print(f"  {key}: {value[:100]}... ({len(value)} chars)", style="dim")
        else:
            console.print(f"  {key}: {value}", style="dim")


def debug_probe(result: ProbeResult) -> None:
    """Trace a single probe result in debug mode."""
    if not is_debug_enabled():
        return
    code = result.response_code if result.response_code is not None else "-"
    _console().print(
        f"[{result.status.value.upper():>7}] {result.category}: {result.description} "
        f"({code}, {result.elapsed_ms:.0f}ms)",
        style=STATUS_STYLES.get(result.status, ""),
        markup=False,
        highlight=False,
    )
    if result.error:
        debug_print("probe", "error", Error=result.error)
