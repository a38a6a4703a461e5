"""Target preset CLI command."""

import typer
from rich.table import Table

from proberunner.errors import InvalidURLError

from .deps import cli_module
from .shared import app, console, fail, store_location


@app.command()
def presets(
    action: str = typer.Argument("list", help="Action: list, add, delete"),
    args: list[str] | None = typer.Argument(None, help="add: NAME URL, delete: ID"),
) -> None:
    """Manage saved target URLs."""
    cli = cli_module()
    store = cli.PresetStore(**store_location())
    args = args or []

    try:
        if action == "list":
            rows = store.list()
            if not rows:
                console.print("[dim]No presets saved. Add one with 'proberunner presets add'.[/dim]")
                return
            table = Table(title="Presets")
            table.add_column("ID", justify="right", style="dim")
            table.add_column("Name", style="cyan")
            table.add_column("URL")
            for preset in rows:
                table.add_row(str(preset.id), preset.name, preset.url)
            console.print(table)
            return

        if action == "add":
            if len(args) != 2:
                fail("Usage: proberunner presets add NAME URL")
            name, url = args
            if store.get_by_name(name) is not None:
                fail(f"A preset named '{name}' already exists")
            try:
                preset = store.create(name, url)
            except (InvalidURLError, ValueError) as e:
                fail(str(e))
                return
            if preset is None:
                fail("Could not save preset (see log for details)")
                return
            console.print(f"[green]Saved preset {preset.id}:[/green] {preset.name} -> {preset.url}")
            return

        if action == "delete":
            if len(args) != 1 or not args[0].isdigit():
                fail("Usage: proberunner presets delete ID")
            if not store.delete(int(args[0])):
                fail(f"No preset with id {args[0]}")
            console.print(f"[green]Deleted preset {args[0]}.[/green]")
            return

        fail(f"Unknown action: {action}. Use 'list', 'add', or 'delete'.")
    finally:
        store.close()
