"""Configuration CLI command."""

import typer
import yaml
from rich.table import Table

from proberunner.errors import InvalidSettingsError

from .deps import cli_module
from .shared import app, console, fail, settings_from_config, store_location

CATEGORY_KEY_PREFIX = "defaultCategorySelection."


@app.command()
def config(
    action: str = typer.Argument("show", help="Action: show, set, reset, init"),
    key: str | None = typer.Argument(None, help="Setting key (for 'set')"),
    value: str | None = typer.Argument(None, help="Setting value (for 'set')"),
) -> None:
    """Show or change stored run settings and the global config file."""
    cli = cli_module()

    if action == "init":
        config_path = cli.create_global_config()
        console.print(f"[green]Global config:[/green] {config_path}")
        return

    catalogue = cli.default_catalogue()
    store = cli.SettingsStore(
        catalogue=catalogue, defaults=settings_from_config(), **store_location()
    )
    try:
        if action == "show":
            stored = store.load()
            table = Table(title="Run Settings")
            table.add_column("Key", style="cyan")
            table.add_column("Value")
            record = stored.to_record()
            selection = record.pop("defaultCategorySelection")
            for name, setting in record.items():
                table.add_row(name, str(setting))
            for category_id, enabled in selection.items():
                table.add_row(f"{CATEGORY_KEY_PREFIX}{category_id}", str(enabled))
            console.print(table)

            global_config = cli.load_global_config()
            if global_config:
                console.print("[bold]Global Configuration (~/.proberunner/config.yml):[/bold]")
                console.print(yaml.dump(global_config, default_flow_style=False))
            return

        if action == "set":
            if key is None or value is None:
                fail("Usage: proberunner config set KEY VALUE")
            stored = store.load()
            try:
                if key.startswith(CATEGORY_KEY_PREFIX):
                    category_id = key[len(CATEGORY_KEY_PREFIX) :]
                    if not catalogue.has(category_id):
                        fail(f"Unknown technique category: {category_id}")
                    enabled = value.strip().lower() in {"1", "true", "yes", "on"}
                    stored = stored.with_category(category_id, enabled)
                else:
                    stored = stored.with_value(key, value)
            except InvalidSettingsError as e:
                fail(str(e))
                return
            if not store.save(stored):
                fail("Could not save settings (see log for details)")
            console.print(f"[green]Set {key} = {value}[/green]")
            return

        if action == "reset":
            store.reset()
            console.print("[green]Settings reset to defaults.[/green]")
            return

        fail(f"Unknown action: {action}. Use 'show', 'set', 'reset', or 'init'.")
    finally:
        store.close()
