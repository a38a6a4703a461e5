"""Technique catalogue CLI commands."""

import typer
from rich.table import Table

from proberunner.errors import UnknownCategoryError

from .deps import cli_module
from .shared import app, console, fail


@app.command()
def categories() -> None:
    """List technique categories and their test counts."""
    catalogue = cli_module().default_catalogue()

    table = Table(title="Technique Categories")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Tests", justify="right")
    table.add_column("Description", style="dim")
    for descriptor in catalogue.list_categories():
        table.add_row(
            descriptor.id, descriptor.name, str(descriptor.count), descriptor.description
        )
    console.print(table)
    console.print(f"[dim]{catalogue.total_for(catalogue.ids())} test cases in total[/dim]")


@app.command()
def tests(
    category: str = typer.Argument(..., help="Category ID (see 'proberunner categories')"),
) -> None:
    """Show the test cases of one category."""
    catalogue = cli_module().default_catalogue()
    try:
        technique = catalogue.get(category)
    except UnknownCategoryError as e:
        fail(str(e))
        return

    table = Table(title=f"{technique.name} ({technique.id})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Description")
    table.add_column("Kind", style="cyan")
    table.add_column("Payload", style="dim")
    for index, test_case in enumerate(technique.tests, start=1):
        table.add_row(
            str(index),
            test_case.description,
            test_case.payload.kind,
            test_case.payload.summary(),
        )
    console.print(table)
