"""Run history and export CLI commands."""

from pathlib import Path

import typer
from rich.table import Table

from proberunner.errors import ExportError
from proberunner.modules.report import EXPORT_FORMATS, summarize

from .deps import cli_module
from .shared import app, console, fail, store_location


@app.command()
def history(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of runs to show"),
) -> None:
    """List recent runs."""
    cli = cli_module()
    store = cli.HistoryStore(**store_location())
    try:
        entries = store.list(limit=limit)
    finally:
        store.close()
    if not entries:
        console.print("[dim]No runs recorded yet. Start one with 'proberunner run'.[/dim]")
        return

    table = Table(title="Run History")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("When")
    table.add_column("Target", style="cyan")
    table.add_column("Phase")
    table.add_column("Probes", justify="right")
    table.add_column("Success", justify="right", style="green")
    table.add_column("Rate", justify="right")
    for entry in entries:
        summary = summarize(entry.results)
        when = entry.created_at.strftime("%Y-%m-%d %H:%M:%S") if entry.created_at else "-"
        table.add_row(
            str(entry.id),
            when,
            entry.target,
            entry.phase,
            f"{len(entry.results)}/{entry.planned}",
            str(summary.success),
            f"{summary.success_rate:.2f}%",
        )
    console.print(table)


@app.command()
def export(
    run_id: int = typer.Argument(..., help="Run ID from 'proberunner history'"),
    fmt: str = typer.Option("json", "--format", "-f", help="json or csv"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Report directory"),
) -> None:
    """Export a recorded run as JSON or CSV."""
    if fmt not in EXPORT_FORMATS:
        fail(f"Unsupported export format: {fmt}. Use 'json' or 'csv'.")
    cli = cli_module()
    store = cli.HistoryStore(**store_location())
    try:
        entry = store.get(run_id)
    finally:
        store.close()
    if entry is None:
        fail(f"No run with id {run_id}")
        return

    exporter = cli.ReportExporter(output or cli.get_results_dir())
    try:
        path = exporter.export(
            summarize(entry.results),
            entry.results,
            fmt=fmt,
            target=entry.target,
            metadata={"runId": entry.id, "categories": list(entry.categories), "phase": entry.phase},
        )
    except ExportError as e:
        fail(str(e))
        return
    console.print(f"[green]Report written:[/green] {path}")
