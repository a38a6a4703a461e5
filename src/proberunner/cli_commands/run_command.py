"""Run CLI command: execute probes against one target."""

import asyncio
import signal
from dataclasses import replace
from pathlib import Path

import typer
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from proberunner.errors import ConfigurationError, ExportError, RunFailedError
from proberunner.modules.report import EXPORT_FORMATS, RunSummary, category_status
from proberunner.modules.run import ProgressEvent, RunConfiguration, RunOutcome
from proberunner.tools.http.client import DEFAULT_USER_AGENT
from proberunner.utils.debug import is_debug_enabled, set_debug_console, set_debug_enabled

from .deps import cli_module
from .shared import app, console, fail, settings_from_config, store_location

STATUS_STYLES = {
    "success": "bold green",
    "partial": "yellow",
    "blocked": "dim",
    "error": "red",
    "n/a": "dim",
}


class RichProgressSink:
    """Progress sink that drives a Rich progress bar."""

    def __init__(self, progress: Progress):
        self.progress = progress
        self.task_id = progress.add_task("Starting run", total=None)

    def __call__(self, event: ProgressEvent) -> None:
        self.progress.update(
            self.task_id,
            completed=event.completed,
            total=event.total or None,
            description=event.description[:60],
        )


def _render_summary(summary: RunSummary, catalogue) -> None:
    table = Table(title="Results by Technique")
    table.add_column("Technique", style="cyan")
    table.add_column("Status")
    table.add_column("Tests", justify="right")
    table.add_column("Success", justify="right", style="green")
    table.add_column("Partial", justify="right", style="yellow")
    table.add_column("Failed", justify="right", style="dim")
    for entry in summary.categories:
        status = category_status(entry)
        name = catalogue.get(entry.category).name if catalogue.has(entry.category) else entry.category
        table.add_row(
            name,
            f"[{STATUS_STYLES.get(status, '')}]{status}[/]",
            str(entry.total),
            str(entry.success),
            str(entry.partial),
            str(entry.failed),
        )
    console.print(table)
    console.print(
        f"Total: {summary.total}  "
        f"[green]Success: {summary.success}[/green]  "
        f"[yellow]Partial: {summary.partial}[/yellow]  "
        f"Failed: {summary.failed}  "
        f"Success rate: {summary.success_rate:.2f}%"
    )

    if summary.findings:
        findings = Table(title="Findings")
        findings.add_column("Severity")
        findings.add_column("Technique", style="cyan")
        findings.add_column("Test")
        findings.add_column("Code", justify="right")
        for finding in summary.findings:
            style = "red" if finding.severity == "high" else "yellow"
            findings.add_row(
                f"[{style}]{finding.severity.upper()}[/{style}]",
                finding.result.category,
                finding.result.description,
                str(finding.result.response_code or "-"),
            )
        console.print(findings)


async def _execute(cli, configuration: RunConfiguration, catalogue, export_sink) -> RunOutcome:
    settings = configuration.settings
    client = cli.HTTPClient(
        timeout=settings.timeout_seconds,
        follow_redirects=cli.get_follow_redirects(),
        verify_ssl=cli.get_verify_ssl(),
        user_agent=cli.get_user_agent(DEFAULT_USER_AGENT),
    )
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        sink = RichProgressSink(progress)
        async with client:
            controller = cli.RunController(
                client,
                catalogue=catalogue,
                settings=settings,
                sink=sink,
                export_sink=export_sink,
            )
            loop = asyncio.get_running_loop()
            try:
                loop.add_signal_handler(signal.SIGINT, controller.cancel)
                handler_installed = True
            except (NotImplementedError, RuntimeError):
                handler_installed = False
            try:
                return await controller.start(configuration)
            finally:
                if handler_installed:
                    loop.remove_signal_handler(signal.SIGINT)


@app.command()
def run(
    target: str | None = typer.Argument(None, help="Target URL"),
    preset: str | None = typer.Option(None, "--preset", "-p", help="Use a saved preset's URL"),
    category: list[str] | None = typer.Option(
        None, "--category", "-c", help="Technique category (repeatable)"
    ),
    delay: int | None = typer.Option(None, "--delay", help="Delay between probes in ms"),
    timeout: float | None = typer.Option(None, "--timeout", help="Per-probe timeout in seconds"),
    retries: int | None = typer.Option(None, "--retries", help="Retries for failed probes"),
    concurrency: int | None = typer.Option(None, "--concurrency", help="Worker count"),
    parallel: bool | None = typer.Option(
        None, "--parallel/--sequential", help="Run probes in a worker pool"
    ),
    verbose: bool | None = typer.Option(None, "--verbose/--quiet", help="Trace every probe"),
    export_format: str | None = typer.Option(None, "--export", help="Write a json or csv report"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Report directory"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the authorization prompt"),
) -> None:
    """Run technique probes against a target you are authorized to test."""
    cli = cli_module()
    catalogue = cli.default_catalogue()

    if export_format is not None and export_format not in EXPORT_FORMATS:
        fail(f"Unsupported export format: {export_format}. Use 'json' or 'csv'.")

    location = store_location()
    if preset:
        preset_store = cli.PresetStore(**location)
        try:
            saved = preset_store.get_by_name(preset)
        finally:
            preset_store.close()
        if saved is None:
            fail(f"No preset named '{preset}'")
        target = saved.url
    if not target:
        fail("Provide a TARGET URL or --preset NAME")

    settings_store = cli.SettingsStore(
        catalogue=catalogue, defaults=settings_from_config(), **location
    )
    try:
        stored = settings_store.load()
    finally:
        settings_store.close()

    overrides = {
        "delay_ms": delay,
        "timeout_seconds": timeout,
        "retries": retries,
        "concurrency": concurrency,
        "parallel": parallel,
        "verbose_log": verbose,
    }
    try:
        settings = replace(
            stored.settings, **{key: value for key, value in overrides.items() if value is not None}
        )
        configuration = RunConfiguration(
            target=target,
            categories=tuple(category or stored.selected_categories(catalogue)),
            settings=settings,
        )
        configuration.validate(catalogue)
    except ConfigurationError as e:
        fail(str(e))
        return

    planned = catalogue.total_for(configuration.categories)
    console.print(
        Panel(
            f"[bold]Target:[/bold] {configuration.target}\n"
            f"[bold]Techniques:[/bold] {', '.join(configuration.categories)}\n"
            f"[bold]Probes:[/bold] {planned}  "
            f"[bold]Delay:[/bold] {settings.delay_ms}ms  "
            f"[bold]Timeout:[/bold] {settings.timeout_seconds}s",
            title="Probe Run",
            border_style="blue",
        )
    )
    if not yes:
        authorized = typer.confirm(
            "Only test systems you own or are explicitly authorized to assess. Continue?",
            default=False,
        )
        if not authorized:
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(1)

    results_dir = output or cli.get_results_dir()
    exporter = cli.ReportExporter(results_dir)
    debug_was_enabled = is_debug_enabled()
    set_debug_console(console)
    set_debug_enabled(debug_was_enabled or settings.verbose_log)

    try:
        outcome = asyncio.run(_execute(cli, configuration, catalogue, exporter.write))
    except RunFailedError as e:
        fail(str(e))
        return
    finally:
        set_debug_enabled(debug_was_enabled)
        set_debug_console(None)

    if outcome.cancelled:
        console.print(
            f"[yellow]Run cancelled after {len(outcome.results)} of {outcome.planned} probes.[/yellow]"
        )
    _render_summary(outcome.summary, catalogue)

    history = cli.HistoryStore(keep=cli.get_history_limit(), **location)
    try:
        run_id = history.save(outcome)
    finally:
        history.close()
    if run_id is not None:
        console.print(f"[dim]Saved as run {run_id}. Export later with 'proberunner export {run_id}'.[/dim]")

    if outcome.export_location is not None:
        console.print(f"[green]Auto-exported:[/green] {outcome.export_location}")
    if outcome.export_error:
        console.print(f"[yellow]Auto-export failed: {outcome.export_error}[/yellow]")

    if export_format:
        try:
            path = exporter.export(
                outcome.summary,
                outcome.results,
                fmt=export_format,
                target=configuration.target,
                metadata={"categories": list(configuration.categories), "phase": outcome.phase.value},
            )
        except ExportError as e:
            fail(str(e))
            return
        console.print(f"[green]Report written:[/green] {path}")
