"""Run controller: drives the probe executor over a technique selection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from proberunner.errors import AlreadyRunningError, RunFailedError
from proberunner.modules.catalogue import Catalogue, TestCase, default_catalogue
from proberunner.modules.probe import ProbeExecutor, ProbeResult, build_request
from proberunner.modules.report import RunSummary, export_filename, summarize, to_json
from proberunner.utils.debug import debug_probe

from .models import (
    ProgressEvent,
    RunConfiguration,
    RunOutcome,
    RunPhase,
    RunSettings,
    RunSnapshot,
    RunState,
)
from .progress import ProgressSink, notify

if TYPE_CHECKING:
    from proberunner.tools.http import HTTPTransport

logger = logging.getLogger(__name__)

ExportSink = Callable[[bytes, str], Any]


class RunController:
    """Owns one RunState and executes at most one run at a time.

    Phases move ``idle -> running -> completed | cancelled | failed``.
    Probes run strictly in plan order (selected categories in the order
    given, test cases in catalogue order) unless the settings opt into the
    pooled mode.
    """

    def __init__(
        self,
        client: HTTPTransport,
        catalogue: Catalogue | None = None,
        settings: RunSettings | None = None,
        sink: ProgressSink | None = None,
        export_sink: ExportSink | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.catalogue = default_catalogue() if catalogue is None else catalogue
        self.settings = settings or RunSettings()
        self.sink = sink
        self.export_sink = export_sink
        self._sleep = sleep
        self._state = RunState()

    @property
    def phase(self) -> RunPhase:
        return self._state.phase

    @property
    def is_running(self) -> bool:
        return self._state.phase == RunPhase.RUNNING

    @property
    def results(self) -> tuple[ProbeResult, ...]:
        return tuple(self._state.results)

    def snapshot(self) -> RunSnapshot:
        state = self._state
        return RunSnapshot(
            phase=state.phase,
            completed=state.completed,
            total=state.total,
            results=tuple(state.results),
            cancel_requested=state.cancel_requested,
            target=state.configuration.target if state.configuration else None,
            error=state.error,
        )

    def summary(self) -> RunSummary:
        """Summarize whatever results the current state holds."""
        return summarize(self._state.results)

    def cancel(self) -> None:
        """Ask the running loop to stop after the in-flight probe."""
        if self._state.phase == RunPhase.RUNNING:
            logger.info("Cancellation requested")
            self._state.cancel_requested = True

    def reset(self) -> None:
        """Discard the previous run's state."""
        if self.is_running:
            raise AlreadyRunningError("Cannot reset while a run is in progress")
        self._state = RunState()

    def plan(self, configuration: RunConfiguration) -> list[TestCase]:
        """Return the ordered test cases a configuration will execute."""
        return [
            test_case
            for category_id in configuration.categories
            for test_case in self.catalogue.tests_for(category_id)
        ]

    async def start(self, configuration: RunConfiguration) -> RunOutcome:
        """Execute a run and return its outcome.

        Raises:
            AlreadyRunningError: another run owns this controller.
            ConfigurationError: the configuration is invalid.
            RunFailedError: the loop failed outside the probe path.
        """
        if self.is_running:
            raise AlreadyRunningError("A run is already in progress")
        configuration.validate(self.catalogue)

        settings = configuration.settings
        total = self.catalogue.total_for(configuration.categories)
        self._state = RunState(
            configuration=configuration,
            total=total,
            phase=RunPhase.RUNNING,
        )
        logger.info(
            "Starting run against %s: %d probes across %s",
            configuration.target,
            total,
            ", ".join(configuration.categories),
        )

        executor = ProbeExecutor(
            self.client,
            retries=settings.retries,
            retry_backoff_ms=settings.retry_backoff_ms,
            sleep=self._sleep,
        )

        try:
            notify(self.sink, ProgressEvent(0, total, "Starting run"))
            if settings.pooled:
                await self._run_pooled(configuration, executor)
            else:
                await self._run_sequential(configuration, executor)
        except asyncio.CancelledError:
            self._state.phase = RunPhase.CANCELLED
            logger.info("Run task cancelled after %d probes", self._state.completed)
            raise
        except Exception as exc:
            self._state.phase = RunPhase.FAILED
            self._state.error = str(exc) or exc.__class__.__name__
            logger.error("Run failed after %d probes: %s", self._state.completed, exc)
            raise RunFailedError(f"Run failed: {self._state.error}") from exc

        return self._finish(configuration)

    async def _run_sequential(
        self, configuration: RunConfiguration, executor: ProbeExecutor
    ) -> None:
        plan = self.plan(configuration)
        settings = configuration.settings
        for index, test_case in enumerate(plan):
            if self._state.cancel_requested:
                break
            result = await self._probe(configuration, executor, test_case)
            self._record(result)
            is_last = index == len(plan) - 1
            if settings.delay_ms and not is_last and not self._state.cancel_requested:
                await self._sleep(settings.delay_ms / 1000.0)

    async def _run_pooled(self, configuration: RunConfiguration, executor: ProbeExecutor) -> None:
        plan = self.plan(configuration)
        settings = configuration.settings
        pending: dict[int, ProbeResult] = {}
        next_index = 0
        work: Iterator[tuple[int, TestCase]] = iter(enumerate(plan))

        def flush() -> None:
            nonlocal next_index
            while next_index in pending:
                self._state.results.append(pending.pop(next_index))
                next_index += 1

        async def worker() -> None:
            for index, test_case in work:
                if self._state.cancel_requested:
                    return
                result = await self._probe(configuration, executor, test_case)
                pending[index] = result
                self._state.completed += 1
                flush()
                self._after_probe(result)
                if settings.delay_ms and index < len(plan) - 1:
                    await self._sleep(settings.delay_ms / 1000.0)

        workers = min(settings.concurrency, len(plan)) or 1
        # A failing worker cancels its siblings before the run is marked failed.
        try:
            async with asyncio.TaskGroup() as group:
                for _ in range(workers):
                    group.create_task(worker())
        except ExceptionGroup as errors:
            raise errors.exceptions[0]
        for index in sorted(pending):
            self._state.results.append(pending.pop(index))

    async def _probe(
        self,
        configuration: RunConfiguration,
        executor: ProbeExecutor,
        test_case: TestCase,
    ) -> ProbeResult:
        request = build_request(configuration.target, test_case)
        return await executor.execute(request, configuration.settings.timeout_seconds)

    def _record(self, result: ProbeResult) -> None:
        self._state.results.append(result)
        self._state.completed += 1
        self._after_probe(result)

    def _after_probe(self, result: ProbeResult) -> None:
        state = self._state
        logger.debug(
            "[%d/%d] %s -> %s", state.completed, state.total, result.description, result.status
        )
        if state.configuration and state.configuration.settings.verbose_log:
            debug_probe(result)
        notify(self.sink, ProgressEvent(state.completed, state.total, result.description, result))

    def _finish(self, configuration: RunConfiguration) -> RunOutcome:
        state = self._state
        results = tuple(state.results)
        summary = summarize(results)

        if state.cancel_requested and state.completed < state.total:
            state.phase = RunPhase.CANCELLED
            logger.info("Run cancelled after %d of %d probes", state.completed, state.total)
            notify(self.sink, ProgressEvent(state.completed, state.total, "Run cancelled"))
            return RunOutcome(
                phase=state.phase,
                configuration=configuration,
                results=results,
                summary=summary,
                planned=state.total,
            )

        state.phase = RunPhase.COMPLETED
        logger.info(
            "Run completed: %d probes, %d findings", summary.total, len(summary.findings)
        )
        notify(self.sink, ProgressEvent(state.completed, state.total, "Run completed"))
        outcome = RunOutcome(
            phase=state.phase,
            configuration=configuration,
            results=results,
            summary=summary,
            planned=state.total,
        )
        if configuration.settings.auto_export:
            outcome = self._auto_export(outcome)
        return outcome

    def _auto_export(self, outcome: RunOutcome) -> RunOutcome:
        target = outcome.configuration.target
        try:
            payload = to_json(
                outcome.summary,
                outcome.results,
                metadata={"categories": list(outcome.configuration.categories)},
                target=target,
                catalogue=self.catalogue,
            )
        except Exception as exc:
            logger.warning("Auto-export failed to serialize results", exc_info=True)
            return replace(outcome, export_error=str(exc))

        if self.export_sink is None:
            return replace(outcome, export_payload=payload)

        try:
            location = self.export_sink(payload, export_filename(target, "json"))
        except Exception as exc:
            logger.warning("Auto-export sink failed", exc_info=True)
            return replace(outcome, export_payload=payload, export_error=str(exc))
        return replace(outcome, export_payload=payload, export_location=location)
