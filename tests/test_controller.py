"""Tests for the run controller."""

import asyncio
import json

import pytest

from proberunner.errors import (
    AlreadyRunningError,
    ConfigurationError,
    InvalidSettingsError,
    InvalidTargetError,
    RunFailedError,
    UnknownCategoryError,
)
from proberunner.modules.catalogue import Catalogue
from proberunner.modules.probe import ProbeStatus, TIMEOUT_MESSAGE
from proberunner.modules.run import (
    CollectingSink,
    RunConfiguration,
    RunController,
    RunPhase,
    RunSettings,
)
from proberunner.tools.http import HTTPResponse

TARGET = "https://app.example.test/api/items/7"


def _config(categories, **settings) -> RunConfiguration:
    return RunConfiguration(TARGET, tuple(categories), RunSettings(**settings))


class GateTransport:
    """Transport that holds every request until the gate opens."""

    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    async def send(self, request, deadline):
        self.entered.set()
        await self.gate.wait()
        return HTTPResponse(request.url, 200, {}, "", 0.0)


class StaggeredTransport:
    """Transport whose earlier requests answer later."""

    def __init__(self, count: int) -> None:
        self.count = count
        self.sent = 0

    async def send(self, request, deadline):
        position = self.sent
        self.sent += 1
        await asyncio.sleep((self.count - position) * 0.002)
        return HTTPResponse(request.url, 200, {}, "", 0.0)


class FirstFastTransport:
    """Transport that answers the first request and holds the rest."""

    def __init__(self) -> None:
        self.gate = asyncio.Event()
        self.sent = 0

    async def send(self, request, deadline):
        self.sent += 1
        if self.sent > 1:
            await self.gate.wait()
        return HTTPResponse(request.url, 200, {}, "", 0.0)


class TestRunSettings:
    """Test settings validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"delay_ms": -1},
            {"timeout_seconds": 0},
            {"timeout_seconds": float("nan")},
            {"concurrency": 0},
            {"retries": -1},
            {"retry_backoff_ms": -5},
        ],
    )
    def test_invalid_settings(self, kwargs):
        with pytest.raises(InvalidSettingsError):
            RunSettings(**kwargs)

    def test_defaults(self):
        settings = RunSettings()
        assert settings.delay_ms == 500
        assert settings.timeout_seconds == 10
        assert settings.concurrency == 5
        assert settings.verbose_log is True
        assert settings.auto_export is False
        assert not settings.pooled

    def test_duplicate_categories_dropped(self):
        config = _config(["header", "parameter", "header"])
        assert config.categories == ("header", "parameter")


class TestRunCompletion:
    """Test complete runs."""

    async def test_all_method_probes_succeed(self, make_transport, recording_sleep):
        transport = make_transport(200)
        controller = RunController(transport, sleep=recording_sleep)

        outcome = await controller.start(_config(["method"]))

        assert outcome.phase == RunPhase.COMPLETED
        assert controller.phase == RunPhase.COMPLETED
        assert outcome.planned == 20
        assert outcome.summary.total == 20
        assert outcome.summary.success == 20
        assert outcome.summary.failed == 0
        assert outcome.summary.success_rate == 100.0
        assert len(outcome.summary.findings) == 20
        assert all(f.severity == "high" for f in outcome.summary.findings)
        assert sum(outcome.summary.counts.values()) == outcome.planned

    async def test_all_probes_time_out(self, hanging_transport, recording_sleep):
        controller = RunController(hanging_transport, sleep=recording_sleep)

        outcome = await controller.start(_config(["auth"], timeout_seconds=0.01))

        assert outcome.phase == RunPhase.COMPLETED
        assert outcome.summary.total == 6
        assert outcome.summary.errors == 6
        assert outcome.summary.findings == ()
        assert all(r.error == TIMEOUT_MESSAGE for r in outcome.results)

    async def test_plan_order(self, make_transport, recording_sleep):
        transport = make_transport(403)
        controller = RunController(transport, sleep=recording_sleep)

        outcome = await controller.start(_config(["header", "parameter"]))

        categories = [r.category for r in outcome.results]
        assert categories == ["header"] * 15 + ["parameter"] * 15
        catalogue = controller.catalogue
        expected = [c.description for c in catalogue.tests_for("header")]
        expected += [c.description for c in catalogue.tests_for("parameter")]
        assert [r.description for r in outcome.results] == expected
        assert [req.test_case.description for req in transport.requests] == expected
        assert [e.category for e in outcome.summary.categories] == ["header", "parameter"]

    async def test_delay_between_probes(self, make_transport, recording_sleep):
        controller = RunController(make_transport(200), sleep=recording_sleep)

        await controller.start(_config(["auth"], delay_ms=500))

        # No delay after the last probe.
        assert recording_sleep.calls == [0.5] * 5

    async def test_zero_delay_never_sleeps(self, make_transport, recording_sleep):
        controller = RunController(make_transport(200), sleep=recording_sleep)
        await controller.start(_config(["auth"], delay_ms=0))
        assert recording_sleep.calls == []

    async def test_progress_events(self, make_transport, recording_sleep):
        sink = CollectingSink()
        controller = RunController(make_transport(200), sink=sink, sleep=recording_sleep)

        await controller.start(_config(["frontend"]))

        events = sink.events
        assert events[0].description == "Starting run"
        assert events[0].completed == 0
        assert events[0].total == 5
        assert events[-1].description == "Run completed"
        probe_events = [e for e in events if e.result is not None]
        assert [e.completed for e in probe_events] == [1, 2, 3, 4, 5]
        assert all(e.total == 5 for e in probe_events)
        assert probe_events[-1].fraction == 1.0

    async def test_sink_failure_is_swallowed(self, make_transport, recording_sleep):
        def broken_sink(event):
            raise RuntimeError("display gone")

        controller = RunController(make_transport(200), sink=broken_sink, sleep=recording_sleep)
        outcome = await controller.start(_config(["auth"]))

        assert outcome.phase == RunPhase.COMPLETED
        assert outcome.summary.total == 6

    async def test_results_only_from_selected_categories(self, make_transport, recording_sleep):
        controller = RunController(make_transport(200), sleep=recording_sleep)
        outcome = await controller.start(_config(["race", "encoding"]))
        assert {r.category for r in outcome.results} == {"race", "encoding"}
        assert outcome.summary.total == 19


class TestRunCancellation:
    """Test cooperative cancellation."""

    async def test_cancel_after_ten(self, make_transport, recording_sleep):
        controller = None

        def sink(event):
            if event.result is not None and event.completed == 10:
                controller.cancel()

        transport = make_transport(200)
        controller = RunController(transport, sink=sink, sleep=recording_sleep)

        outcome = await controller.start(_config(["parameter", "header"]))

        assert outcome.phase == RunPhase.CANCELLED
        assert outcome.cancelled
        assert len(outcome.results) == 10
        assert len(transport.requests) == 10
        assert outcome.planned == 30
        # Nine delays between the ten probes, none after the cancel.
        assert len(recording_sleep.calls) == 9

    async def test_cancel_on_last_probe_completes(self, make_transport, recording_sleep):
        controller = None

        def sink(event):
            if event.result is not None and event.completed == event.total:
                controller.cancel()

        controller = RunController(make_transport(200), sink=sink, sleep=recording_sleep)
        outcome = await controller.start(_config(["auth"]))

        assert outcome.phase == RunPhase.COMPLETED
        assert len(outcome.results) == 6

    def test_cancel_when_idle_is_noop(self, make_transport):
        controller = RunController(make_transport(200))
        controller.cancel()
        assert controller.snapshot().cancel_requested is False


class TestRunGuards:
    """Test configuration errors and concurrent starts."""

    async def test_unknown_category(self, make_transport):
        transport = make_transport(200)
        controller = RunController(transport)
        with pytest.raises(UnknownCategoryError):
            await controller.start(_config(["parameter", "nonsense"]))
        assert transport.requests == []
        assert controller.phase == RunPhase.IDLE

    async def test_empty_selection(self, make_transport):
        controller = RunController(make_transport(200))
        with pytest.raises(ConfigurationError):
            await controller.start(_config([]))

    async def test_invalid_target(self, make_transport):
        controller = RunController(make_transport(200))
        config = RunConfiguration("not-a-url", ("parameter",))
        with pytest.raises(InvalidTargetError):
            await controller.start(config)

    async def test_already_running(self, recording_sleep):
        transport = GateTransport()
        controller = RunController(transport, sleep=recording_sleep)

        task = asyncio.create_task(controller.start(_config(["auth"])))
        await transport.entered.wait()
        assert controller.is_running

        with pytest.raises(AlreadyRunningError):
            await controller.start(_config(["auth"]))
        with pytest.raises(AlreadyRunningError):
            controller.reset()

        transport.gate.set()
        outcome = await task
        assert outcome.phase == RunPhase.COMPLETED

    async def test_failure_outside_probe_path(self, make_transport):
        async def broken_sleep(seconds):
            raise RuntimeError("clock stopped")

        controller = RunController(make_transport(200), sleep=broken_sleep)

        with pytest.raises(RunFailedError) as exc_info:
            await controller.start(_config(["auth"], delay_ms=100))

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        snapshot = controller.snapshot()
        assert snapshot.phase == RunPhase.FAILED
        assert snapshot.error == "clock stopped"
        assert len(snapshot.results) == 1

    async def test_reset_after_run(self, make_transport, recording_sleep):
        controller = RunController(make_transport(200), sleep=recording_sleep)
        await controller.start(_config(["auth"]))
        controller.reset()
        assert controller.phase == RunPhase.IDLE
        assert controller.results == ()

    async def test_controller_is_reusable(self, make_transport, recording_sleep):
        controller = RunController(make_transport(200), sleep=recording_sleep)
        first = await controller.start(_config(["auth"]))
        second = await controller.start(_config(["frontend"]))
        assert first.summary.total == 6
        assert second.summary.total == 5


class TestAutoExport:
    """Test the export hand-off at completion."""

    async def test_export_sink_receives_json(self, make_transport, recording_sleep):
        exported = []

        def export_sink(payload, filename):
            exported.append((payload, filename))
            return f"/reports/{filename}"

        controller = RunController(
            make_transport(200), export_sink=export_sink, sleep=recording_sleep
        )
        outcome = await controller.start(_config(["auth"], auto_export=True))

        assert len(exported) == 1
        payload, filename = exported[0]
        assert filename.startswith("probe-run_app_example_test_")
        assert filename.endswith(".json")
        document = json.loads(payload)
        assert document["summary"]["total"] == 6
        assert document["target"] == TARGET
        assert outcome.export_location == f"/reports/{filename}"
        assert outcome.export_error is None

    async def test_export_failure_keeps_summary(self, make_transport, recording_sleep):
        def export_sink(payload, filename):
            raise OSError("read-only file system")

        controller = RunController(
            make_transport(200), export_sink=export_sink, sleep=recording_sleep
        )
        outcome = await controller.start(_config(["auth"], auto_export=True))

        assert outcome.phase == RunPhase.COMPLETED
        assert outcome.summary.total == 6
        assert outcome.export_error == "read-only file system"
        assert outcome.export_payload is not None

    async def test_no_export_without_flag(self, make_transport, recording_sleep):
        exported = []
        controller = RunController(
            make_transport(200),
            export_sink=lambda payload, name: exported.append(name),
            sleep=recording_sleep,
        )
        outcome = await controller.start(_config(["auth"]))
        assert exported == []
        assert outcome.export_payload is None


class TestPooledRun:
    """Test the opt-in worker pool."""

    async def test_results_in_plan_order(self):
        controller = RunController(StaggeredTransport(15))
        outcome = await controller.start(
            _config(["parameter"], parallel=True, concurrency=4, delay_ms=0)
        )

        expected = [c.description for c in controller.catalogue.tests_for("parameter")]
        assert [r.description for r in outcome.results] == expected
        assert outcome.phase == RunPhase.COMPLETED
        assert all(r.status == ProbeStatus.SUCCESS for r in outcome.results)

    async def test_pooled_progress_counts(self):
        sink = CollectingSink()
        controller = RunController(StaggeredTransport(9), sink=sink)
        await controller.start(_config(["encoding"], parallel=True, concurrency=3, delay_ms=0))

        probe_events = [e for e in sink.events if e.result is not None]
        assert sorted(e.completed for e in probe_events) == list(range(1, 10))

    async def test_pooled_failure_stops_other_workers(self):
        transport = FirstFastTransport()

        async def broken_sleep(seconds):
            raise RuntimeError("clock stopped")

        controller = RunController(transport, sleep=broken_sleep)
        config = _config(["parameter"], parallel=True, concurrency=3, delay_ms=100)

        with pytest.raises(RunFailedError) as exc_info:
            await controller.start(config)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert controller.phase == RunPhase.FAILED
        assert controller.snapshot().error == "clock stopped"

        # Releasing held requests must not add results to the failed run.
        transport.gate.set()
        for _ in range(5):
            await asyncio.sleep(0)
        snapshot = controller.snapshot()
        assert snapshot.completed == 1
        assert len(snapshot.results) == 1

    async def test_pooled_cancel_keeps_plan_prefix(self, make_transport):
        controller = None

        def sink(event):
            if event.result is not None and event.completed == 4:
                controller.cancel()

        controller = RunController(make_transport(200), sink=sink)
        outcome = await controller.start(
            _config(["parameter"], parallel=True, concurrency=2, delay_ms=0)
        )

        assert outcome.phase == RunPhase.CANCELLED
        assert 4 <= len(outcome.results) < outcome.planned
        expected = [c.description for c in controller.catalogue.tests_for("parameter")]
        assert [r.description for r in outcome.results] == expected[: len(outcome.results)]

    async def test_empty_catalogue_is_not_replaced(self, make_transport):
        controller = RunController(make_transport(200), catalogue=Catalogue([]))
        assert controller.catalogue.ids() == []
        with pytest.raises(UnknownCategoryError):
            await controller.start(_config(["auth"]))
