"""Run orchestration for proberunner."""

from .controller import ExportSink, RunController
from .models import (
    ProgressEvent,
    RunConfiguration,
    RunOutcome,
    RunPhase,
    RunSettings,
    RunSnapshot,
    RunState,
)
from .progress import CollectingSink, ProgressSink, notify

__all__ = [
    "CollectingSink",
    "ExportSink",
    "ProgressEvent",
    "ProgressSink",
    "RunConfiguration",
    "RunController",
    "RunOutcome",
    "RunPhase",
    "RunSettings",
    "RunSnapshot",
    "RunState",
    "notify",
]
