"""Run configuration, state and event models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from proberunner.errors import ConfigurationError, InvalidSettingsError
from proberunner.modules.catalogue import Catalogue
from proberunner.modules.probe import ProbeResult, validate_target
from proberunner.modules.report import RunSummary


class RunPhase(str, Enum):
    """Lifecycle of a run controller."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RunSettings:
    """Per-run tuning knobs."""

    delay_ms: int = 500
    timeout_seconds: float = 10.0
    concurrency: int = 5
    verbose_log: bool = True
    auto_export: bool = False
    retries: int = 0
    retry_backoff_ms: int = 250
    parallel: bool = False

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise InvalidSettingsError("delay_ms must be >= 0")
        if not self.timeout_seconds > 0:
            raise InvalidSettingsError("timeout_seconds must be > 0")
        if self.concurrency < 1:
            raise InvalidSettingsError("concurrency must be >= 1")
        if self.retries < 0:
            raise InvalidSettingsError("retries must be >= 0")
        if self.retry_backoff_ms < 0:
            raise InvalidSettingsError("retry_backoff_ms must be >= 0")

    @property
    def pooled(self) -> bool:
        return self.parallel and self.concurrency > 1


@dataclass(frozen=True, slots=True)
class RunConfiguration:
    """Everything a single run needs. Immutable for the run's lifetime."""

    target: str
    categories: tuple[str, ...]
    settings: RunSettings = field(default_factory=RunSettings)

    def __post_init__(self) -> None:
        # Keep caller order, drop repeats.
        object.__setattr__(self, "categories", tuple(dict.fromkeys(self.categories)))

    def validate(self, catalogue: Catalogue) -> None:
        """Reject the configuration before any probe executes."""
        validate_target(self.target)
        if not self.categories:
            raise ConfigurationError("Select at least one technique category")
        for category_id in self.categories:
            catalogue.get(category_id)


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Progress notification sent to the sink after each probe."""

    completed: int
    total: int
    description: str
    result: ProbeResult | None = None

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 1.0


@dataclass
class RunState:
    """Mutable state owned by exactly one controller."""

    configuration: RunConfiguration | None = None
    results: list[ProbeResult] = field(default_factory=list)
    completed: int = 0
    total: int = 0
    cancel_requested: bool = False
    phase: RunPhase = RunPhase.IDLE
    error: str | None = None


@dataclass(frozen=True, slots=True)
class RunSnapshot:
    """Read-only copy of a run's state."""

    phase: RunPhase
    completed: int
    total: int
    results: tuple[ProbeResult, ...]
    cancel_requested: bool
    target: str | None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """What ``RunController.start`` returns once the loop stops."""

    phase: RunPhase
    configuration: RunConfiguration
    results: tuple[ProbeResult, ...]
    summary: RunSummary
    planned: int
    export_payload: bytes | None = None
    export_location: Any = None
    export_error: str | None = None

    @property
    def cancelled(self) -> bool:
        return self.phase == RunPhase.CANCELLED
