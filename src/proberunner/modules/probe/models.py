"""Probe request and result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from proberunner.modules.catalogue import TestCase


class ProbeStatus(str, Enum):
    """Outcome classification of a single probe."""

    SUCCESS = "success"
    PARTIAL = "partial"
    BLOCKED = "blocked"
    ERROR = "error"


STATUS_ORDER = [ProbeStatus.SUCCESS, ProbeStatus.PARTIAL, ProbeStatus.BLOCKED, ProbeStatus.ERROR]

TIMEOUT_MESSAGE = "Request timeout"


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class ProbeRequest:
    """A concrete outbound request built for one test case."""

    url: str
    method: str
    headers: dict[str, str]
    body: str
    test_case: TestCase


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of one executed test case. Never mutated after creation."""

    category: str
    description: str
    payload: dict[str, Any]
    status: ProbeStatus
    response_code: int | None = None
    elapsed_ms: float = 0.0
    error: str | None = None
    completed_at: datetime = field(default_factory=_utc_now)
    attempts: int = 1

    @property
    def is_finding(self) -> bool:
        return self.status in (ProbeStatus.SUCCESS, ProbeStatus.PARTIAL)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "description": self.description,
            "payload": dict(self.payload),
            "status": self.status.value,
            "response_code": self.response_code,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "error": self.error,
            "completed_at": self.completed_at.isoformat(),
            "attempts": self.attempts,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProbeResult:
        completed_at = data.get("completed_at")
        return cls(
            category=data["category"],
            description=data["description"],
            payload=dict(data.get("payload") or {}),
            status=ProbeStatus(data["status"]),
            response_code=data.get("response_code"),
            elapsed_ms=float(data.get("elapsed_ms") or 0.0),
            error=data.get("error"),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else _utc_now(),
            attempts=int(data.get("attempts") or 1),
        )
