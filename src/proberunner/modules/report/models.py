"""Report data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from proberunner.modules.probe import ProbeResult, ProbeStatus

SEVERITY_BY_STATUS = {
    ProbeStatus.SUCCESS: "high",
    ProbeStatus.PARTIAL: "medium",
}


def zero_counts() -> dict[str, int]:
    return {status.value: 0 for status in ProbeStatus}


@dataclass(frozen=True, slots=True)
class Finding:
    """A result flagged as a potential weakness."""

    result: ProbeResult
    severity: str  # high | medium

    def to_dict(self) -> dict[str, Any]:
        return {"severity": self.severity, **self.result.to_dict()}


@dataclass(frozen=True, slots=True)
class CategorySummary:
    """Counts for one technique category."""

    category: str
    total: int
    counts: dict[str, int] = field(default_factory=zero_counts)

    @property
    def success(self) -> int:
        return self.counts[ProbeStatus.SUCCESS.value]

    @property
    def partial(self) -> int:
        return self.counts[ProbeStatus.PARTIAL.value]

    @property
    def failed(self) -> int:
        return self.counts[ProbeStatus.BLOCKED.value] + self.counts[ProbeStatus.ERROR.value]

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "total": self.total, "counts": dict(self.counts)}


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Pure projection of a result sequence."""

    total: int
    counts: dict[str, int]
    categories: tuple[CategorySummary, ...]
    findings: tuple[Finding, ...]

    @property
    def success(self) -> int:
        return self.counts[ProbeStatus.SUCCESS.value]

    @property
    def partial(self) -> int:
        return self.counts[ProbeStatus.PARTIAL.value]

    @property
    def blocked(self) -> int:
        return self.counts[ProbeStatus.BLOCKED.value]

    @property
    def errors(self) -> int:
        return self.counts[ProbeStatus.ERROR.value]

    @property
    def failed(self) -> int:
        return self.blocked + self.errors

    @property
    def success_rate(self) -> float:
        if not self.total:
            return 0.0
        return round(self.success / self.total * 100, 2)

    def category(self, category_id: str) -> CategorySummary | None:
        for entry in self.categories:
            if entry.category == category_id:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "counts": dict(self.counts),
            "categories": [entry.to_dict() for entry in self.categories],
            "findings": [finding.to_dict() for finding in self.findings],
        }
