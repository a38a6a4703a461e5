"""Result aggregation."""

from collections.abc import Sequence
from typing import Any

from proberunner.modules.probe import ProbeResult

from .models import SEVERITY_BY_STATUS, CategorySummary, Finding, RunSummary, zero_counts


def summarize(results: Sequence[ProbeResult]) -> RunSummary:
    """Aggregate results into counts per status and per category.

    Categories keep the order in which they first appear. Findings are the
    success and partial results in input order.
    """
    counts = zero_counts()
    per_category: dict[str, dict[str, int]] = {}
    findings: list[Finding] = []

    for result in results:
        status = result.status.value
        counts[status] += 1
        per_category.setdefault(result.category, zero_counts())[status] += 1
        severity = SEVERITY_BY_STATUS.get(result.status)
        if severity:
            findings.append(Finding(result=result, severity=severity))

    categories = tuple(
        CategorySummary(category=category, total=sum(scoped.values()), counts=scoped)
        for category, scoped in per_category.items()
    )
    return RunSummary(
        total=len(results),
        counts=counts,
        categories=categories,
        findings=tuple(findings),
    )


def summary_metrics(summary: RunSummary) -> dict[str, Any]:
    """Named metrics used by exports and the CLI."""
    return {
        "total": summary.total,
        "success": summary.success,
        "partial": summary.partial,
        "failed": summary.failed,
        "successRate": summary.success_rate,
    }
