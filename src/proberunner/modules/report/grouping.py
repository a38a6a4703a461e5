"""Helpers for grouping results by technique."""

from collections.abc import Sequence

from proberunner.modules.probe import STATUS_ORDER, ProbeResult

from .models import CategorySummary


def category_status(entry: CategorySummary) -> str:
    """Return the highest-ranked status present in a category."""
    for status in STATUS_ORDER:
        if entry.counts.get(status.value, 0):
            return status.value
    return "n/a"


def group_by_category(results: Sequence[ProbeResult]) -> dict[str, list[ProbeResult]]:
    """Group results by category, keeping first-seen order."""
    grouped: dict[str, list[ProbeResult]] = {}
    for result in results:
        grouped.setdefault(result.category, []).append(result)
    return grouped
