"""JSON report rendering."""

import json
import platform
import sys
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from proberunner import get_version
from proberunner.errors import ExportError
from proberunner.modules.catalogue import Catalogue, default_catalogue
from proberunner.modules.probe import ProbeResult

from .grouping import category_status
from .models import RunSummary
from .summary import summary_metrics

REPORT_VERSION = "1.0.0"


def environment_metadata() -> dict[str, str]:
    """Describe the machine that produced a report."""
    return {
        "tool": "proberunner",
        "tool_version": get_version(),
        "python": platform.python_version(),
        "platform": platform.platform(),
        "executable": sys.executable,
    }


def _display_name(catalogue: Catalogue, category_id: str) -> str:
    if catalogue.has(category_id):
        return catalogue.get(category_id).name
    return category_id


def build_json_document(
    summary: RunSummary,
    results: Sequence[ProbeResult],
    metadata: dict[str, Any] | None = None,
    target: str | None = None,
    catalogue: Catalogue | None = None,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the serializable export document."""
    if catalogue is None:
        catalogue = default_catalogue()
    exported_at = exported_at or datetime.now(UTC)

    return {
        "exportedAt": exported_at.isoformat(),
        "version": REPORT_VERSION,
        "target": target,
        "summary": summary_metrics(summary),
        "counts": dict(summary.counts),
        "categories": [
            {
                "id": entry.category,
                "technique": _display_name(catalogue, entry.category),
                "status": category_status(entry),
                "testsRun": entry.total,
                "success": entry.success,
                "partial": entry.partial,
                "failed": entry.failed,
            }
            for entry in summary.categories
        ],
        "techniques": [
            {
                "id": index,
                "technique": _display_name(catalogue, result.category),
                "status": result.status.value,
                "description": result.description,
            }
            for index, result in enumerate(results, start=1)
        ],
        "findings": [finding.to_dict() for finding in summary.findings],
        "results": [result.to_dict() for result in results],
        "metadata": dict(metadata or {}),
        "environment": environment_metadata(),
    }


def to_json(
    summary: RunSummary,
    results: Sequence[ProbeResult],
    metadata: dict[str, Any] | None = None,
    target: str | None = None,
    catalogue: Catalogue | None = None,
) -> bytes:
    """Serialize a run as pretty-printed UTF-8 JSON."""
    document = build_json_document(summary, results, metadata, target, catalogue)
    try:
        return json.dumps(document, indent=2).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise ExportError(f"Could not serialize report: {exc}") from exc
