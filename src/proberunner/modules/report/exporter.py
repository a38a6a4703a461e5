"""Write serialized reports to disk."""

import logging
import re
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from proberunner.errors import ExportError
from proberunner.modules.probe import ProbeResult

from .csv_report import to_csv
from .json_report import to_json
from .models import RunSummary

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv")


def _host_slug(target: str | None) -> str:
    try:
        host = urlsplit(target or "").hostname
    except ValueError:
        host = None
    if not host:
        return "unknown"
    return re.sub(r"[^a-zA-Z0-9_-]+", "_", host)


def export_filename(target: str | None, fmt: str, when: datetime | None = None) -> str:
    """Return ``probe-run_<host>_<timestamp>.<fmt>``."""
    when = when or datetime.now(UTC)
    return f"probe-run_{_host_slug(target)}_{when.strftime('%Y-%m-%d_%H-%M-%S')}.{fmt}"


def render(
    fmt: str,
    summary: RunSummary,
    results: Sequence[ProbeResult],
    target: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> bytes:
    """Serialize a run in the requested format."""
    if fmt == "json":
        return to_json(summary, results, metadata=metadata, target=target)
    if fmt == "csv":
        return to_csv(summary, results, include_summary=True).encode("utf-8")
    raise ExportError(f"Unsupported export format: {fmt}")


class ReportExporter:
    """Persists export artifacts under a results directory."""

    def __init__(self, results_dir: Path):
        self.results_dir = results_dir

    def write(self, payload: bytes, filename: str) -> Path:
        """Write ``payload`` as ``filename`` inside the results directory."""
        try:
            self.results_dir.mkdir(parents=True, exist_ok=True)
            path = self.results_dir / filename
            path.write_bytes(payload)
        except OSError as exc:
            raise ExportError(f"Could not write {filename}: {exc}") from exc
        logger.info("Exported report to %s", path)
        return path

    def export(
        self,
        summary: RunSummary,
        results: Sequence[ProbeResult],
        fmt: str = "json",
        target: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Path:
        """Render and persist a report, returning its path."""
        payload = render(fmt, summary, results, target=target, metadata=metadata)
        return self.write(payload, export_filename(target, fmt))
