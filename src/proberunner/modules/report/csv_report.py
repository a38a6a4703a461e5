"""CSV report rendering."""

import csv
import io
from collections.abc import Sequence

from proberunner.modules.catalogue import Catalogue, default_catalogue
from proberunner.modules.probe import ProbeResult

from .grouping import category_status
from .models import RunSummary

CSV_HEADER = ["Technique", "Status", "Tests Run", "Success", "Failed", "Description"]


def to_csv(
    summary: RunSummary,
    results: Sequence[ProbeResult],
    include_summary: bool = False,
    catalogue: Catalogue | None = None,
) -> str:
    """Render one row per technique category.

    Fields holding commas, quotes or newlines are quoted per RFC 4180.
    ``results`` is accepted for symmetry with ``to_json``; rows are derived
    from the summary.
    """
    if catalogue is None:
        catalogue = default_catalogue()
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADER)

    for entry in summary.categories:
        if catalogue.has(entry.category):
            category = catalogue.get(entry.category)
            name, description = category.name, category.description
        else:
            name, description = entry.category, ""
        writer.writerow(
            [
                name,
                category_status(entry),
                entry.total,
                entry.success,
                entry.failed,
                description,
            ]
        )

    if include_summary:
        writer.writerow([])
        writer.writerow(["Summary"])
        writer.writerow(["Total Tests:", summary.total])
        writer.writerow(["Successful:", summary.success])
        writer.writerow(["Partial:", summary.partial])
        writer.writerow(["Failed:", summary.failed])
        writer.writerow(["Success Rate:", f"{summary.success_rate}%"])
        writer.writerow(["Results Recorded:", len(results)])

    return buffer.getvalue()
