"""Result aggregation and report export."""

from .csv_report import CSV_HEADER, to_csv
from .exporter import EXPORT_FORMATS, ReportExporter, export_filename, render
from .grouping import category_status, group_by_category
from .json_report import REPORT_VERSION, build_json_document, to_json
from .models import CategorySummary, Finding, RunSummary
from .summary import summarize, summary_metrics

__all__ = [
    "CSV_HEADER",
    "CategorySummary",
    "EXPORT_FORMATS",
    "Finding",
    "REPORT_VERSION",
    "ReportExporter",
    "RunSummary",
    "build_json_document",
    "category_status",
    "export_filename",
    "group_by_category",
    "render",
    "summarize",
    "summary_metrics",
    "to_csv",
    "to_json",
]
