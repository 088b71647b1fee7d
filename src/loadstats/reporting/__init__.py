"""Report building and rendering."""

from loadstats.reporting.report import RequestReport, build_report, percentile_label, render_table

__all__ = [
    "RequestReport",
    "build_report",
    "percentile_label",
    "render_table",
]
