"""Tabular export and run summaries."""

from smval.reporting.summary import build_metrics_summary, build_tca_summary
from smval.reporting.tables import metrics_to_frame, tca_columns, tca_to_frame, write_table

__all__ = [
    "build_metrics_summary",
    "build_tca_summary",
    "metrics_to_frame",
    "tca_columns",
    "tca_to_frame",
    "write_table",
]
