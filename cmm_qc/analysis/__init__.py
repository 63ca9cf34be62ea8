"""Checkpoint analysis package.

Design principle:
  - Ingest produces immutable :class:`~cmm_qc.models.points.DataPoint` tuples.
  - Analysis consumes them together with an explicit
    :class:`~cmm_qc.models.profile.QcProfile` and produces reports.

A missing measurement is a first-class outcome: it flows through as ``None``,
is displayed as ``"-"`` and is always reported valid.
"""

from .aggregate import aggregate_bores
from .extract import extract_value, find_point, lookup_value
from .report import build_report, build_reports, compute_checkpoints, report_for_file
from .validate import format_value, is_within, validate_value

__all__ = [
    "aggregate_bores",
    "extract_value",
    "find_point",
    "lookup_value",
    "build_report",
    "build_reports",
    "compute_checkpoints",
    "report_for_file",
    "format_value",
    "is_within",
    "validate_value",
]
