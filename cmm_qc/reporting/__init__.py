"""Reporting utilities.

Non-interactive tooling for consumers of QC reports: pandas tables, the
source-value highlight map, CSV/JSON export and a command line summary.
Rendering (HTML/PDF) is left to the caller.
"""

from .summary import (
    HighlightSpec,
    export_summary,
    highlight_mapping,
    points_to_frame,
    reports_to_frame,
)

__all__ = [
    "HighlightSpec",
    "export_summary",
    "highlight_mapping",
    "points_to_frame",
    "reports_to_frame",
]
