"""Report assembly: DataPoint set + QcProfile -> FileMeasurementReport.

Every function here is a pure function of its arguments. Files are independent:
batch generation is the single-file logic applied per file, in any order.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from cmm_qc.analysis.aggregate import aggregate_bores
from cmm_qc.analysis.extract import extract_value
from cmm_qc.analysis.validate import validate_value
from cmm_qc.ingest.storage import PointSource, fetch_point_set
from cmm_qc.models.points import DataPoint
from cmm_qc.models.profile import DEFAULT_PROFILE, QcProfile
from cmm_qc.models.results import CheckpointResult, FileMeasurementReport
from cmm_qc.models.rules import BORE_LABELS, COMPOSITE_LABEL, REPORT_LABELS


def compute_checkpoints(
    points: Sequence[DataPoint],
    profile: QcProfile = DEFAULT_PROFILE,
) -> Dict[str, CheckpointResult]:
    """Validated result for each of the internal labels (G1-G4 still separate)."""
    out: Dict[str, CheckpointResult] = {}
    for label, rule in profile.rules.items():
        out[label] = validate_value(extract_value(points, rule), profile.band(label))
    return out


def build_report(
    points: Sequence[DataPoint],
    profile: QcProfile = DEFAULT_PROFILE,
    *,
    file_id: Optional[str] = None,
) -> FileMeasurementReport:
    """Report for one file: labels A..N, G1-G4 collapsed into the composite G."""
    checkpoints = compute_checkpoints(points, profile)
    composite = aggregate_bores(checkpoints, BORE_LABELS)

    results: Dict[str, CheckpointResult] = {}
    for label in REPORT_LABELS:
        results[label] = composite if label == COMPOSITE_LABEL else checkpoints[label]
    return FileMeasurementReport(results=results, file_id=file_id)


def build_reports(
    point_sets: Mapping[str, Sequence[DataPoint]],
    profile: QcProfile = DEFAULT_PROFILE,
) -> Dict[str, FileMeasurementReport]:
    """Independent reports for several files, keyed by file id."""
    return {fid: build_report(pts, profile, file_id=fid) for fid, pts in point_sets.items()}


def report_for_file(
    source: PointSource,
    file_id: str,
    profile: QcProfile = DEFAULT_PROFILE,
) -> FileMeasurementReport:
    """Fetch the file's point set from storage (fresh, no cache) and build its report.

    Fetch failures propagate to the caller.
    """
    points = fetch_point_set(source, file_id)
    return build_report(points, profile, file_id=file_id)
