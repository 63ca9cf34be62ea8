from .points import DataPoint, MeasurementFile
from .profile import DEFAULT_PROFILE, QcProfile, ToleranceBand, default_profile, load_profile
from .results import CheckpointResult, FileMeasurementReport
from .rules import (
    BORE_LABELS,
    CHECKPOINT_LABELS,
    COMPOSITE_LABEL,
    REPORT_LABELS,
    Average,
    CheckpointRule,
    DirectLookup,
    FieldRef,
    Manual,
    Visual,
)

__all__ = [
    "DataPoint",
    "MeasurementFile",
    "QcProfile",
    "ToleranceBand",
    "DEFAULT_PROFILE",
    "default_profile",
    "load_profile",
    "CheckpointResult",
    "FileMeasurementReport",
    "CheckpointRule",
    "DirectLookup",
    "Average",
    "Manual",
    "Visual",
    "FieldRef",
    "CHECKPOINT_LABELS",
    "REPORT_LABELS",
    "BORE_LABELS",
    "COMPOSITE_LABEL",
]
