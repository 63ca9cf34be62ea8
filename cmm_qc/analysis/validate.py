from __future__ import annotations

from typing import Optional

from cmm_qc.models.profile import ToleranceBand
from cmm_qc.models.results import MISSING_VALUE, CheckpointResult


def format_value(value: Optional[float]) -> str:
    """3-decimal display string, '-' when not measured."""
    if value is None:
        return MISSING_VALUE
    return f"{value:.3f}"


def is_within(value: Optional[float], band: Optional[ToleranceBand]) -> bool:
    # "not yet measured" is never a failure; no band means no constraint
    if value is None or band is None:
        return True
    return band.contains(value)


def validate_value(value: Optional[float], band: Optional[ToleranceBand]) -> CheckpointResult:
    return CheckpointResult(value=format_value(value), is_valid=is_within(value, band))
