from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from cmm_qc.models.points import DataPoint, parse_number
from cmm_qc.models.rules import Average, CheckpointRule, DirectLookup, FieldRef, Manual, Visual


def find_point(points: Sequence[DataPoint], index: int, type_tag: str) -> Optional[DataPoint]:
    """First point matching the compound key (index, type_tag), or None."""
    for p in points:
        if p.index == index and p.type_tag == type_tag:
            return p
    return None


def lookup_value(points: Sequence[DataPoint], ref: FieldRef) -> Optional[float]:
    """Value addressed by ref; None when the point is absent or the field empty/'-'/unparsable."""
    p = find_point(points, ref.index, ref.type_tag)
    if p is None:
        return None
    return parse_number(getattr(p, ref.field, None))


def extract_value(points: Sequence[DataPoint], rule: CheckpointRule) -> Optional[float]:
    """Raw checkpoint value for one rule.

    - DirectLookup: looked-up value, magnitude taken when ``absolute`` is set.
    - Average: mean of the resolvable refs (no magnitude), None if none resolves.
    - Manual / Visual: always None; those values are entered by an inspector.
    """
    if isinstance(rule, DirectLookup):
        v = lookup_value(points, rule.ref)
        if v is None:
            return None
        return abs(v) if rule.absolute else v
    if isinstance(rule, Average):
        vals = [v for v in (lookup_value(points, r) for r in rule.refs) if v is not None]
        if not vals:
            return None
        return float(np.mean(vals))
    if isinstance(rule, (Manual, Visual)):
        return None
    raise TypeError(f"Unsupported checkpoint rule: {type(rule).__name__}")
