from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

import numpy as np


# Sentinel the exports (and the storage layer) use for "no value".
DASH = "-"

# Fields of a DataPoint that hold measurement values (everything except the key).
VALUE_FIELDS: Tuple[str, ...] = (
    "x",
    "y",
    "z",
    "rot_x",
    "rot_y",
    "rot_z",
    "note",
    "diameter",
    "tolerance",
)


def parse_number(v: Any) -> Optional[float]:
    """Lenient float conversion: None for missing, empty, '-', unparsable or non-finite input."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str):
        s = v.strip()
        if not s or s == DASH:
            return None
    else:
        s = v
    try:
        f = float(s)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(f):
        return None
    return f


def parse_index(v: Any) -> Optional[int]:
    """Sequence ordinal from field 0; accepts '5' and '5.0'."""
    f = parse_number(v)
    if f is None:
        return None
    return int(f)


@dataclass(frozen=True)
class DataPoint:
    """
    One parsed measurement record of a CMM export file.

    Notes
    - The lookup key is the compound (index, type_tag); several points may share an
      index with different tags.
    - index is the sequence ordinal emitted by the measuring machine. Duplicates and
      gaps are expected.
    - Numeric fields are None when absent or unparsable.
    """
    index: int
    type_tag: str
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    rot_x: Optional[float] = None
    rot_y: Optional[float] = None
    rot_z: Optional[float] = None
    note: str = ""
    diameter: Optional[float] = None
    tolerance: Optional[float] = None

    @property
    def key(self) -> Tuple[int, str]:
        return (self.index, self.type_tag)


@dataclass(frozen=True)
class MeasurementFile:
    """
    In-memory representation of one CMM export file after parsing.

    n_lines counts non-empty lines; n_skipped counts the malformed ones that produced
    no DataPoint.
    """
    source_path: Path
    points: Tuple[DataPoint, ...]
    n_lines: int
    n_skipped: int
    warnings: Tuple[str, ...] = ()

    @property
    def file_id(self) -> str:
        return self.source_path.stem

    @property
    def n_points(self) -> int:
        return len(self.points)
