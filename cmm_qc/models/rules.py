from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from cmm_qc.models.points import VALUE_FIELDS


# Closed set of internal checkpoint labels, in table order.
CHECKPOINT_LABELS: Tuple[str, ...] = (
    "A", "B", "C", "D", "E", "F",
    "G1", "G2", "G3", "G4",
    "H", "I", "J", "K", "L", "M", "N",
)

# The four structurally equivalent bores merged into the composite label.
BORE_LABELS: Tuple[str, ...] = ("G1", "G2", "G3", "G4")
COMPOSITE_LABEL = "G"

# Externally visible labels, in canonical report order.
REPORT_LABELS: Tuple[str, ...] = (
    "A", "B", "C", "D", "E", "F", "G",
    "H", "I", "J", "K", "L", "M", "N",
)


def _check_field(field: str) -> None:
    if field not in VALUE_FIELDS:
        raise ValueError(f"Unknown DataPoint field '{field}'; expected one of {VALUE_FIELDS}.")


@dataclass(frozen=True)
class FieldRef:
    """Address of one value: the first point matching (index, type_tag), then its field."""
    index: int
    type_tag: str
    field: str

    def __post_init__(self) -> None:
        _check_field(self.field)


@dataclass(frozen=True)
class DirectLookup:
    index: int
    type_tag: str
    field: str
    absolute: bool = False

    def __post_init__(self) -> None:
        _check_field(self.field)

    @property
    def ref(self) -> FieldRef:
        return FieldRef(self.index, self.type_tag, self.field)


@dataclass(frozen=True)
class Average:
    """Arithmetic mean of the resolvable refs. Never takes magnitudes."""
    refs: Tuple[FieldRef, ...]

    def __post_init__(self) -> None:
        if not self.refs:
            raise ValueError("Average rule needs at least one ref.")


@dataclass(frozen=True)
class Manual:
    """Value entered by an inspector outside the engine (pass/fail)."""
    field: str = "PassFail"


@dataclass(frozen=True)
class Visual:
    """Visual inspection result entered outside the engine (pass/fail)."""
    field: str = "PassFail"


CheckpointRule = Union[DirectLookup, Average, Manual, Visual]
