from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from cmm_qc.models.rules import REPORT_LABELS


MISSING_VALUE = "-"


@dataclass(frozen=True)
class CheckpointResult:
    """Validated value of one checkpoint.

    Attributes
    ----------
    value:
        ``"-"`` when not measured, a number formatted with 3 decimals, or, for the
        composite G checkpoint when it fails, the comma-joined failing sub-labels
        (e.g. ``"G2,G4"``). Branch on ``is_valid`` before reading it as a number.
    is_valid:
        False only when a measured value lies outside its tolerance band.
    """

    value: str
    is_valid: bool

    @property
    def is_measured(self) -> bool:
        return self.value != MISSING_VALUE

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "isValid": self.is_valid}


@dataclass(frozen=True)
class FileMeasurementReport:
    """Per-file QC report: exactly the labels A..N in canonical order.

    The individual G1-G4 results are collapsed into the single "G" entry.
    """

    results: Mapping[str, CheckpointResult]
    file_id: Optional[str] = None
    labels: Tuple[str, ...] = field(default=REPORT_LABELS, repr=False)

    def __post_init__(self) -> None:
        missing = [k for k in self.labels if k not in self.results]
        extra = [k for k in self.results if k not in self.labels]
        if missing or extra:
            raise ValueError(f"Report labels mismatch: missing={missing}, unexpected={extra}")
        ordered = {k: self.results[k] for k in self.labels}
        object.__setattr__(self, "results", MappingProxyType(ordered))

    def __getitem__(self, label: str) -> CheckpointResult:
        return self.results[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)

    @property
    def all_valid(self) -> bool:
        return all(r.is_valid for r in self.results.values())

    def failing_labels(self) -> List[str]:
        return [k for k in self.labels if not self.results[k].is_valid]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Export as ``{label: {"value": str, "isValid": bool}}`` (JSON-friendly)."""
        return {k: self.results[k].to_dict() for k in self.labels}
