from __future__ import annotations

from typing import Mapping, Sequence

from cmm_qc.models.results import CheckpointResult
from cmm_qc.models.rules import BORE_LABELS


def aggregate_bores(
    results: Mapping[str, CheckpointResult],
    labels: Sequence[str] = BORE_LABELS,
) -> CheckpointResult:
    """Merge the individually validated bore checks into one composite result.

    - Every sub-result valid (unmeasured counts as valid): the first label's result, verbatim.
    - Otherwise: ``is_valid=False`` and ``value`` lists the failing sub-labels in
      ascending order, comma-joined (e.g. ``"G2,G4"``). The value is then a label
      list, not a number.
    """
    failing = sorted(k for k in labels if k in results and not results[k].is_valid and results[k].is_measured)
    if failing:
        return CheckpointResult(value=",".join(failing), is_valid=False)
    return results[labels[0]]
