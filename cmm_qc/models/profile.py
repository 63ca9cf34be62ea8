"""QC profile -- bundles the checkpoint rule table and the tolerance table.

A QcProfile groups every parameter that affects a report into one frozen
dataclass.  It can be:

- Built with the production tables via ``default_profile()``
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict (and JSON files) for alternate tolerance profiles
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from cmm_qc.models.rules import (
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


K_FIELDS = ("x", "y")


@dataclass(frozen=True)
class ToleranceBand:
    """Inclusive acceptable range ``[min, max]``."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if not self.min <= self.max:
            raise ValueError(f"Tolerance band has min > max: [{self.min}, {self.max}]")

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class QcProfile:
    """Frozen configuration for report generation.

    Attributes
    ----------
    name : str
        Identifier shown in exports (e.g. "default", "default-k-y").
    rules : mapping label -> CheckpointRule
        Exactly one rule per label of ``CHECKPOINT_LABELS``.
    bands : mapping label -> ToleranceBand or None
        Labels that are absent or mapped to None are always valid.
    """

    name: str
    rules: Mapping[str, CheckpointRule]
    bands: Mapping[str, Optional[ToleranceBand]]

    def __post_init__(self) -> None:
        missing = [k for k in CHECKPOINT_LABELS if k not in self.rules]
        unknown = [k for k in self.rules if k not in CHECKPOINT_LABELS]
        if missing or unknown:
            raise ValueError(f"Rule table must cover {CHECKPOINT_LABELS}: missing={missing}, unknown={unknown}")
        unknown_bands = [k for k in self.bands if k not in CHECKPOINT_LABELS]
        if unknown_bands:
            raise ValueError(f"Tolerance bands for unknown labels: {unknown_bands}")
        for label, rule in self.rules.items():
            if not isinstance(rule, (DirectLookup, Average, Manual, Visual)):
                raise ValueError(f"Rule for '{label}' has unsupported type {type(rule).__name__}")

        rules = {k: self.rules[k] for k in CHECKPOINT_LABELS}
        bands = {k: self.bands.get(k) for k in CHECKPOINT_LABELS}
        object.__setattr__(self, "rules", MappingProxyType(rules))
        object.__setattr__(self, "bands", MappingProxyType(bands))

    def band(self, label: str) -> Optional[ToleranceBand]:
        return self.bands.get(label)

    def tolerance_table(self) -> Dict[str, Optional[Dict[str, float]]]:
        """Acceptable ranges per report label, for display next to the results.

        The composite "G" shows the band of G1 (all bores share one band).
        """
        out: Dict[str, Optional[Dict[str, float]]] = {}
        for label in REPORT_LABELS:
            key = BORE_LABELS[0] if label == COMPOSITE_LABEL else label
            b = self.bands.get(key)
            out[label] = b.to_dict() if b is not None else None
        return out

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict."""
        return {
            "name": self.name,
            "rules": {k: _rule_to_dict(r) for k, r in self.rules.items()},
            "bands": {k: (b.to_dict() if b is not None else None) for k, b in self.bands.items()},
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> QcProfile:
        """Reconstruct from a dict (e.g. loaded from JSON).

        ``rules`` and ``bands`` may be partial: missing labels fall back to
        ``default_profile(k_field)``, so a profile file may only override tolerances.
        """
        base = default_profile(k_field=str(d.get("k_field", "x")))
        rules: Dict[str, CheckpointRule] = dict(base.rules)
        for label, rd in _section(d, "rules").items():
            rules[label] = _rule_from_dict(label, rd)
        bands: Dict[str, Optional[ToleranceBand]] = dict(base.bands)
        for label, bd in _section(d, "bands").items():
            bands[label] = _band_from_dict(label, bd)
        return cls(name=str(d.get("name", "custom")), rules=rules, bands=bands)


def _rule_to_dict(rule: CheckpointRule) -> Dict[str, Any]:
    if isinstance(rule, DirectLookup):
        return {
            "kind": "direct",
            "index": rule.index,
            "type_tag": rule.type_tag,
            "field": rule.field,
            "absolute": rule.absolute,
        }
    if isinstance(rule, Average):
        return {
            "kind": "average",
            "refs": [{"index": r.index, "type_tag": r.type_tag, "field": r.field} for r in rule.refs],
        }
    if isinstance(rule, Manual):
        return {"kind": "manual", "field": rule.field}
    if isinstance(rule, Visual):
        return {"kind": "visual", "field": rule.field}
    raise TypeError(f"Unsupported rule type: {type(rule).__name__}")


def _section(d: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    sec = d.get(key) or {}
    if not isinstance(sec, Mapping):
        raise ValueError(f"Profile '{key}' must be an object, got {type(sec).__name__}")
    return sec


def _band_from_dict(label: str, d: Any) -> Optional[ToleranceBand]:
    if d is None:
        return None
    try:
        return ToleranceBand(float(d["min"]), float(d["max"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Tolerance band for '{label}' is malformed: {e!r}") from e


def _rule_from_dict(label: str, d: Any) -> CheckpointRule:
    try:
        return _build_rule(label, d)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ValueError(f"Rule for '{label}' is malformed: {e!r}") from e


def _build_rule(label: str, d: Mapping[str, Any]) -> CheckpointRule:
    kind = str(d.get("kind", "")).strip().lower()
    if kind == "direct":
        return DirectLookup(
            index=int(d["index"]),
            type_tag=str(d["type_tag"]),
            field=str(d["field"]),
            absolute=bool(d.get("absolute", False)),
        )
    if kind == "average":
        refs = tuple(FieldRef(int(r["index"]), str(r["type_tag"]), str(r["field"])) for r in d["refs"])
        return Average(refs)
    if kind == "manual":
        return Manual(str(d.get("field", "PassFail")))
    if kind == "visual":
        return Visual(str(d.get("field", "PassFail")))
    raise ValueError(f"Rule for '{label}' has unknown kind {kind!r}")


def default_profile(k_field: str = "x") -> QcProfile:
    """Production rule and tolerance tables.

    Deployments disagree on the source field of checkpoint K; ``k_field`` pins it
    ("x" or "y"), always with the absolute transform.
    """
    if k_field not in K_FIELDS:
        raise ValueError(f"k_field must be one of {K_FIELDS}, got {k_field!r}")

    rules: Dict[str, CheckpointRule] = {
        "A": DirectLookup(1, "PT-COMP", "x", absolute=True),
        "B": DirectLookup(9, "CIRCLE", "diameter"),
        "C": DirectLookup(1, "DISTANCE", "y", absolute=True),
        "D": DirectLookup(4, "PT-COMP", "x", absolute=True),
        "E": DirectLookup(8, "CIRCLE", "diameter"),
        "F": Average((
            FieldRef(2, "CIRCLE", "diameter"),
            FieldRef(4, "CIRCLE", "diameter"),
            FieldRef(5, "CIRCLE", "diameter"),
            FieldRef(6, "CIRCLE", "diameter"),
        )),
        "G1": DirectLookup(10, "CIRCLE", "diameter"),
        "G2": DirectLookup(11, "CIRCLE", "diameter"),
        "G3": DirectLookup(12, "CIRCLE", "diameter"),
        "G4": DirectLookup(13, "CIRCLE", "diameter"),
        "H": DirectLookup(2, "DISTANCE", "y", absolute=True),
        "I": DirectLookup(15, "CIRCLE", "diameter"),
        "J": DirectLookup(7, "CIRCLE", "diameter"),
        "K": DirectLookup(2, "PT-COMP", k_field, absolute=True),
        "L": DirectLookup(14, "CIRCLE", "diameter"),
        "M": Manual(),
        "N": Visual(),
    }

    bore = ToleranceBand(7.8, 8.2)
    bands: Dict[str, Optional[ToleranceBand]] = {
        "A": ToleranceBand(8.0, 8.4),
        "B": ToleranceBand(37.2, 37.8),
        "C": ToleranceBand(15.7, 16.1),
        "D": ToleranceBand(23.9, 24.3),
        "E": ToleranceBand(11.2, 11.4),
        "F": ToleranceBand(3.1, 3.3),
        "G1": bore,
        "G2": bore,
        "G3": bore,
        "G4": bore,
        "H": ToleranceBand(4.9, 5.1),
        "I": ToleranceBand(29.8, 30.2),
        "J": ToleranceBand(154.9, 155.9),
        "K": ToleranceBand(82.8, 83.4),
        "L": ToleranceBand(121.8, 122.8),
        "M": None,
        "N": None,
    }

    name = "default" if k_field == "x" else f"default-k-{k_field}"
    return QcProfile(name=name, rules=rules, bands=bands)


def load_profile(path: str | Path) -> QcProfile:
    """Read a JSON profile file (see ``QcProfile.from_dict``)."""
    p = Path(path).expanduser()
    with open(p, "r", encoding="utf-8") as f:
        d = json.load(f)
    if not isinstance(d, dict):
        raise ValueError(f"Profile file {p.name} must contain a JSON object.")
    return QcProfile.from_dict(d)


DEFAULT_PROFILE = default_profile()
