"""Batch QC summary - tables, highlight map, export and command line entry point.

This module provides a reusable API for:
1. Turning point sets and reports into pandas tables for display
2. Describing which measured values feed which checkpoint (highlighting)
3. Exporting a batch summary as tab-separated CSV plus a JSON sidecar

Run ``python -m cmm_qc.reporting.summary --help`` for the CLI.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from cmm_qc.analysis.report import build_report
from cmm_qc.ingest.readers_cmm import CmmTextReader
from cmm_qc.models.points import VALUE_FIELDS, DataPoint
from cmm_qc.models.profile import DEFAULT_PROFILE, K_FIELDS, QcProfile, default_profile, load_profile
from cmm_qc.models.results import FileMeasurementReport
from cmm_qc.models.rules import REPORT_LABELS, Average, DirectLookup


FIELD_DISPLAY_NAMES: Dict[str, str] = {
    "x": "X",
    "y": "Y",
    "z": "Z",
    "rot_x": "Rot X",
    "rot_y": "Rot Y",
    "rot_z": "Rot Z",
    "diameter": "Diameter",
    "tolerance": "Tolerance",
    "note": "Note",
}


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def points_to_frame(points: Sequence[DataPoint]) -> pd.DataFrame:
    """One row per point, file order kept."""
    cols = ["index", "type_tag", *VALUE_FIELDS]
    return pd.DataFrame([asdict(p) for p in points], columns=cols)


def reports_to_frame(reports: Mapping[str, FileMeasurementReport]) -> pd.DataFrame:
    """One row per file: a value column and a '<label>_ok' column per report label."""
    rows: List[Dict[str, Any]] = []
    for fid, rep in reports.items():
        row: Dict[str, Any] = {"file_id": fid}
        for label in REPORT_LABELS:
            row[label] = rep[label].value
            row[f"{label}_ok"] = rep[label].is_valid
        row["all_ok"] = rep.all_valid
        rows.append(row)
    cols = ["file_id"]
    for label in REPORT_LABELS:
        cols += [label, f"{label}_ok"]
    cols.append("all_ok")
    return pd.DataFrame(rows, columns=cols)


# ---------------------------------------------------------------------------
# Highlight map
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HighlightSpec:
    """One measured value that feeds a checkpoint label."""

    label: str
    index: int
    type_tag: str
    field: str  # display name, e.g. "Diameter"
    is_average: bool


def highlight_mapping(profile: QcProfile = DEFAULT_PROFILE) -> List[HighlightSpec]:
    """Source values per label, in rule-table order. Manual/visual labels have none."""
    out: List[HighlightSpec] = []
    for label, rule in profile.rules.items():
        if isinstance(rule, Average):
            for r in rule.refs:
                out.append(HighlightSpec(label, r.index, r.type_tag, FIELD_DISPLAY_NAMES.get(r.field, r.field), True))
        elif isinstance(rule, DirectLookup):
            out.append(
                HighlightSpec(label, rule.index, rule.type_tag, FIELD_DISPLAY_NAMES.get(rule.field, rule.field), False)
            )
    return out


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def export_summary(
    reports: Mapping[str, FileMeasurementReport],
    output_path: str | Path,
    profile: QcProfile = DEFAULT_PROFILE,
    *,
    write_sidecar_json: bool = True,
) -> Path:
    """Write the summary table as tab-separated CSV, plus a JSON sidecar.

    The sidecar carries the profile name, the tolerance table and each file's
    report in the ``{label: {"value", "isValid"}}`` shape.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    reports_to_frame(reports).to_csv(output_path, sep="\t", index=False)

    if write_sidecar_json:
        metadata = {
            "generated_at": now_iso(),
            "profile": profile.name,
            "tolerances": profile.tolerance_table(),
            "reports": {fid: rep.to_dict() for fid, rep in reports.items()},
        }
        json_path = output_path.with_suffix(".json")
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, default=str)

    return output_path


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _expand_inputs(inputs: Sequence[str]) -> List[Path]:
    paths: List[Path] = []
    for s in inputs:
        p = Path(s).expanduser()
        if p.is_dir():
            paths.extend(sorted(q for q in p.glob("*.txt") if q.is_file()))
        else:
            paths.append(p)
    return paths


def _format_row(fid: str, rep: FileMeasurementReport) -> str:
    status = "PASS" if rep.all_valid else "FAIL"
    cells = " ".join(f"{k}={rep[k].value}{'' if rep[k].is_valid else '!'}" for k in REPORT_LABELS)
    return f"[{status}] {fid}: {cells}"


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m cmm_qc.reporting.summary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Build QC reports (checkpoints A-N) for CMM export files.

            Each input may be a .txt export file or a folder of them. Failing
            checkpoints are marked with '!'. Exit status is 0 when every file
            passes, 1 otherwise.
            """
        ),
    )
    p.add_argument("inputs", nargs="+", help="CMM export files (.txt) or folders containing them")
    p.add_argument("--profile", default=None, help="JSON profile with rule/tolerance overrides")
    p.add_argument(
        "--k-field",
        default="x",
        choices=K_FIELDS,
        help="Source field of checkpoint K when no --profile is given (default: x)",
    )
    p.add_argument("--out", default=None, help="Write a tab-separated summary (+ .json sidecar) here")
    p.add_argument("--json", action="store_true", help="Print the reports as JSON instead of text")

    ns = p.parse_args(list(argv) if argv is not None else None)

    try:
        profile = load_profile(ns.profile) if ns.profile else default_profile(k_field=ns.k_field)
    except (OSError, ValueError, KeyError) as e:
        print(f"[error] cannot load profile: {type(e).__name__}: {e}")
        return 2

    reader = CmmTextReader()
    reports: Dict[str, FileMeasurementReport] = {}
    for path in _expand_inputs(ns.inputs):
        try:
            mf = reader.read(path)
        except OSError as e:
            print(f"[warn] {path}: cannot read ({type(e).__name__}: {e}); skipped")
            continue
        for w in mf.warnings:
            print(f"[info] {path.name}: {w}")
        if not mf.points:
            print(f"[warn] {path.name}: no usable measurement lines; skipped")
            continue
        fid = mf.file_id
        n = 2
        while fid in reports:
            fid = f"{mf.file_id}#{n}"
            n += 1
        if fid != mf.file_id:
            print(f"[info] {path}: file id '{mf.file_id}' already used; reported as '{fid}'")
        reports[fid] = build_report(mf.points, profile, file_id=fid)

    if not reports:
        print("[warn] no reports produced")
        return 1

    if ns.json:
        payload = {
            "profile": profile.name,
            "tolerances": profile.tolerance_table(),
            "reports": {fid: rep.to_dict() for fid, rep in reports.items()},
        }
        print(json.dumps(payload, indent=2))
    else:
        for fid, rep in reports.items():
            print(_format_row(fid, rep))

    if ns.out:
        out = export_summary(reports, ns.out, profile)
        print(f"[info] wrote: {out}")

    return 0 if all(rep.all_valid for rep in reports.values()) else 1


if __name__ == "__main__":
    raise SystemExit(main())
