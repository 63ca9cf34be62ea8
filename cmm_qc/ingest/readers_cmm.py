from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from cmm_qc.models.points import DataPoint, MeasurementFile, parse_index, parse_number


logger = logging.getLogger(__name__)

_TAG_STRIP_RE = re.compile(r"[^A-Z0-9-]")

MIN_FIELDS = 3

# Column layouts: (column, DataPoint field). Columns are 0-based over the ';'-split line.
# DISTANCE lines carry no descriptor column, so their data starts one column earlier
# than CIRCLE/PLANE lines.
_LAYOUT_CIRCLE: Tuple[Tuple[int, str], ...] = (
    (2, "x"),
    (3, "y"),
    (4, "z"),
    (5, "rot_x"),
    (6, "rot_y"),
    (7, "rot_z"),
    (8, "note"),
    (9, "diameter"),
    (10, "tolerance"),
)
_LAYOUT_PT_COMP: Tuple[Tuple[int, str], ...] = (
    (2, "x"),
    (3, "y"),
    (4, "z"),
)
_LAYOUT_DISTANCE: Tuple[Tuple[int, str], ...] = (
    (1, "x"),
    (2, "y"),
    (3, "z"),
    (8, "diameter"),
)


def sanitize_type_tag(raw: str) -> str:
    """Trim and drop stray characters outside [A-Z0-9-] emitted by the hardware."""
    return _TAG_STRIP_RE.sub("", raw.strip())


def layout_for(type_tag: str) -> Tuple[Tuple[int, str], ...]:
    """Column layout for a tag; unknown tags map no value columns."""
    if "CIRCLE" in type_tag or type_tag == "PLANE":
        return _LAYOUT_CIRCLE
    if type_tag == "PT-COMP":
        return _LAYOUT_PT_COMP
    if type_tag == "DISTANCE":
        return _LAYOUT_DISTANCE
    return ()


def parse_line(line: str) -> Optional[DataPoint]:
    """
    Parse one trimmed line. Returns None for malformed lines (fewer than 3 fields,
    or an index that is not a number). Unparsable value fields become None.
    """
    parts = line.split(";")
    if len(parts) < MIN_FIELDS:
        return None
    index = parse_index(parts[0])
    if index is None:
        return None
    type_tag = sanitize_type_tag(parts[1])

    values: Dict[str, object] = {}
    for col, name in layout_for(type_tag):
        raw = parts[col] if col < len(parts) else None
        if name == "note":
            values[name] = (raw or "").strip()
        else:
            values[name] = parse_number(raw)
    return DataPoint(index=index, type_tag=type_tag, **values)


def parse_measurement_text(text: str) -> Tuple[DataPoint, ...]:
    """Parse the full text of one file into DataPoints, in file order."""
    points, _, _ = _parse_lines(text)
    return points


def _parse_lines(text: str) -> Tuple[Tuple[DataPoint, ...], int, List[int]]:
    points: List[DataPoint] = []
    skipped: List[int] = []
    n_lines = 0
    for lineno, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue
        n_lines += 1
        dp = parse_line(line)
        if dp is None:
            skipped.append(lineno)
            logger.debug("skipping malformed line %d: %r", lineno, line)
            continue
        points.append(dp)
    return tuple(points), n_lines, skipped


class CmmTextReader:
    """
    Reader for CMM export text files (one measurement per ';'-separated line).

    Contract:
      - The file is decoded as UTF-8 (a BOM is tolerated, undecodable bytes replaced).
      - Malformed lines are skipped, never fatal; they are counted and reported in warnings.
      - Points keep the file order; no sorting or de-duplication.
      - I/O errors propagate.
    """

    encoding = "utf-8-sig"

    def read_text(self, text: str, source_path: str | Path = "<memory>") -> MeasurementFile:
        points, n_lines, skipped = _parse_lines(text)
        warnings: List[str] = []
        if skipped:
            head = ", ".join(str(n) for n in skipped[:20])
            more = f" (+{len(skipped) - 20} more)" if len(skipped) > 20 else ""
            warnings.append(f"Skipped {len(skipped)} malformed line(s): {head}{more}")
        unknown = sorted({p.type_tag for p in points if not layout_for(p.type_tag)})
        if unknown:
            warnings.append(f"Unknown type tags (values left empty): {', '.join(t or '<empty>' for t in unknown)}")
        return MeasurementFile(
            source_path=Path(source_path),
            points=points,
            n_lines=n_lines,
            n_skipped=len(skipped),
            warnings=tuple(warnings),
        )

    def read(self, path: str | Path) -> MeasurementFile:
        fp = Path(path).expanduser().resolve()
        text = fp.read_bytes().decode(self.encoding, errors="replace")
        mf = self.read_text(text, source_path=fp)
        logger.info("read %s: %d point(s), %d skipped line(s)", fp.name, mf.n_points, mf.n_skipped)
        return mf

    def read_many(self, paths: Iterable[str | Path]) -> Tuple[List[MeasurementFile], List[str]]:
        """
        Read several files. Files that yield no points are dropped (nothing to store
        or report); the returned warnings list names them.
        """
        files: List[MeasurementFile] = []
        warnings: List[str] = []
        for p in paths:
            mf = self.read(p)
            if not mf.points:
                msg = f"{mf.source_path.name}: no usable measurement lines; file ignored"
                logger.warning(msg)
                warnings.append(msg)
                continue
            files.append(mf)
        return files, warnings
