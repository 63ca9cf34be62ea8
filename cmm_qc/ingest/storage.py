from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple

from cmm_qc.ingest.readers_cmm import CmmTextReader, sanitize_type_tag
from cmm_qc.models.points import DataPoint, parse_index, parse_number


class PointSetUnavailable(LookupError):
    """The storage collaborator returned no point set for a file id."""


class PointSource(Protocol):
    """Storage collaborator: persisted records of one file, ascending by index."""

    def fetch_points(self, file_id: str) -> Optional[Sequence[Any]]:
        ...


def point_from_record(rec: Mapping[str, Any]) -> DataPoint:
    """
    Convert one persisted record into a DataPoint.

    Records use the persisted column names ('data_type', 'rot_x', ...). Values are
    coerced like the line parser does: empty, '-' or unparsable values become None.
    """
    index = parse_index(rec.get("index"))
    if index is None:
        raise ValueError(f"Persisted record has no usable index: {rec!r}")
    note = rec.get("note")
    return DataPoint(
        index=index,
        type_tag=sanitize_type_tag(str(rec.get("data_type") or rec.get("type_tag") or "")),
        x=parse_number(rec.get("x")),
        y=parse_number(rec.get("y")),
        z=parse_number(rec.get("z")),
        rot_x=parse_number(rec.get("rot_x")),
        rot_y=parse_number(rec.get("rot_y")),
        rot_z=parse_number(rec.get("rot_z")),
        note="" if note is None else str(note),
        diameter=parse_number(rec.get("diameter")),
        tolerance=parse_number(rec.get("tolerance")),
    )


def fetch_point_set(source: PointSource, file_id: str) -> Tuple[DataPoint, ...]:
    """
    Fetch and convert the point set of one file. Always goes to the source; nothing
    is cached. Errors raised by the source propagate unchanged.
    """
    records = source.fetch_points(file_id)
    if records is None:
        raise PointSetUnavailable(f"No point set for file id '{file_id}'.")
    return tuple(r if isinstance(r, DataPoint) else point_from_record(r) for r in records)


class DirectoryPointSource:
    """
    Point source backed by a folder of CMM export files: file id '<id>' is served
    from '<root>/<id>.txt', parsed anew on every fetch.
    """

    suffix = ".txt"

    def __init__(self, root: str | Path, reader: Optional[CmmTextReader] = None):
        self.root = Path(root).expanduser().resolve()
        self.reader = reader or CmmTextReader()

    def file_ids(self) -> list[str]:
        return sorted(p.stem for p in self.root.glob(f"*{self.suffix}") if p.is_file())

    def fetch_points(self, file_id: str) -> Tuple[DataPoint, ...]:
        fp = self.root / f"{file_id}{self.suffix}"
        if not fp.is_file():
            raise FileNotFoundError(f"No measurement file for id '{file_id}' in {self.root}")
        return self.reader.read(fp).points
