"""Ingest package - line parser, file reader and storage adapters.

This package handles:
- Parsing ';'-separated CMM export lines into DataPoint records
- Reading export files from disk (UTF-8 text)
- Converting records persisted by the storage collaborator back into DataPoints

Key classes:
- CmmTextReader: Reads one or several export files into MeasurementFile objects
- DirectoryPointSource: Serves point sets from a folder of export files
- PointSource: Protocol implemented by storage collaborators

Design principle:
- Malformed lines and unparsable numbers are recovered locally (skipped / None)
- A storage collaborator that cannot deliver a point set is fatal and propagates
"""

from .readers_cmm import CmmTextReader, parse_line, parse_measurement_text, sanitize_type_tag
from .storage import (
    DirectoryPointSource,
    PointSetUnavailable,
    PointSource,
    fetch_point_set,
    point_from_record,
)

__all__ = [
    "CmmTextReader",
    "parse_line",
    "parse_measurement_text",
    "sanitize_type_tag",
    "DirectoryPointSource",
    "PointSetUnavailable",
    "PointSource",
    "fetch_point_set",
    "point_from_record",
]
