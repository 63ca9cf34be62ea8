"""CMM QC -- measurement extraction and tolerance validation for coordinate measurement files.

This package provides tools for:
- Parsing semicolon-delimited CMM export files into typed data points
- Resolving the labelled quality checkpoints (A-N) from those points
- Validating each checkpoint against its tolerance band
- Merging the four bore checks G1-G4 into one composite "G" checkpoint
- Building per-file reports and exporting batch summaries

Key principles:
- A missing measurement is a valid outcome ("not yet measured"), never an error
- Configuration (rules + tolerance bands) is always passed explicitly as a QcProfile
- No caching: every report is computed from a freshly parsed/fetched point set

Main subpackages:
- analysis: Value extraction, tolerance validation, G aggregation, report assembly
- ingest: Line parser, file reader and storage adapters
- models: Data models (DataPoint, CheckpointRule, QcProfile, FileMeasurementReport)
- reporting: Tables, highlight map, CSV/JSON export and command line summary
"""

__all__ = []
