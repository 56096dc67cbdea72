# mat2nwb/core/__init__.py
"""
Core conversion logic for mat2nwb.

This module holds the format-agnostic part of the converter:
- ChannelRecord: one named record of a source file
- classify_record: time/value field discovery with a numeric fallback
- orient: row/column layout normalization
- classify_sampling: regular (start + rate) vs irregular timing
- common_prefix / output_name: shared-prefix stripping for output names
- SessionMeta: session-level metadata derived from the file name

The core layer is independent from MATLAB and NWB file handling.
"""

from .record import ChannelRecord, FieldDiagnostic, describe_field, describe_record, is_numeric
from .classify import (
    ClassifiedChannel,
    TIME_FIELDS,
    VALUE_FIELDS,
    classify_record,
    earliest_timestamp,
    find_canonical_fields,
)
from .orientation import COLUMN_LAYOUT, ROW_LAYOUT, orient, to_time_first
from .timeseries import REGULARITY_TOLERANCE, Sampling, classify_sampling
from .naming import EVENT_SUFFIX, collect_names, common_prefix, output_name
from .metadata import FileNameParts, SessionMeta, parse_file_name
from .exceptions import (
    ConversionError,
    UsageError,
    InvalidFileName,
    SourceNotFound,
    LoadError,
    ExportError,
    InvalidTimeSeries,
    ClassificationSkipped,
)


__all__ = [
    # records
    "ChannelRecord",
    "FieldDiagnostic",
    "describe_field",
    "describe_record",
    "is_numeric",

    # classification
    "ClassifiedChannel",
    "TIME_FIELDS",
    "VALUE_FIELDS",
    "classify_record",
    "earliest_timestamp",
    "find_canonical_fields",

    # layout and timing
    "COLUMN_LAYOUT",
    "ROW_LAYOUT",
    "orient",
    "to_time_first",
    "REGULARITY_TOLERANCE",
    "Sampling",
    "classify_sampling",

    # naming
    "EVENT_SUFFIX",
    "collect_names",
    "common_prefix",
    "output_name",

    # metadata
    "FileNameParts",
    "SessionMeta",
    "parse_file_name",

    # exceptions
    "ConversionError",
    "UsageError",
    "InvalidFileName",
    "SourceNotFound",
    "LoadError",
    "ExportError",
    "InvalidTimeSeries",
    "ClassificationSkipped",
]
