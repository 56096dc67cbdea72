# mat2nwb/core/classify.py
"""
Field classification: find what in a channel record is time and what is data.

A record is first probed for a canonical (time, value) field pair using the
fixed synonym tables below. When no usable pair exists, the record's
sub-fields are scanned in declaration order for the first numeric array with
more than one row; that array is emitted against synthetic index timestamps.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

import numpy as np

from .exceptions import ClassificationSkipped, InvalidTimeSeries
from .orientation import COLUMN_LAYOUT, ROW_LAYOUT, n_samples, orient, to_time_first
from .record import ChannelRecord, describe_record, is_usable_numeric
from .timeseries import (
    REGULARITY_TOLERANCE,
    Sampling,
    as_time_vector,
    classify_sampling,
    index_timestamps,
)

# Probed in order; the first present name wins.
TIME_FIELDS: tuple[str, ...] = ("times", "time", "t", "timestamps")
VALUE_FIELDS: tuple[str, ...] = (
    "values",
    "value",
    "data",
    "signal",
    "amplitude",
    "position",
    "X",
    "Y",
)


@dataclass(frozen=True, slots=True)
class ClassifiedChannel:
    """
    A channel ready to be written: oriented data plus its timing.

    `source_name` is the name before prefix stripping ("<record>" for the
    canonical path, "<record>_<field>" for the fallback path) and doubles as
    the NWB description. `time_axis` is the axis of `data` that varies with
    time.
    """
    source_name: str
    data: np.ndarray = field(repr=False)
    time_axis: int
    sampling: Sampling
    time_field: str | None = None
    value_field: str | None = None
    output_name: str = ""
    fallback: bool = False
    notes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.output_name:
            object.__setattr__(self, "output_name", self.source_name)

    @property
    def n(self) -> int:
        return n_samples(self.data, self.time_axis)

    @property
    def description(self) -> str:
        return self.source_name

    def time_first(self) -> np.ndarray:
        return to_time_first(self.data, self.time_axis)

    def rename(self, output_name: str) -> "ClassifiedChannel":
        return replace(self, output_name=output_name)


def find_canonical_fields(record: ChannelRecord) -> tuple[str | None, str | None]:
    return record.first_present(TIME_FIELDS), record.first_present(VALUE_FIELDS)


def classify_record(
    record: ChannelRecord,
    *,
    tolerance: float = REGULARITY_TOLERANCE,
) -> ClassifiedChannel:
    """
    Classify one record.

    Raises
    ------
    ClassificationSkipped
        When the record holds no usable numeric field. The exception carries
        per-field diagnostics for the operator.
    """
    notes: list[str] = []
    time_field, value_field = find_canonical_fields(record)

    if time_field is not None and value_field is not None:
        try:
            return _classify_canonical(record, time_field, value_field, tolerance)
        except InvalidTimeSeries as e:
            notes.append(f"'{time_field}'/'{value_field}' not usable ({e}); scanning fields")

    channel = _classify_fallback(record, tolerance, notes)
    if channel is None:
        reason = "Could not find suitable numeric data"
        matlab_class = record.attrs.get("matlab_class")
        if matlab_class not in (None, "struct"):
            reason = f"{reason} (top-level {matlab_class} is not a struct)"
        raise ClassificationSkipped(record.name, reason, describe_record(record))
    return channel


def _classify_canonical(
    record: ChannelRecord,
    time_field: str,
    value_field: str,
    tolerance: float,
) -> ClassifiedChannel:
    time_data = record[time_field]
    value_data = record[value_field]

    if not is_usable_numeric(time_data):
        raise InvalidTimeSeries(f"'{time_field}' is not a non-empty numeric array")
    if not is_usable_numeric(value_data):
        raise InvalidTimeSeries(f"'{value_field}' is not a non-empty numeric array")

    t = as_time_vector(time_data)
    data, notes = orient(value_data, ROW_LAYOUT)
    sampling = classify_sampling(t, tolerance=tolerance)

    n = n_samples(data, ROW_LAYOUT)
    if n != t.size:
        notes.append(f"data has {n} samples but '{time_field}' has {t.size} timestamps")

    return ClassifiedChannel(
        source_name=record.name,
        data=data,
        time_axis=ROW_LAYOUT,
        sampling=sampling,
        time_field=time_field,
        value_field=value_field,
        notes=tuple(notes),
    )


def _classify_fallback(
    record: ChannelRecord,
    tolerance: float,
    notes: list[str],
) -> ClassifiedChannel | None:
    for name, value in record.fields.items():
        if not is_usable_numeric(value):
            continue

        data, orient_notes = orient(value, COLUMN_LAYOUT)
        rows = n_samples(data, COLUMN_LAYOUT)
        if rows <= 1:
            continue

        sampling = classify_sampling(index_timestamps(rows), tolerance=tolerance)
        return ClassifiedChannel(
            source_name=record.qualified(name),
            data=data,
            time_axis=COLUMN_LAYOUT,
            sampling=sampling,
            value_field=name,
            fallback=True,
            notes=tuple(notes + orient_notes),
        )
    return None


def earliest_timestamp(records: Iterable[ChannelRecord]) -> float | None:
    """Smallest value found in any record's time field, if any."""
    earliest: float | None = None
    for record in records:
        time_field = record.first_present(TIME_FIELDS)
        if time_field is None:
            continue
        t = record[time_field]
        if not is_usable_numeric(t) or t.dtype.kind == "c":
            continue
        finite = t[np.isfinite(t)]
        if finite.size == 0:
            continue
        lo = float(finite.min())
        if earliest is None or lo < earliest:
            earliest = lo
    return earliest
