# mat2nwb/core/record.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

import numpy as np

from .exceptions import LoadError

# dtype kinds MATLAB's isnumeric() accepts: int, uint, float, complex.
_NUMERIC_KINDS = frozenset("iufc")

# How many nested sub-field names / cell entries a diagnostic lists.
_MAX_LISTED_SUBFIELDS = 5
_MAX_LISTED_CELLS = 3


def is_numeric(value: Any) -> bool:
    """True for numpy arrays of integer, unsigned, float or complex dtype."""
    return isinstance(value, np.ndarray) and value.dtype.kind in _NUMERIC_KINDS


def is_usable_numeric(value: Any) -> bool:
    return is_numeric(value) and value.size > 0


@dataclass(slots=True, frozen=True)
class ChannelRecord:
    """
    One named top-level entry of a source file.

    `fields` keeps declaration order: it drives both common-prefix
    computation and the "first numeric field" fallback.
    """
    name: str
    fields: Mapping[str, Any] = field(default_factory=dict, repr=False)
    source: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise LoadError("ChannelRecord.name must be a non-empty string.")
        if not isinstance(self.fields, Mapping):
            raise LoadError(f"ChannelRecord '{self.name}': fields must be a mapping.")
        if self.attrs is None:
            object.__setattr__(self, "attrs", {})
        elif not isinstance(self.attrs, dict):
            raise LoadError(f"ChannelRecord '{self.name}': attrs must be a dict.")

        normalized: dict[str, Any] = {}
        for key, value in self.fields.items():
            if not isinstance(key, str) or not key:
                raise LoadError(
                    f"ChannelRecord '{self.name}': field names must be non-empty strings."
                )
            normalized[key] = value
        object.__setattr__(self, "fields", normalized)

    # ---- dict-like API ----
    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def field_names(self) -> list[str]:
        return list(self.fields)

    def first_present(self, candidates: tuple[str, ...]) -> str | None:
        """Return the first candidate that names a field of this record."""
        for name in candidates:
            if name in self.fields:
                return name
        return None

    def qualified(self, field_name: str, sep: str = "_") -> str:
        return f"{self.name}{sep}{field_name}"


@dataclass(frozen=True, slots=True)
class FieldDiagnostic:
    """
    Structural description of one sub-field, produced when a channel is
    skipped so the operator can see why nothing usable was found.
    """
    name: str
    kind: str
    shape: tuple[int, ...] | None = None
    value_range: tuple[float, float] | None = None
    empty: bool = False
    subfields: tuple[str, ...] = ()
    n_subfields: int = 0
    cells: tuple[tuple[str, tuple[int, ...]], ...] = ()
    content: str | None = None
    note: str | None = None

    def render(self) -> list[str]:
        lines: list[str] = []
        shape = list(self.shape) if self.shape is not None else None
        if self.kind == "struct":
            lines.append(f"- {self.name}: struct with {self.n_subfields} fields")
            if self.subfields:
                lines.append("    Subfields:")
                lines.extend(f"      {s}" for s in self.subfields)
                extra = self.n_subfields - len(self.subfields)
                if extra > 0:
                    lines.append(f"      ... and {extra} more fields")
        elif self.kind == "cell":
            lines.append(f"- {self.name}: cell array with size {shape}")
            if self.cells:
                lines.append("    Sample cell contents:")
                for i, (cls, cshape) in enumerate(self.cells, start=1):
                    lines.append(f"      Cell {i}: {cls} with size {list(cshape)}")
        elif self.empty:
            lines.append(f"- {self.name}: {self.kind} (EMPTY) with size {shape}")
        elif self.value_range is not None:
            lo, hi = self.value_range
            lines.append(
                f"- {self.name}: {self.kind} with size {shape}, range [{lo:g}, {hi:g}]"
            )
        else:
            lines.append(f"- {self.name}: {self.kind} with size {shape}")
            if self.content is not None:
                lines.append(f'      Content: "{self.content}"')
        if self.note:
            lines.append(f"    NOTE: {self.note}")
        return lines


def describe_field(name: str, value: Any) -> FieldDiagnostic:
    """Build a FieldDiagnostic for a single record field."""
    if isinstance(value, Mapping):
        names = tuple(value)
        return FieldDiagnostic(
            name=name,
            kind="struct",
            subfields=names[:_MAX_LISTED_SUBFIELDS],
            n_subfields=len(names),
        )

    if isinstance(value, str):
        content = value if name.lower() in {"title", "comment"} else None
        return FieldDiagnostic(name=name, kind="char", shape=(1, len(value)), content=content)

    if not isinstance(value, np.ndarray):
        return FieldDiagnostic(name=name, kind=type(value).__name__)

    shape = tuple(int(s) for s in value.shape)

    if value.dtype == object:
        cells = []
        for item in value.flat[:_MAX_LISTED_CELLS]:
            cshape = tuple(np.shape(item))
            cells.append((_kind_of(item), cshape))
        return FieldDiagnostic(name=name, kind="cell", shape=shape, cells=tuple(cells))

    kind = _kind_of(value)
    if not is_numeric(value):
        return FieldDiagnostic(name=name, kind=kind, shape=shape)
    if value.size == 0:
        return FieldDiagnostic(name=name, kind=kind, shape=shape, empty=True)

    flat = value.real if value.dtype.kind == "c" else value
    rows = shape[0] if shape else 1
    note = None
    if rows <= 1:
        note = (
            f"This field has only {rows} row(s), "
            "which doesn't meet the multi-row requirement"
        )
    return FieldDiagnostic(
        name=name,
        kind=kind,
        shape=shape,
        value_range=(float(np.nanmin(flat)), float(np.nanmax(flat))),
        note=note,
    )


def describe_record(record: ChannelRecord) -> list[FieldDiagnostic]:
    return [describe_field(k, v) for k, v in record.fields.items()]


def _kind_of(value: Any) -> str:
    if isinstance(value, Mapping):
        return "struct"
    if isinstance(value, str):
        return "char"
    if isinstance(value, np.ndarray):
        if value.dtype == object:
            return "cell"
        if value.dtype.kind == "b":
            return "logical"
        if value.dtype.kind in "US":
            return "char"
        return str(value.dtype)
    return type(value).__name__
