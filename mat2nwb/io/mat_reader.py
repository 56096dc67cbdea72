from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Protocol

import h5py  # MAT v7.3 files are HDF5 containers
import numpy as np
from scipy.io import loadmat
from scipy.io.matlab import mat_struct, matfile_version

from mat2nwb.core import ChannelRecord, LoadError

logger = logging.getLogger(__name__)

# loadmat() bookkeeping entries, not variables.
_SCIPY_META_KEYS = frozenset({"__header__", "__version__", "__globals__"})

# HDF5 groups MATLAB uses internally for cell/struct-array references.
_HDF_META_PREFIX = "#"


@dataclass
class RawVariableInfo:
    """
    A top-level variable as found in the file, before it becomes a record.

    Examples of matlab_class: "struct", "double", "cell", "char".
    """

    name: str
    matlab_class: str
    shape: tuple[int, ...]
    value: Any


class MatReader(Protocol):
    """Protocol for MAT-file readers.

    Implementations expose top-level variables in file order.
    """

    path: str

    def iter_variables(self) -> Iterator[RawVariableInfo]:
        ...


# ----------------------------------------------------------------------
# scipy.io (MAT v4 / v5 / v7)
# ----------------------------------------------------------------------
def _is_struct_array(value: Any) -> bool:
    # Struct arrays hold mat_struct elements directly. Cell elements are
    # themselves arrays, so a cell of structs stays a cell.
    return (
        isinstance(value, np.ndarray)
        and value.dtype == object
        and value.size > 0
        and all(isinstance(v, mat_struct) for v in value.flat)
    )


def _first_struct(name: str, value: np.ndarray) -> mat_struct:
    if value.size > 1:
        logger.warning(
            "'%s' is a %s struct array; only its first element is converted",
            name,
            "x".join(str(s) for s in value.shape),
        )
    return value.flat[0]


def _from_scipy(name: str, value: Any) -> Any:
    """Turn loadmat() output into plain Python: dicts, str and ndarrays.

    Numeric arrays keep their MATLAB shape (1xN rows stay rows).
    """
    if isinstance(value, mat_struct):
        return {f: _from_scipy(f"{name}.{f}", getattr(value, f)) for f in value._fieldnames}
    if _is_struct_array(value):
        return _from_scipy(name, _first_struct(name, value))
    if isinstance(value, np.ndarray) and value.dtype.kind == "U":
        if value.size == 1:
            return str(value.flat[0])
        if value.size == 0:
            return ""
    return value


def _scipy_class(value: Any) -> str:
    if isinstance(value, mat_struct) or _is_struct_array(value):
        return "struct"
    if isinstance(value, np.ndarray):
        if value.dtype == object:
            return "cell"
        if value.dtype.kind == "U":
            return "char"
        if value.dtype.kind == "b":
            return "logical"
        return str(value.dtype)
    return type(value).__name__


class ScipyMatReader:
    """MatReader for MAT v4/v5/v7 files, backed by scipy.io.loadmat."""

    def __init__(self, path: str):
        self.path = path
        # squeeze_me=False keeps row/column orientation; struct_as_record=False
        # gives attribute-style structs with ordered _fieldnames.
        self._vars = loadmat(path, squeeze_me=False, struct_as_record=False)

    def iter_variables(self) -> Iterator[RawVariableInfo]:
        for name, value in self._vars.items():
            if name in _SCIPY_META_KEYS:
                continue
            yield RawVariableInfo(
                name=name,
                matlab_class=_scipy_class(value),
                shape=tuple(np.shape(value)),
                value=_from_scipy(name, value),
            )


# ----------------------------------------------------------------------
# h5py (MAT v7.3)
# ----------------------------------------------------------------------
def _attr_str(node: h5py.HLObject, key: str) -> str | None:
    raw = node.attrs.get(key)
    if raw is None:
        return None
    if isinstance(raw, (bytes, np.bytes_)):
        return raw.decode("ascii", errors="replace")
    return str(raw)


def _matlab_order(arr: np.ndarray) -> np.ndarray:
    # MATLAB writes column-major; HDF5 sees the dimensions reversed.
    return arr.T if arr.ndim >= 2 else arr


def _from_hdf(node: h5py.HLObject) -> Any:
    if isinstance(node, h5py.Group):
        return {k: _from_hdf(node[k]) for k in node.keys() if not k.startswith(_HDF_META_PREFIX)}

    cls = _attr_str(node, "MATLAB_class")
    if node.attrs.get("MATLAB_empty"):
        return "" if cls == "char" else np.empty((0, 0))

    arr = np.asarray(node[()])
    if arr.dtype.names and {"real", "imag"} <= set(arr.dtype.names):
        arr = arr["real"] + 1j * arr["imag"]

    arr = _matlab_order(arr)
    if cls == "char":
        rows = np.atleast_2d(arr)
        if rows.shape[0] == 1:
            return "".join(chr(int(c)) for c in rows.flat)
        return np.array(["".join(chr(int(c)) for c in row) for row in rows])
    if cls == "logical":
        return arr.astype(bool)
    # Cell arrays come back as object references and stay opaque.
    return arr


class HdfMatReader:
    """MatReader for MAT v7.3 (HDF5-based) files, backed by h5py.

    HDF5 does not record MATLAB's creation order: variables and struct
    fields come back in the order h5py lists them (alphabetical).
    """

    def __init__(self, path: str):
        self.path = path

    def iter_variables(self) -> Iterator[RawVariableInfo]:
        with h5py.File(self.path, "r") as f:
            for name in f.keys():
                if name.startswith(_HDF_META_PREFIX):
                    continue
                node = f[name]
                cls = _attr_str(node, "MATLAB_class")
                if cls is None:
                    cls = "struct" if isinstance(node, h5py.Group) else "unknown"
                shape = () if isinstance(node, h5py.Group) else tuple(reversed(node.shape))
                yield RawVariableInfo(
                    name=name,
                    matlab_class=cls,
                    shape=shape,
                    value=_from_hdf(node),
                )


# ----------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------
def _mat_major_version(path: str) -> int:
    with open(path, "rb") as fh:
        major, _minor = matfile_version(fh)
    return major


def open_reader(path: str) -> MatReader:
    """Pick a reader from the file's MAT header (v7.3 reports major 2)."""
    major = _mat_major_version(path)
    logger.debug("MAT header of %s reports major version %d", path, major)
    if major == 2:
        return HdfMatReader(path)
    return ScipyMatReader(path)


def to_record(var: RawVariableInfo, source: str | None = None) -> ChannelRecord:
    """Convert one top-level variable into a ChannelRecord.

    Non-struct variables become records without fields; they carry their
    MATLAB class and shape so the skip diagnostic can explain itself.
    """
    if isinstance(var.value, dict):
        fields = var.value
    else:
        logger.debug("Top-level variable '%s' is a %s, not a struct", var.name, var.matlab_class)
        fields = {}
    return ChannelRecord(
        name=var.name,
        fields=fields,
        source=source,
        attrs={"matlab_class": var.matlab_class, "shape": var.shape},
    )


def read_records(reader: MatReader) -> dict[str, ChannelRecord]:
    source = f"MAT:{Path(reader.path).name}"
    records: dict[str, ChannelRecord] = {}
    for var in reader.iter_variables():
        if not var.name.strip():
            raise LoadError(f"{reader.path}: variable with an empty name")
        records[var.name] = to_record(var, source)
    return records
