# mat2nwb/core/orientation.py
"""
Layout normalization for arrays bound for NWB.

MATLAB stores vectors as 1xN (row) or Nx1 (column) matrices, and nothing
guarantees which axis is time. Callers pick the axis time must vary along:

- ROW_LAYOUT (time_axis=1): vectors become 1xN
- COLUMN_LAYOUT (time_axis=0): vectors become Nx1, matrices put their
  longest dimension first

For arrays with more than two dimensions the longest dimension is assumed
to be time. That is a heuristic, not a guarantee.

These are pure layout transforms: values and element counts never change.
"""
from __future__ import annotations

import numpy as np

COLUMN_LAYOUT = 0
ROW_LAYOUT = 1


def is_vector(array: np.ndarray) -> bool:
    """MATLAB isvector(): 2D with one singleton dimension."""
    return array.ndim == 2 and 1 in array.shape


def orient(array: np.ndarray, time_axis: int) -> tuple[np.ndarray, list[str]]:
    """
    Lay `array` out so time varies along `time_axis`.

    Returns the (possibly transposed) array and a list of notes describing
    what was changed. An array that is already oriented comes back as-is
    with no notes, so orienting twice is a no-op.
    """
    if time_axis not in (COLUMN_LAYOUT, ROW_LAYOUT):
        raise ValueError(f"time_axis must be 0 or 1, got {time_axis!r}")

    a = np.asarray(array)
    notes: list[str] = []

    if a.ndim < 2:
        return a, notes

    if is_vector(a):
        other = 1 - time_axis
        if a.shape[time_axis] == 1 and a.shape[other] > 1:
            layout = "row" if time_axis == ROW_LAYOUT else "column"
            notes.append(f"transposed {a.shape} vector to {layout} layout")
            a = a.T
        return a, notes

    if time_axis == ROW_LAYOUT:
        notes.append(f"multi-dimensional data {a.shape}; dimension handling may be complex")
        return a, notes

    longest = int(np.argmax(a.shape))
    if a.shape[0] >= a.shape[longest]:
        return a, notes

    if a.ndim == 2:
        notes.append(f"transposed 2D data {a.shape} to make time the first dimension")
        a = a.T
    else:
        notes.append(
            f"permuted {a.ndim}D data {a.shape} to make the longest dimension first"
        )
        a = np.swapaxes(a, 0, longest)
    notes.append(f"new data shape: {a.shape}")
    return a, notes


def n_samples(array: np.ndarray, time_axis: int) -> int:
    a = np.asarray(array)
    if a.ndim == 0:
        return 1
    if a.ndim == 1:
        return int(a.shape[0])
    return int(a.shape[time_axis])


def to_time_first(array: np.ndarray, time_axis: int) -> np.ndarray:
    """
    Samples-first view for writing: vectors collapse to 1D, other arrays
    have `time_axis` moved to the front.
    """
    a = np.asarray(array)
    if a.ndim < 2:
        return np.atleast_1d(a)
    if is_vector(a):
        return a.reshape(-1)
    return np.moveaxis(a, time_axis, 0)
