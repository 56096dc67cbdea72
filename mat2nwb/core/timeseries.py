# mat2nwb/core/timeseries.py
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .exceptions import InvalidTimeSeries

# Spacing standard deviations below this count as regular sampling.
REGULARITY_TOLERANCE = 1e-10

# Rate assigned to single-sample channels.
DEFAULT_RATE = 1.0


@dataclass(frozen=True, slots=True)
class Sampling:
    """
    Timing of one channel: either start time + rate (regular) or an
    explicit timestamp per sample (irregular).
    """
    is_regular: bool
    start_time: float
    rate: float | None = None
    timestamps: np.ndarray | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.is_regular:
            if self.rate is None or not np.isfinite(self.rate) or self.rate <= 0:
                raise InvalidTimeSeries(f"Regular sampling needs a positive rate, got {self.rate}")
            if self.timestamps is not None:
                raise InvalidTimeSeries("Regular sampling does not keep timestamps.")
        else:
            if self.timestamps is None:
                raise InvalidTimeSeries("Irregular sampling needs explicit timestamps.")
            if self.rate is not None:
                raise InvalidTimeSeries("Irregular sampling has no rate.")

    @property
    def n(self) -> int | None:
        return None if self.timestamps is None else int(self.timestamps.size)


def as_time_vector(timestamps) -> np.ndarray:
    """Flatten a MATLAB row/column time vector into a 1D float array."""
    t = np.asarray(timestamps)
    if t.ndim > 1 and sum(s > 1 for s in t.shape) > 1:
        raise InvalidTimeSeries(f"timestamps must be a vector, got shape {t.shape}")
    t = t.reshape(-1)
    if t.dtype.kind not in "iuf":
        raise InvalidTimeSeries(f"timestamps must be real numbers, got dtype {t.dtype}")
    return t.astype(np.float64, copy=False)


def spacing_std(timestamps: np.ndarray) -> float:
    """Sample standard deviation of consecutive differences (0 for one diff)."""
    diffs = np.diff(timestamps)
    if diffs.size < 2:
        return 0.0
    return float(np.std(diffs, ddof=1))


def classify_sampling(timestamps, *, tolerance: float = REGULARITY_TOLERANCE) -> Sampling:
    """
    Decide between start time + rate and explicit timestamps.

    A single sample is always regular with DEFAULT_RATE. Longer sequences are
    regular when the spread of their spacing is below `tolerance`; the rate
    comes from the first interval. Zero spacing yields no usable rate and is
    kept as explicit timestamps.
    """
    t = as_time_vector(timestamps)

    if t.size == 0:
        raise InvalidTimeSeries("Cannot classify an empty timestamp sequence.")
    if not np.isfinite(t).all():
        raise InvalidTimeSeries("timestamps contain non-finite values (NaN/Inf).")

    start = float(t[0])
    if t.size == 1:
        return Sampling(is_regular=True, start_time=start, rate=DEFAULT_RATE)

    first_step = float(t[1] - t[0])
    # NWB needs a finite positive rate; constant zero or negative spacing is
    # stored as explicit timestamps.
    if spacing_std(t) < tolerance and first_step != 0.0:
        rate = 1.0 / first_step
        if rate > 0:
            return Sampling(is_regular=True, start_time=start, rate=rate)

    return Sampling(is_regular=False, start_time=start, timestamps=t)


def index_timestamps(n: int) -> np.ndarray:
    """Synthetic timestamps 0..n-1 for channels without a time field."""
    if n < 1:
        raise InvalidTimeSeries(f"index timestamps need at least one sample, got {n}")
    return np.arange(n, dtype=np.float64)
