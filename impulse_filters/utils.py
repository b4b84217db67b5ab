"""
Numeric helpers shared by the filters.

Provides:
- as_signal: Validate and cast input to a 1D float64 array
- median: Median of a sequence (average of the two central values for even counts)
- mad: Median absolute deviation around a given center
- linear_interpolate: Two-point linear interpolation
"""

from __future__ import annotations
from typing import Iterable

import numpy as np

from .errors import InvalidSignal

# Below this horizontal distance two interpolation nodes are treated as coincident
INTERPOLATION_EPS = 1e-10


def as_signal(signal) -> np.ndarray:
    """
    Validate and cast input to a 1D float64 array.

    Args:
        signal: Array-like sequence of samples

    Returns:
        1D float64 numpy array (a copy is not guaranteed)

    Raises:
        InvalidSignal: If the input has more than one dimension
    """
    arr = np.asarray(signal, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    elif arr.ndim > 1:
        raise InvalidSignal(f"Expected 1D signal, got {arr.ndim}D array")
    return arr


def median(values: Iterable[float]) -> float:
    """Median of values; an empty input yields 0.0."""
    arr = np.sort(np.asarray(values, dtype=np.float64).ravel())
    size = arr.size
    if size == 0:
        return 0.0
    if size % 2 == 0:
        return float((arr[size // 2 - 1] + arr[size // 2]) / 2.0)
    return float(arr[size // 2])


def mad(values: Iterable[float], center: float) -> float:
    """Median absolute deviation of values around center."""
    arr = np.asarray(values, dtype=np.float64).ravel()
    return median(np.abs(arr - center))


def linear_interpolate(x1: float, y1: float, x2: float, y2: float, x: float) -> float:
    """
    Interpolate the line through (x1, y1) and (x2, y2) at x.

    Returns y1 unchanged when the nodes are closer than INTERPOLATION_EPS.
    """
    if abs(x2 - x1) < INTERPOLATION_EPS:
        return y1
    return y1 + (y2 - y1) * (x - x1) / (x2 - x1)
