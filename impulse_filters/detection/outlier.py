"""
Outlier detection and replacement filter.

Impulses are first located (boolean mask), then only the flagged
samples are replaced by values reconstructed from their unflagged
neighbours.
"""

from __future__ import annotations
from enum import Enum
import logging

import numpy as np

from ..base import BaseFilter, FilterParameterSpec, ParameterType
from ..errors import InvalidSignal
from ..registry import register_filter
from ..utils import as_signal, linear_interpolate, mad, median

logger = logging.getLogger(__name__)


class DetectionMethod(Enum):
    """How outliers are located."""
    MAD_BASED = "mad_based"                    # local median / MAD test
    STATISTICAL = "statistical"                # global z-score
    ADAPTIVE_THRESHOLD = "adaptive_threshold"  # local mean / std without the point


class InterpolationMethod(Enum):
    """How flagged samples are replaced."""
    LINEAR = "linear"
    SPLINE = "spline"                  # same as LINEAR
    MEDIAN_BASED = "median_based"
    AUTOREGRESSIVE = "autoregressive"


_DETECTION_LABELS = {
    DetectionMethod.MAD_BASED: "MAD",
    DetectionMethod.STATISTICAL: "Statistical",
    DetectionMethod.ADAPTIVE_THRESHOLD: "Adaptive",
}

_INTERPOLATION_LABELS = {
    InterpolationMethod.LINEAR: "Linear",
    InterpolationMethod.SPLINE: "Spline",
    InterpolationMethod.MEDIAN_BASED: "Median",
    InterpolationMethod.AUTOREGRESSIVE: "AR",
}


@register_filter
class OutlierDetection(BaseFilter):
    """
    Two-stage impulse suppression: detect, then interpolate.

    Detection methods:
    - mad_based: |x - median| > threshold * MAD inside a sliding window
    - statistical: |x - mean| / std > threshold over the whole signal
    - adaptive_threshold: deviation from the local mean (point excluded)
      exceeds threshold * local std (or threshold itself when std is 0)

    Interpolation methods:
    - linear: line between the nearest unflagged neighbours
    - spline: currently identical to linear
    - median_based: median of unflagged neighbours (at most 5 per side)
    - autoregressive: 1/distance weighted mean of up to AR_ORDER
      unflagged predecessors, linear when there are none
    """

    category = "Detection"
    filter_name = "Outlier Detection"
    description = "Detect impulses and replace them by interpolation"

    AR_ORDER = 5
    MEDIAN_HALF_WINDOW_MAX = 5

    parameter_specs = [
        FilterParameterSpec(
            name="detection_method",
            display_name="Detection Method",
            param_type=ParameterType.CHOICE,
            default=DetectionMethod.MAD_BASED,
            choices=[m.value for m in DetectionMethod],
            enum_type=DetectionMethod,
            tooltip="mad_based: robust local test; statistical: global z-score; "
                    "adaptive_threshold: local mean/std excluding the point"
        ),
        FilterParameterSpec(
            name="interpolation_method",
            display_name="Interpolation Method",
            param_type=ParameterType.CHOICE,
            default=InterpolationMethod.LINEAR,
            choices=[m.value for m in InterpolationMethod],
            enum_type=InterpolationMethod,
            tooltip="How flagged samples are reconstructed"
        ),
        FilterParameterSpec(
            name="threshold",
            display_name="Threshold",
            param_type=ParameterType.FLOAT,
            default=3.0,
            min_value=0.0,
            min_exclusive=True,
            tooltip="Detection threshold in MADs / standard deviations"
        ),
        FilterParameterSpec(
            name="window_size",
            display_name="Window Size",
            param_type=ParameterType.INT,
            default=11,
            min_value=1,
            odd_only=True,
            tooltip="Sliding window used by the local detectors and median interpolation"
        ),
    ]

    @property
    def detection_method(self) -> DetectionMethod:
        return self.get_parameter("detection_method")

    @property
    def interpolation_method(self) -> InterpolationMethod:
        return self.get_parameter("interpolation_method")

    @property
    def threshold(self) -> float:
        return self.get_parameter("threshold")

    @property
    def window_size(self) -> int:
        return self.get_parameter("window_size")

    def name(self) -> str:
        return (
            f"OutlierDetection_{_DETECTION_LABELS[self.detection_method]}_"
            f"{_INTERPOLATION_LABELS[self.interpolation_method]}_"
            f"{self.threshold!r}_{self.window_size}"
        )

    def detect_outliers(self, signal) -> np.ndarray:
        """
        Locate impulses without replacing them.

        Returns:
            Boolean array, True where the sample is an outlier
        """
        data = as_signal(signal)
        if data.size == 0:
            return np.zeros(0, dtype=bool)

        method = self.detection_method
        if method == DetectionMethod.MAD_BASED:
            return self._detect_mad(data)
        if method == DetectionMethod.STATISTICAL:
            return self._detect_statistical(data)
        return self._detect_adaptive(data)

    def interpolate(self, signal, outliers) -> np.ndarray:
        """
        Replace the flagged samples of signal with the configured method.

        Args:
            signal: 1D array-like of samples (never modified)
            outliers: Boolean mask of the same length, True = replace

        Returns:
            New array; unflagged samples are copied unchanged
        """
        data = as_signal(signal)
        mask = np.asarray(outliers, dtype=bool)
        if mask.shape != data.shape:
            raise InvalidSignal(
                f"Outlier mask has shape {mask.shape}, signal has shape {data.shape}"
            )
        if data.size == 0:
            return np.empty(0, dtype=np.float64)

        method = self.interpolation_method
        if method == InterpolationMethod.MEDIAN_BASED:
            return self._interpolate_median(data, mask)
        if method == InterpolationMethod.AUTOREGRESSIVE:
            return self._interpolate_autoregressive(data, mask)
        # SPLINE is served by linear interpolation
        return self._interpolate_linear(data, mask)

    def _process(self, signal: np.ndarray) -> np.ndarray:
        outliers = self.detect_outliers(signal)
        logger.debug("%r flagged %d of %d samples", self, int(outliers.sum()), signal.size)
        return self.interpolate(signal, outliers)

    # --- detection -------------------------------------------------------

    def _window_bounds(self, n: int) -> tuple[np.ndarray, np.ndarray]:
        half = self.window_size // 2
        n_range = np.arange(n)
        return np.maximum(0, n_range - half), np.minimum(n, n_range + half + 1)

    def _detect_mad(self, signal: np.ndarray) -> np.ndarray:
        outliers = np.zeros(signal.size, dtype=bool)
        threshold = self.threshold
        start_range, stop_range = self._window_bounds(signal.size)

        for i, (start, stop) in enumerate(zip(start_range, stop_range)):
            window = signal[start:stop]
            if window.size < 3:
                continue
            center = median(window)
            spread = mad(window, center)
            if spread > 0.0 and abs(signal[i] - center) > threshold * spread:
                outliers[i] = True
        return outliers

    def _detect_statistical(self, signal: np.ndarray) -> np.ndarray:
        mean = np.mean(signal)
        stddev = np.std(signal)
        if stddev == 0.0:
            return np.zeros(signal.size, dtype=bool)
        return np.abs(signal - mean) / stddev > self.threshold

    def _detect_adaptive(self, signal: np.ndarray) -> np.ndarray:
        outliers = np.zeros(signal.size, dtype=bool)
        threshold = self.threshold
        start_range, stop_range = self._window_bounds(signal.size)

        for i, (start, stop) in enumerate(zip(start_range, stop_range)):
            neighbours = np.concatenate((signal[start:i], signal[i + 1:stop]))
            if neighbours.size == 0:
                continue
            local_mean = np.mean(neighbours)
            local_std = np.sqrt(np.mean((neighbours - local_mean) ** 2))
            limit = threshold * local_std if local_std != 0.0 else threshold
            if abs(signal[i] - local_mean) > limit:
                outliers[i] = True
        return outliers

    # --- interpolation ---------------------------------------------------

    @staticmethod
    def _interpolate_linear(signal: np.ndarray, outliers: np.ndarray) -> np.ndarray:
        result = signal.copy()
        normal = np.flatnonzero(~outliers)
        if normal.size == 0:
            return result

        for i in np.flatnonzero(outliers):
            pos = np.searchsorted(normal, i)
            left = normal[pos - 1] if pos > 0 else None
            right = normal[pos] if pos < normal.size else None
            if left is not None and right is not None:
                result[i] = linear_interpolate(left, signal[left], right, signal[right], i)
            elif left is not None:
                result[i] = signal[left]
            else:
                result[i] = signal[right]
        return result

    def _interpolate_median(self, signal: np.ndarray, outliers: np.ndarray) -> np.ndarray:
        result = signal.copy()
        n = signal.size
        half = min(self.window_size // 2, self.MEDIAN_HALF_WINDOW_MAX)

        for i in np.flatnonzero(outliers):
            start, stop = max(0, i - half), min(n, i + half + 1)
            keep = ~outliers[start:stop]
            keep[i - start] = False
            neighbours = signal[start:stop][keep]
            if neighbours.size:
                result[i] = median(neighbours)
        return result

    def _interpolate_autoregressive(self, signal: np.ndarray, outliers: np.ndarray) -> np.ndarray:
        result = signal.copy()
        linear = None

        for i in np.flatnonzero(outliers):
            total = 0.0
            weight_sum = 0.0
            for lag in range(1, min(self.AR_ORDER, i) + 1):
                if not outliers[i - lag]:
                    weight = 1.0 / lag
                    total += weight * result[i - lag]
                    weight_sum += weight

            if weight_sum > 0.0:
                result[i] = total / weight_sum
            else:
                if linear is None:
                    linear = self._interpolate_linear(signal, outliers)
                result[i] = linear[i]
        return result
