"""
Sliding-window median filter for impulse noise suppression.
"""

import numpy as np
from scipy.ndimage import median_filter

from ..base import BaseFilter, FilterParameterSpec, ParameterType
from ..registry import register_filter


@register_filter
class MedianFilter(BaseFilter):
    """
    Fixed-width moving median.

    Every output sample is the median of a window of exactly window_size
    input samples centred on it. Near the edges the window is padded by
    repeating the first/last sample, so it never shrinks. Isolated spikes
    narrower than half the window are removed completely while edges
    (steps) are preserved.
    """

    category = "Rank"
    filter_name = "Median"
    description = "Moving median over an odd-width window with edge replication"

    parameter_specs = [
        FilterParameterSpec(
            name="window_size",
            display_name="Window Size",
            param_type=ParameterType.INT,
            default=5,
            min_value=1,
            odd_only=True,
            tooltip="Number of samples in the median window (positive, odd)"
        ),
    ]

    @property
    def window_size(self) -> int:
        return self.get_parameter("window_size")

    def name(self) -> str:
        return f"MedianFilter_{self.window_size}"

    def _process(self, signal: np.ndarray) -> np.ndarray:
        # mode="nearest" pads by replicating the edge samples
        return median_filter(signal, size=self.window_size, mode="nearest")
