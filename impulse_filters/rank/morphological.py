"""
Mathematical morphology filters (erosion, dilation, opening, closing).
"""

from __future__ import annotations
from enum import Enum
from typing import Any
import hashlib

import numpy as np

from ..base import BaseFilter, FilterParameterSpec, ParameterType
from ..errors import InvalidParameter
from ..registry import register_filter


class Operation(Enum):
    """Morphological operations."""
    EROSION = "erosion"
    DILATION = "dilation"
    OPENING = "opening"      # erosion, then dilation
    CLOSING = "closing"      # dilation, then erosion


@register_filter
class MorphologicalFilter(BaseFilter):
    """
    Grey-scale morphology on a 1D signal.

    With structuring element g of length m and half = m // 2:
    - erosion:  out[i] = min_j (x[i - half + j] - g[j])
    - dilation: out[i] = max_j (x[i - half + j] + g[j])
    Offsets falling outside the signal are skipped. Opening removes
    positive spikes narrower than the element, closing removes negative
    ones. Both compositions reuse the same (unreflected) element.
    """

    category = "Rank"
    filter_name = "Morphological"
    description = "Erosion, dilation, opening or closing with a structuring element"

    parameter_specs = [
        FilterParameterSpec(
            name="operation",
            display_name="Operation",
            param_type=ParameterType.CHOICE,
            default=Operation.OPENING,
            choices=[op.value for op in Operation],
            enum_type=Operation,
            tooltip="opening suppresses positive impulses, closing negative ones"
        ),
        FilterParameterSpec(
            name="element_size",
            display_name="Element Size",
            param_type=ParameterType.INT,
            default=5,
            min_value=1,
            tooltip="Length of the flat (all-zero) structuring element"
        ),
        FilterParameterSpec(
            name="structuring_element",
            display_name="Structuring Element",
            param_type=ParameterType.FLOAT_LIST,
            default=None,
            optional=True,
            tooltip="Explicit element offsets; overrides Element Size when given"
        ),
    ]

    def _resolve_parameters(self, current: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
        if "element_size" in updates and "structuring_element" not in updates:
            # A new size means a new flat element
            current = dict(current, structuring_element=None)
        params = super()._resolve_parameters(current, updates)

        element = params["structuring_element"]
        if element is not None:
            if "element_size" in updates and updates["element_size"] != len(element):
                raise InvalidParameter(
                    f"Element Size ({updates['element_size']}) does not match "
                    f"the structuring element length ({len(element)})"
                )
            params["element_size"] = len(element)
        return params

    @property
    def operation(self) -> Operation:
        return self.get_parameter("operation")

    @property
    def structuring_element(self) -> np.ndarray:
        """Effective structuring element (copy)."""
        element = self.get_parameter("structuring_element")
        if element is None:
            return np.zeros(self.get_parameter("element_size"), dtype=np.float64)
        return np.array(element, dtype=np.float64)

    def name(self) -> str:
        element = self.structuring_element
        label = f"MorphologicalFilter_{self.operation.value.capitalize()}_{element.size}"
        if np.any(element != 0.0):
            label += "_" + hashlib.sha1(element.tobytes()).hexdigest()[:8]
        return label

    def _process(self, signal: np.ndarray) -> np.ndarray:
        operation = self.operation
        if operation == Operation.EROSION:
            return self._erode(signal)
        if operation == Operation.DILATION:
            return self._dilate(signal)

        element = self.structuring_element
        if operation == Operation.OPENING:
            return MorphologicalFilter(
                operation=Operation.DILATION, structuring_element=element
            ).process(self._erode(signal))
        return MorphologicalFilter(
            operation=Operation.EROSION, structuring_element=element
        ).process(self._dilate(signal))

    def _windows(self, signal: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Return (values, valid) matrices of shape (n, m) for all offsets."""
        n = signal.size
        element_size = self.get_parameter("element_size")
        half = element_size // 2
        indices = np.arange(n)[:, None] - half + np.arange(element_size)[None, :]
        valid = (indices >= 0) & (indices < n)
        return signal[np.clip(indices, 0, n - 1)], valid

    def _erode(self, signal: np.ndarray) -> np.ndarray:
        values, valid = self._windows(signal)
        shifted = np.where(valid, values - self.structuring_element, np.inf)
        result = shifted.min(axis=1)
        empty = ~valid.any(axis=1)
        result[empty] = signal[empty]
        return result

    def _dilate(self, signal: np.ndarray) -> np.ndarray:
        values, valid = self._windows(signal)
        shifted = np.where(valid, values + self.structuring_element, -np.inf)
        result = shifted.max(axis=1)
        empty = ~valid.any(axis=1)
        result[empty] = signal[empty]
        return result
