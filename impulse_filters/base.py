"""
Base classes for the impulse noise filter system.

Provides:
- ParameterType: Enum for parameter data types
- FilterParameterSpec: Dataclass defining filter parameters
- BaseFilter: Abstract base class for all filters
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real
from typing import Any, ClassVar
import logging
import time

import numpy as np

from .errors import InvalidParameter
from .utils import as_signal

logger = logging.getLogger(__name__)


class ParameterType(Enum):
    """Types of filter parameters."""
    INT = "int"
    FLOAT = "float"
    CHOICE = "choice"
    BOOL = "bool"
    FLOAT_LIST = "float list"


@dataclass
class FilterParameterSpec:
    """
    Specification for a single filter parameter.

    Defines the metadata needed to describe, validate and coerce
    parameter values before they reach a filter.
    """
    name: str                                    # Internal parameter name
    display_name: str                            # User-facing label
    param_type: ParameterType                    # Data type
    default: Any                                 # Default value
    min_value: float | int | None = None         # Min for numeric types
    max_value: float | int | None = None         # Max for numeric types
    min_exclusive: bool = False                  # min_value itself is rejected
    max_exclusive: bool = False                  # max_value itself is rejected
    odd_only: bool = False                       # INT must be odd
    choices: list[str] | None = None             # Options for CHOICE type
    enum_type: type[Enum] | None = None          # Enum backing a CHOICE
    optional: bool = False                       # None is accepted
    tooltip: str = ""                            # Help text

    def validate(self, value: Any) -> tuple[bool, str]:
        """
        Validate a value against this spec.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if value is None:
            if self.optional:
                return True, ""
            return False, f"{self.display_name} is required"

        if self.param_type == ParameterType.INT:
            if isinstance(value, bool) or not isinstance(value, Real):
                return False, f"{self.display_name} must be an integer"
            if not isinstance(value, Integral) and not float(value).is_integer():
                return False, f"{self.display_name} must be an integer"
            ok, message = self._check_range(value)
            if not ok:
                return ok, message
            if self.odd_only and int(value) % 2 == 0:
                return False, f"{self.display_name} must be odd, got {int(value)}"

        elif self.param_type == ParameterType.FLOAT:
            if isinstance(value, bool) or not isinstance(value, Real):
                return False, f"{self.display_name} must be a number"
            if not np.isfinite(float(value)):
                return False, f"{self.display_name} must be finite"
            return self._check_range(value)

        elif self.param_type == ParameterType.CHOICE:
            if self._choice_key(value) not in (self.choices or []):
                return False, f"{self.display_name} must be one of {self.choices}"

        elif self.param_type == ParameterType.BOOL:
            if not isinstance(value, bool):
                return False, f"{self.display_name} must be a boolean"

        elif self.param_type == ParameterType.FLOAT_LIST:
            try:
                arr = np.asarray(value, dtype=np.float64)
            except (TypeError, ValueError):
                return False, f"{self.display_name} must be a sequence of numbers"
            if arr.ndim != 1:
                return False, f"{self.display_name} must be one-dimensional"
            if arr.size == 0:
                return False, f"{self.display_name} cannot be empty"
            if not np.all(np.isfinite(arr)):
                return False, f"{self.display_name} must contain finite values"

        return True, ""

    def _check_range(self, value: float | int) -> tuple[bool, str]:
        if self.min_value is not None:
            if self.min_exclusive and value <= self.min_value:
                return False, f"{self.display_name} must be > {self.min_value}"
            if not self.min_exclusive and value < self.min_value:
                return False, f"{self.display_name} must be >= {self.min_value}"
        if self.max_value is not None:
            if self.max_exclusive and value >= self.max_value:
                return False, f"{self.display_name} must be < {self.max_value}"
            if not self.max_exclusive and value > self.max_value:
                return False, f"{self.display_name} must be <= {self.max_value}"
        return True, ""

    @staticmethod
    def _choice_key(value: Any) -> str:
        if isinstance(value, Enum):
            return str(value.value)
        return str(value).lower()

    def coerce(self, value: Any) -> Any:
        """Coerce an already validated value to its stored type."""
        if value is None:
            return None

        if self.param_type == ParameterType.INT:
            return int(value)

        elif self.param_type == ParameterType.FLOAT:
            return float(value)

        elif self.param_type == ParameterType.CHOICE:
            key = self._choice_key(value)
            return self.enum_type(key) if self.enum_type is not None else key

        elif self.param_type == ParameterType.BOOL:
            return bool(value)

        elif self.param_type == ParameterType.FLOAT_LIST:
            return tuple(float(v) for v in np.asarray(value, dtype=np.float64))

        return value


class BaseFilter(ABC):
    """
    Abstract base class for all impulse noise filters.

    Each filter class defines:
    - category: Category for grouping (Rank, Detection, Smoothing, Adaptive)
    - filter_name: Unique filter name (Median, Savitzky-Golay, etc.)
    - parameter_specs: List of FilterParameterSpec defining parameters
    - _process(): The actual filtering logic on a non-empty 1D array
    - name(): Canonical label of the configured instance

    Instances are not thread-safe; the adaptive filter mutates its own
    weights on every call.
    """

    # Class attributes (set by subclasses)
    category: ClassVar[str]
    filter_name: ClassVar[str]  # Must be unique across all filters
    description: ClassVar[str] = ""
    parameter_specs: ClassVar[list[FilterParameterSpec]] = []

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize filter with parameters.

        Args:
            **kwargs: Parameter values (names must match parameter_specs)

        Raises:
            InvalidParameter: If a name is unknown or a value is invalid
        """
        defaults = {spec.name: spec.coerce(spec.default) for spec in self.parameter_specs}
        self._parameters: dict[str, Any] = {}
        self._apply_parameters(self._resolve_parameters(defaults, kwargs))

    @property
    def parameters(self) -> dict[str, Any]:
        """Current parameter values (copy)."""
        return dict(self._parameters)

    def get_parameter(self, name: str) -> Any:
        """Get a parameter value by name."""
        return self._parameters.get(name)

    def set_parameter(self, name: str, value: Any) -> None:
        """Set a single parameter value."""
        self.set_parameters(**{name: value})

    def set_parameters(self, **kwargs: Any) -> None:
        """
        Reconfigure the filter.

        The whole candidate configuration is validated before anything is
        changed; on failure the previous configuration stays in place.

        Raises:
            InvalidParameter: If a name is unknown or a value is invalid
        """
        self._apply_parameters(self._resolve_parameters(self._parameters, kwargs))

    def _resolve_parameters(self, current: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
        """Merge updates into current and validate the result."""
        specs = {spec.name: spec for spec in self.parameter_specs}
        unknown = sorted(set(updates) - set(specs))
        if unknown:
            raise InvalidParameter(
                f"Unknown parameter(s) for {self.filter_name}: {', '.join(unknown)}"
            )

        candidate = dict(current)
        for name, value in updates.items():
            spec = specs[name]
            is_valid, message = spec.validate(value)
            if not is_valid:
                raise InvalidParameter(message)
            candidate[name] = spec.coerce(value)

        self.validate_parameters(candidate)
        return candidate

    def validate_parameters(self, params: dict[str, Any]) -> None:
        """
        Check constraints spanning several parameters.

        Override in subclasses; raise InvalidParameter on violation.
        """

    def _apply_parameters(self, params: dict[str, Any]) -> None:
        """
        Commit a validated configuration.

        Subclasses deriving state from parameters override this, compute
        the derived state first and only then assign.
        """
        self._parameters = params

    @classmethod
    def describe(cls) -> str:
        """Return a description of the filter and all its parameters."""
        lines = [
            f"{cls.filter_name} ({cls.category})",
            f"  {cls.description}",
            "",
            "  Parameters:",
        ]
        for spec in cls.parameter_specs:
            lines.append(f"    {spec.display_name} ({spec.name}): {spec.param_type.value}")

            # Add range info if applicable
            if spec.min_value is not None or spec.max_value is not None:
                range_parts = []
                if spec.min_value is not None:
                    range_parts.append(f"min={spec.min_value}" + (" (exclusive)" if spec.min_exclusive else ""))
                if spec.max_value is not None:
                    range_parts.append(f"max={spec.max_value}" + (" (exclusive)" if spec.max_exclusive else ""))
                if spec.odd_only:
                    range_parts.append("odd")
                lines.append(f"      Range: {', '.join(range_parts)}")

            if spec.choices:
                lines.append(f"      Choices: {', '.join(spec.choices)}")

            lines.append(f"      Default: {spec.default}")

            if spec.tooltip:
                lines.append(f"      {spec.tooltip}")

        return "\n".join(lines)

    def process(self, signal) -> np.ndarray:
        """
        Filter a signal.

        Args:
            signal: 1D array-like of samples (never modified)

        Returns:
            New float64 array of the same length
        """
        data = as_signal(signal)
        if data.size == 0:
            return np.empty(0, dtype=np.float64)
        return self._process(data)

    @abstractmethod
    def _process(self, signal: np.ndarray) -> np.ndarray:
        """
        Apply the filter to a non-empty 1D float64 signal.

        Implementations must not modify signal in place.
        """
        pass

    @abstractmethod
    def name(self) -> str:
        """Canonical label encoding the filter class and its parameters."""
        pass

    def measure_performance(self, signal) -> tuple[np.ndarray, int]:
        """
        Filter a signal and time it.

        Returns:
            Tuple of (filtered signal, elapsed time in microseconds)
        """
        start = time.perf_counter_ns()
        result = self.process(signal)
        elapsed_us = (time.perf_counter_ns() - start) // 1000
        logger.debug("%r processed %d samples in %d us", self, result.size, elapsed_us)
        return result, elapsed_us

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self._parameters.items())
        return f"{type(self).__name__}({params})"
