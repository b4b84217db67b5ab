"""
Impulse noise suppression filters for 1D signals.

Provides a modular filter framework with:
- A common processing contract (process, name, measure_performance)
- Declarative, validated parameter specifications
- Registry for looking filters up by name
- Signal quality metrics (SNR, MSE, correlation)
"""

from .base import BaseFilter, FilterParameterSpec, ParameterType
from .errors import FilterError, InvalidParameter, InvalidSignal, SingularSystem
from .registry import FilterRegistry, register_filter
from .metrics import (
    EvaluationResult,
    calculate_correlation,
    calculate_mse,
    calculate_snr,
    evaluate_filter,
)

# Import filter modules to trigger registration
from . import rank
from . import detection
from . import smoothing
from . import adaptive

from .rank.median import MedianFilter
from .rank.morphological import MorphologicalFilter, Operation
from .detection.outlier import DetectionMethod, InterpolationMethod, OutlierDetection
from .smoothing.savgol import SavgolFilter, gauss_elimination, savgol_coefficients
from .adaptive.wiener import AdaptiveAlgorithm, WienerFilter

__version__ = "0.1.0"

__all__ = [
    "BaseFilter",
    "FilterParameterSpec",
    "ParameterType",
    "FilterError",
    "InvalidParameter",
    "InvalidSignal",
    "SingularSystem",
    "FilterRegistry",
    "register_filter",
    "EvaluationResult",
    "calculate_correlation",
    "calculate_mse",
    "calculate_snr",
    "evaluate_filter",
    "MedianFilter",
    "MorphologicalFilter",
    "Operation",
    "OutlierDetection",
    "DetectionMethod",
    "InterpolationMethod",
    "SavgolFilter",
    "gauss_elimination",
    "savgol_coefficients",
    "WienerFilter",
    "AdaptiveAlgorithm",
]
