"""
Signal quality metrics.

All metric functions are total: malformed input (empty or of different
lengths) yields a neutral value instead of an exception, so reports can
be produced for degenerate test cases.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .base import BaseFilter

# Noise power below this is reported as SNR_CEILING_DB
NOISE_POWER_EPS = 1e-10
SNR_CEILING_DB = 100.0
# sqrt(var1 * var2) below this means no meaningful correlation
CORRELATION_EPS = 1e-10


def _paired(a, b) -> tuple[np.ndarray, np.ndarray] | None:
    """Return both inputs as flat float arrays, or None if they can't be compared."""
    x = np.asarray(a, dtype=np.float64).ravel()
    y = np.asarray(b, dtype=np.float64).ravel()
    if x.size == 0 or x.size != y.size:
        return None
    return x, y


def calculate_snr(clean, processed) -> float:
    """
    Signal-to-noise ratio of processed against clean, in dB.

    Noise is processed - clean. Returns SNR_CEILING_DB when the noise
    power is below NOISE_POWER_EPS, 0.0 for empty or mismatched input.
    """
    pair = _paired(clean, processed)
    if pair is None:
        return 0.0
    x, y = pair

    signal_power = np.mean(x ** 2)
    noise_power = np.mean((y - x) ** 2)
    if noise_power < NOISE_POWER_EPS:
        return SNR_CEILING_DB
    with np.errstate(divide="ignore"):
        return float(10.0 * np.log10(signal_power / noise_power))


def calculate_mse(original, processed) -> float:
    """Mean squared error; 0.0 for empty or mismatched input."""
    pair = _paired(original, processed)
    if pair is None:
        return 0.0
    x, y = pair
    return float(np.mean((x - y) ** 2))


def calculate_correlation(signal1, signal2) -> float:
    """
    Pearson correlation coefficient.

    Returns 0.0 for empty or mismatched input, and when either series is
    (numerically) constant.
    """
    pair = _paired(signal1, signal2)
    if pair is None:
        return 0.0
    x, y = pair

    dx = x - np.mean(x)
    dy = y - np.mean(y)
    denominator = np.sqrt(np.sum(dx ** 2) * np.sum(dy ** 2))
    if denominator < CORRELATION_EPS:
        return 0.0
    return float(np.sum(dx * dy) / denominator)


@dataclass
class EvaluationResult:
    """Scores of one filter run on one (clean, noisy) pair."""
    algorithm_name: str
    snr: float                   # dB
    mse: float
    correlation: float
    execution_time_us: int


def evaluate_filter(filter_instance: BaseFilter, clean, noisy) -> EvaluationResult:
    """
    Filter noisy, time it, and score the output against clean.

    Args:
        filter_instance: Configured filter
        clean: Reference signal
        noisy: Signal to filter

    Returns:
        EvaluationResult for this run
    """
    filtered, elapsed_us = filter_instance.measure_performance(noisy)
    return EvaluationResult(
        algorithm_name=filter_instance.name(),
        snr=calculate_snr(clean, filtered),
        mse=calculate_mse(clean, filtered),
        correlation=calculate_correlation(clean, filtered),
        execution_time_us=elapsed_us,
    )
