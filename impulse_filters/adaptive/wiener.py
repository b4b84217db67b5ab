"""
Adaptive Wiener (LMS / RLS) predictive filter.

The filter has no access to the clean signal, so it adapts towards a
local smoothness proxy of the noisy input. Weights persist between
calls to process() until reset() or a reconfiguration.
"""

from __future__ import annotations
from enum import Enum
from typing import Any
import logging

import numpy as np

from ..base import BaseFilter, FilterParameterSpec, ParameterType
from ..registry import register_filter

logger = logging.getLogger(__name__)


class AdaptiveAlgorithm(Enum):
    """Weight update rule."""
    LMS = "lms"                     # least mean squares
    RLS = "rls"                     # recursive least squares, rank-one P update
    RLS_STANDARD = "rls_standard"   # recursive least squares, textbook P update


_VARIANT_LABELS = {
    AdaptiveAlgorithm.LMS: "",
    AdaptiveAlgorithm.RLS: "RLS_",
    AdaptiveAlgorithm.RLS_STANDARD: "RLSStd_",
}


@register_filter
class WienerFilter(BaseFilter):
    """
    Adaptive FIR predictor.

    For every sample the most-recent-first delay line d (length
    filter_order) is dotted with the weights w to give the output y.
    The desired response is a smoothed version of the input around the
    current sample; the error e = desired - y drives the update:
    - lms: w += mu * e * d
    - rls / rls_standard: w += k * e with the gain k from an inverse
      correlation matrix P (reinitialised to I / RLS_DELTA on every
      call) and forgetting factor lam. They differ only in how P is
      updated:
        rls:          P = (P - k d^T) / lam
        rls_standard: P = (P - k d^T P) / lam
      rls is the historical variant, rls_standard the textbook recursion.

    Weights start as small perturbations around zero drawn from
    numpy.random.default_rng(seed). With a fixed seed the filter is
    reproducible; reset() restores the same initial weights.

    Not thread-safe: process() mutates the weights.
    """

    category = "Adaptive"
    filter_name = "Wiener"
    description = "Adaptive LMS/RLS predictor trained on a local smoothness proxy"

    INIT_SCALE = 0.001
    RLS_DELTA = 0.001

    parameter_specs = [
        FilterParameterSpec(
            name="filter_order",
            display_name="Filter Order",
            param_type=ParameterType.INT,
            default=10,
            min_value=1,
            tooltip="Number of adaptive weights (delay line length)"
        ),
        FilterParameterSpec(
            name="mu",
            display_name="Adaptation Step",
            param_type=ParameterType.FLOAT,
            default=0.01,
            min_value=0.0,
            max_value=1.0,
            min_exclusive=True,
            max_exclusive=True,
            tooltip="LMS step size"
        ),
        FilterParameterSpec(
            name="lam",
            display_name="Forgetting Factor",
            param_type=ParameterType.FLOAT,
            default=0.99,
            min_value=0.0,
            max_value=1.0,
            min_exclusive=True,
            tooltip="RLS forgetting factor lambda (1 = infinite memory)"
        ),
        FilterParameterSpec(
            name="algorithm",
            display_name="Algorithm",
            param_type=ParameterType.CHOICE,
            default=AdaptiveAlgorithm.LMS,
            choices=[a.value for a in AdaptiveAlgorithm],
            enum_type=AdaptiveAlgorithm,
            tooltip="Weight update rule"
        ),
        FilterParameterSpec(
            name="seed",
            display_name="Seed",
            param_type=ParameterType.INT,
            default=None,
            min_value=0,
            optional=True,
            tooltip="Seed for the initial weights (None = nondeterministic)"
        ),
    ]

    def _apply_parameters(self, params: dict[str, Any]) -> None:
        self._parameters = params
        self.reset()

    def reset(self) -> None:
        """Reinitialise the weights to their initial perturbations."""
        rng = np.random.default_rng(self.seed)
        self._weights = self.INIT_SCALE * (rng.random(self.filter_order) - 0.5)
        logger.debug("%r weights reset", self)

    @property
    def filter_order(self) -> int:
        return self.get_parameter("filter_order")

    @property
    def mu(self) -> float:
        return self.get_parameter("mu")

    @property
    def lam(self) -> float:
        return self.get_parameter("lam")

    @property
    def algorithm(self) -> AdaptiveAlgorithm:
        return self.get_parameter("algorithm")

    @property
    def seed(self) -> int | None:
        return self.get_parameter("seed")

    @property
    def weights(self) -> np.ndarray:
        """Current adaptive weights (copy)."""
        return self._weights.copy()

    def name(self) -> str:
        variant = _VARIANT_LABELS[self.algorithm]
        label = f"WienerFilter_{variant}{self.filter_order}_{self.mu!r}_{self.lam!r}"
        if self.seed is not None:
            label += f"_seed{self.seed}"
        return label

    def _process(self, signal: np.ndarray) -> np.ndarray:
        if self.algorithm == AdaptiveAlgorithm.RLS:
            return self._process_rls(signal, standard=False)
        if self.algorithm == AdaptiveAlgorithm.RLS_STANDARD:
            return self._process_rls(signal, standard=True)
        return self._process_lms(signal)

    def _process_lms(self, signal: np.ndarray) -> np.ndarray:
        n_samples = signal.size
        mu = self.mu
        weights = self._weights
        delay = np.zeros(self.filter_order)
        output = np.empty(n_samples)

        for n in range(n_samples):
            delay[1:] = delay[:-1]
            delay[0] = signal[n]

            y = weights @ delay

            # Neighbour average; the last sample stands in for its missing successor
            desired = signal[n]
            if n > 0:
                following = signal[n + 1] if n < n_samples - 1 else signal[n]
                desired = 0.5 * (signal[n - 1] + following)

            error = desired - y
            weights += mu * error * delay
            output[n] = y

        return output

    def _process_rls(self, signal: np.ndarray, standard: bool) -> np.ndarray:
        n_samples = signal.size
        lam = self.lam
        weights = self._weights
        delay = np.zeros(self.filter_order)
        inverse_corr = np.eye(self.filter_order) / self.RLS_DELTA
        output = np.empty(n_samples)

        for n in range(n_samples):
            delay[1:] = delay[:-1]
            delay[0] = signal[n]

            y = weights @ delay

            desired = signal[n]
            if 2 < n < n_samples - 2:
                desired = np.mean(signal[n - 2:n + 3])

            error = desired - y

            projected = inverse_corr @ delay
            gain = projected / (lam + delay @ projected)
            weights += gain * error
            if standard:
                inverse_corr = (inverse_corr - np.outer(gain, delay @ inverse_corr)) / lam
            else:
                inverse_corr = (inverse_corr - np.outer(gain, delay)) / lam

            output[n] = y

        return output
