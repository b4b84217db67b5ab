"""
Savitzky-Golay smoothing filter.

Taps are derived once per configuration from a local polynomial
least-squares fit, then applied as a fixed FIR with reflective edges.
"""

from __future__ import annotations
from typing import Any
import logging

import numpy as np

from ..base import BaseFilter, FilterParameterSpec, ParameterType
from ..errors import InvalidParameter, SingularSystem
from ..registry import register_filter

logger = logging.getLogger(__name__)

# Pivots smaller than this make the normal equations unsolvable
PIVOT_EPS = 1e-12


def gauss_elimination(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """
    Solve matrix @ x = rhs by Gaussian elimination with partial pivoting.

    Args:
        matrix: Square coefficient matrix (not modified)
        rhs: Right-hand side vector (not modified)

    Returns:
        Solution vector

    Raises:
        SingularSystem: If a pivot magnitude drops below PIVOT_EPS
    """
    a = np.array(matrix, dtype=np.float64)
    b = np.array(rhs, dtype=np.float64)
    n = a.shape[0]

    # Forward elimination
    for i in range(n):
        max_row = i + int(np.argmax(np.abs(a[i:, i])))
        if max_row != i:
            a[[i, max_row]] = a[[max_row, i]]
            b[[i, max_row]] = b[[max_row, i]]

        if abs(a[i, i]) < PIVOT_EPS:
            raise SingularSystem(f"Matrix is singular (pivot {a[i, i]:.3e} in column {i})")

        factors = a[i + 1:, i] / a[i, i]
        a[i + 1:, i:] -= factors[:, None] * a[i, i:]
        b[i + 1:] -= factors * b[i]

    # Back substitution
    solution = np.zeros(n, dtype=np.float64)
    for i in range(n - 1, -1, -1):
        solution[i] = (b[i] - a[i, i + 1:] @ solution[i + 1:]) / a[i, i]
    return solution


def savgol_coefficients(window_size: int, poly_order: int) -> np.ndarray:
    """
    Smoothing taps of a Savitzky-Golay filter.

    Fits a polynomial of degree poly_order over the offsets
    -half..half (half = window_size // 2) and keeps the weights that
    reproduce the fitted value at the centre sample.

    Returns:
        Array of window_size taps, ordered from offset -half to +half
    """
    half = window_size // 2
    offsets = np.arange(-half, half + 1, dtype=np.float64)

    # Normal equations: A[i, j] = sum_k k^(i+j)
    moments = np.array([np.sum(offsets ** p) for p in range(2 * poly_order + 1)])
    degrees = np.arange(poly_order + 1)
    matrix = moments[degrees[:, None] + degrees[None, :]]

    # Only the constant term is evaluated at the centre (k = 0)
    rhs = np.zeros(poly_order + 1)
    rhs[0] = 1.0

    poly_coeffs = gauss_elimination(matrix, rhs)
    return (offsets[:, None] ** degrees[None, :]) @ poly_coeffs


@register_filter
class SavgolFilter(BaseFilter):
    """
    Savitzky-Golay polynomial smoothing.

    Equivalent to fitting a polynomial of degree poly_order to every
    window of window_size samples and taking its value at the centre.
    Preserves peak height and width better than a moving average of the
    same length; poly_order=0 reduces to the moving average itself.

    Samples requested beyond the signal are mirrored around the first
    and last samples (without repeating them).
    """

    category = "Smoothing"
    filter_name = "Savitzky-Golay"
    description = "Local polynomial least-squares smoothing (fixed FIR taps)"

    parameter_specs = [
        FilterParameterSpec(
            name="window_size",
            display_name="Window Size",
            param_type=ParameterType.INT,
            default=11,
            min_value=1,
            odd_only=True,
            tooltip="Number of samples in each polynomial fit (positive, odd)"
        ),
        FilterParameterSpec(
            name="poly_order",
            display_name="Polynomial Order",
            param_type=ParameterType.INT,
            default=3,
            min_value=0,
            tooltip="Degree of the fitted polynomial (must be < window size)"
        ),
    ]

    def validate_parameters(self, params: dict[str, Any]) -> None:
        if params["poly_order"] >= params["window_size"]:
            raise InvalidParameter(
                f"Polynomial Order ({params['poly_order']}) must be less than "
                f"Window Size ({params['window_size']})"
            )

    def _apply_parameters(self, params: dict[str, Any]) -> None:
        current = self._parameters
        if (
            current.get("window_size") == params["window_size"]
            and current.get("poly_order") == params["poly_order"]
        ):
            self._parameters = params
            return

        coefficients = savgol_coefficients(params["window_size"], params["poly_order"])
        logger.debug(
            "Savitzky-Golay taps recomputed for window=%d, order=%d",
            params["window_size"], params["poly_order"],
        )
        self._coefficients = coefficients
        self._parameters = params

    @property
    def window_size(self) -> int:
        return self.get_parameter("window_size")

    @property
    def poly_order(self) -> int:
        return self.get_parameter("poly_order")

    @property
    def coefficients(self) -> np.ndarray:
        """Filter taps (copy), from offset -half to +half."""
        return self._coefficients.copy()

    def name(self) -> str:
        return f"SavgolFilter_{self.window_size}_{self.poly_order}"

    def _process(self, signal: np.ndarray) -> np.ndarray:
        n = signal.size
        half = self.window_size // 2
        indices = np.arange(n)[:, None] - half + np.arange(self.window_size)[None, :]
        return signal[self._reflect(indices, n)] @ self._coefficients

    @staticmethod
    def _reflect(indices: np.ndarray, n: int) -> np.ndarray:
        """Map out-of-range sample indices back into [0, n)."""
        indices = np.where(indices < 0, -indices, indices)
        indices = np.where(indices >= n, 2 * n - 2 - indices, indices)
        return np.where(indices < 0, 0, indices)
