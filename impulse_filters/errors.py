"""
Exceptions raised by the impulse noise filter system.

Provides:
- FilterError: Base class for all filter errors
- InvalidParameter: A parameter value violates its constraints
- SingularSystem: A linear system could not be solved
- InvalidSignal: An input signal is not one-dimensional
"""


class FilterError(Exception):
    """Base class for errors raised by impulse_filters."""


class InvalidParameter(FilterError, ValueError):
    """Raised at construction or reconfiguration when a parameter is invalid."""


class SingularSystem(FilterError, ArithmeticError):
    """Raised when Gaussian elimination meets a near-zero pivot."""


class InvalidSignal(FilterError, ValueError):
    """Raised when a signal cannot be interpreted as a 1D sample sequence."""
