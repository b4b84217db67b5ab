"""Linear smoothing filters."""

from .savgol import SavgolFilter, gauss_elimination, savgol_coefficients

__all__ = ["SavgolFilter", "gauss_elimination", "savgol_coefficients"]
