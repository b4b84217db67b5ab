"""Adaptive filters whose state evolves across calls."""

from .wiener import AdaptiveAlgorithm, WienerFilter

__all__ = ["AdaptiveAlgorithm", "WienerFilter"]
