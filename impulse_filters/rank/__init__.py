"""Rank-order filters: median and morphological min/max."""

from .median import MedianFilter
from .morphological import MorphologicalFilter, Operation

__all__ = ["MedianFilter", "MorphologicalFilter", "Operation"]
