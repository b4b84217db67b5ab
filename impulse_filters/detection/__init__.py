"""Filters that locate impulses and repair only the flagged samples."""

from .outlier import DetectionMethod, InterpolationMethod, OutlierDetection

__all__ = ["DetectionMethod", "InterpolationMethod", "OutlierDetection"]
