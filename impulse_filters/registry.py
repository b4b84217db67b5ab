"""
Filter lookup by name and the standard benchmark configurations.

Provides:
- FilterRegistry: Singleton mapping filter_name -> filter class, plus the
  named suites of configured filters compared by benchmark runs
- register_filter: Decorator for auto-registration
"""

from __future__ import annotations
from typing import Any, Type

from .base import BaseFilter


class FilterRegistry:
    """
    Singleton registry for filter classes.

    filter_name is globally unique; categories are derived from the
    registered classes.
    """

    _instance: FilterRegistry | None = None

    # Listing order; unknown categories follow alphabetically
    CATEGORY_ORDER = ["Rank", "Detection", "Smoothing", "Adaptive"]

    # (filter_name, parameters) per suite
    SUITES: dict[str, list[tuple[str, dict[str, Any]]]] = {
        "quick": [
            ("Median", {"window_size": 7}),
            ("Wiener", {"filter_order": 8, "mu": 0.01, "lam": 0.99}),
            ("Morphological", {"operation": "opening", "element_size": 5}),
            ("Outlier Detection", {"detection_method": "mad_based",
                                   "interpolation_method": "linear",
                                   "threshold": 3.0, "window_size": 11}),
        ],
        "full": [
            ("Median", {"window_size": 5}),
            ("Median", {"window_size": 7}),
            ("Median", {"window_size": 9}),
            ("Wiener", {"filter_order": 6, "mu": 0.01, "lam": 0.99}),
            ("Wiener", {"filter_order": 10, "mu": 0.005, "lam": 0.995}),
            ("Morphological", {"operation": "opening", "element_size": 3}),
            ("Morphological", {"operation": "closing", "element_size": 5}),
            ("Outlier Detection", {"detection_method": "mad_based",
                                   "interpolation_method": "linear",
                                   "threshold": 2.5, "window_size": 9}),
            ("Outlier Detection", {"detection_method": "statistical",
                                   "interpolation_method": "median_based",
                                   "threshold": 3.0, "window_size": 11}),
            ("Outlier Detection", {"detection_method": "adaptive_threshold",
                                   "interpolation_method": "autoregressive",
                                   "threshold": 2.0, "window_size": 7}),
        ],
    }

    def __init__(self) -> None:
        self._filters: dict[str, Type[BaseFilter]] = {}

    @classmethod
    def get_instance(cls) -> FilterRegistry:
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = FilterRegistry()
        return cls._instance

    def register(self, filter_class: Type[BaseFilter]) -> None:
        """Register a filter class under its filter_name.

        Raises:
            ValueError: If the name is already taken
        """
        name = filter_class.filter_name
        existing = self._filters.get(name)
        if existing is not None:
            raise ValueError(f"Filter '{name}' already registered by {existing.__module__}.{existing.__name__}")
        self._filters[name] = filter_class

    def get_categories(self) -> list[str]:
        """Get all registered categories in listing order."""
        def sort_key(cat: str) -> tuple[int, str]:
            if cat in self.CATEGORY_ORDER:
                return (self.CATEGORY_ORDER.index(cat), cat)
            return (len(self.CATEGORY_ORDER), cat)
        return sorted({cls.category for cls in self._filters.values()}, key=sort_key)

    def get_filter_names(self, category: str) -> list[str]:
        """Get filter names of one category (sorted)."""
        return sorted(name for name, cls in self._filters.items() if cls.category == category)

    def get_all_filter_names(self) -> list[str]:
        """Get all registered filter names (sorted)."""
        return sorted(self._filters)

    def get_filter_class(self, filter_name: str) -> Type[BaseFilter]:
        """Get filter class by filter_name."""
        if filter_name not in self._filters:
            raise KeyError(f"Unknown filter: {filter_name}")
        return self._filters[filter_name]

    def create_filter(self, filter_name: str, **kwargs) -> BaseFilter:
        """Create a filter instance by filter_name."""
        return self.get_filter_class(filter_name)(**kwargs)

    def get_suite_names(self) -> list[str]:
        return list(self.SUITES)

    def create_suite(self, suite: str) -> list[BaseFilter]:
        """
        Build fresh instances of every configuration in a suite.

        Raises:
            KeyError: If the suite is unknown
        """
        if suite not in self.SUITES:
            raise KeyError(f"Unknown suite: {suite}")
        return [self.create_filter(name, **params) for name, params in self.SUITES[suite]]


def register_filter(cls: Type[BaseFilter]) -> Type[BaseFilter]:
    """
    Decorator to auto-register a filter class.

    Usage:
        @register_filter
        class MedianFilter(BaseFilter):
            category = "Rank"
            filter_name = "Median"
            ...
    """
    FilterRegistry.get_instance().register(cls)
    return cls
