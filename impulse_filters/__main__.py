"""
List the registered filters and the benchmark suites.

Usage:
    python -m impulse_filters
"""

from impulse_filters import FilterRegistry

registry = FilterRegistry.get_instance()

for category in registry.get_categories():
    print(f"{category} filters:\n")
    for name in registry.get_filter_names(category):
        print(registry.get_filter_class(name).describe())
        print()

for suite in registry.get_suite_names():
    print(f"Suite '{suite}':")
    for configured in registry.create_suite(suite):
        print(f"  {configured.name()}")
    print()
