"""
Helper functions for the GeoCSC configuration system.
"""

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``override`` onto ``base`` and return a new dictionary.

    Nested dictionaries are merged key by key; any other value, lists
    included, replaces the base value outright.
    """
    merged = dict(base)

    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value

    return merged
