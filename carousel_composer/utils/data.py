"""
Data Utilities
==============

Helpers for module data dictionaries.
"""

import copy
from typing import Any, Dict, Mapping


def deep_copy(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Return an independent copy of module data."""
    return copy.deepcopy(dict(data))


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge ``override`` over ``base`` recursively without mutating either.

    Nested mappings are merged key by key; any other value (lists included)
    in ``override`` replaces the base value.
    """
    result = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result
