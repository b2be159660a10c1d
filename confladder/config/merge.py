"""
Merge Engine
============

Folds parsed configuration trees into a single accumulator, later trees
overriding earlier ones at the leaf level.
"""

from copy import deepcopy
from typing import Any, Dict, Iterable


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries with override taking precedence.

    Mappings present on both sides are merged recursively. Any other value
    from ``override`` (scalar, list, None, or a mapping replacing a
    non-mapping) replaces the base value wholesale.

    Args:
        base: Accumulated configuration
        override: Incoming configuration

    Returns:
        New merged dictionary; values taken from ``override`` are deep copies
    """
    result = base.copy()

    for key, value in override.items():
        if (key in result and
                isinstance(result[key], dict) and
                isinstance(value, dict)):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def merge_trees(trees: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Fold trees in order, starting from an empty configuration."""
    merged: Dict[str, Any] = {}
    for tree in trees:
        merged = deep_merge(merged, tree)
    return merged
