"""
Deep merge of nested configuration mappings.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping


def copy_tree(value: Any) -> Any:
    """
    Copy the mapping structure of ``value``.

    Lists and leaves (loggers and other live objects) are shared, so a
    caller's list keeps receiving what is appended to it.
    """
    if isinstance(value, Mapping):
        return {key: copy_tree(item) for key, item in value.items()}
    return value


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge ``override`` onto ``base`` and return a new dict.

    Nested mappings are merged key by key. Scalars and lists in
    ``override`` replace the value in ``base`` outright. Neither input
    is modified.

    Args:
        base: Lower-precedence mapping.
        override: Higher-precedence mapping.

    Returns:
        Merged dictionary.
    """
    result: Dict[str, Any] = copy_tree(base)

    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy_tree(value)

    return result


def set_path(target: Dict[str, Any], path: list, value: Any) -> None:
    """
    Set ``value`` at a nested key path, creating mappings as needed.

    A scalar found on the way is replaced by a mapping.
    """
    node = target
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value
