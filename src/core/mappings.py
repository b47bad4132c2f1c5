"""
Helpers for nested configuration and attribute mappings
"""
from types import MappingProxyType
from typing import Any, Mapping


def stringify_keys(value: Any) -> Any:
    """
    Return a copy of value where all mapping keys are recursively
    converted to strings. Sequences are walked, other values kept as-is.
    """
    if isinstance(value, Mapping):
        return {str(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(stringify_keys(item) for item in value)
    return value


def freeze_recursively(value: Any) -> Any:
    """
    Return a read-only view of value: mappings become MappingProxyType,
    lists and sets become tuples and frozensets.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_recursively(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_recursively(item) for item in value)
    if isinstance(value, set):
        return frozenset(freeze_recursively(item) for item in value)
    return value
