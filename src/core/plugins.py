"""
Plugin registry: binds (kind, name) pairs to implementation classes.
Filters, routers and data sources are all resolved through it by name.
"""
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Type

logger = logging.getLogger(__name__)


class PluginKind(str, Enum):
    FILTER = "filter"
    ROUTER = "router"
    DATA_SOURCE = "data_source"


def _key(name: str) -> str:
    return str(name).strip().lower()


class PluginRegistry:
    """
    Lookup table of plugin implementations.

    Names are case-insensitive. Registering a name that already exists for
    the same kind replaces the previous implementation (last one wins), so
    site code can override built-in plugins.
    """

    def __init__(self):
        self._plugins: Dict[Tuple[PluginKind, str], Type] = {}

    def register(self, kind: PluginKind, name: str, implementation: Type) -> None:
        key = (PluginKind(kind), _key(name))
        previous = self._plugins.get(key)
        if previous is not None and previous is not implementation:
            logger.info(f"Replacing {key[0].value} '{key[1]}': {previous.__name__} -> {implementation.__name__}")
        self._plugins[key] = implementation

    def find(self, kind: PluginKind, name: str) -> Optional[Type]:
        """Return the implementation registered under name, or None."""
        return self._plugins.get((PluginKind(kind), _key(name)))

    def names(self, kind: PluginKind) -> List[str]:
        kind = PluginKind(kind)
        return sorted(name for plugin_kind, name in self._plugins if plugin_kind is kind)

    def __contains__(self, key: Tuple[PluginKind, str]) -> bool:
        kind, name = key
        return self.find(kind, name) is not None


plugin_registry = PluginRegistry()


def plugin(kind: PluginKind, *names: str, registry: Optional[PluginRegistry] = None) -> Callable[[Type], Type]:
    """
    Class decorator registering the class under every given name.

        @plugin(PluginKind.FILTER, "upcase", "uppercase")
        class UpcaseFilter(Filter):
            ...
    """
    if not names:
        raise ValueError("plugin() requires at least one name")

    def decorator(cls: Type) -> Type:
        target = registry if registry is not None else plugin_registry
        for name in names:
            target.register(kind, name, cls)
        cls.identifiers = tuple(_key(name) for name in names)
        return cls

    return decorator
