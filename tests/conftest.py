"""Shared pytest fixtures.

Sites in unit tests read from an in-memory data source registered in a
fresh plugin registry, so tests never touch the process-wide registry.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, List

import pytest

from compilation import Site, register_builtin_plugins
from core.plugins import PluginKind, PluginRegistry
from data_sources.base import DataSource
from filters.base import Filter


@dataclass
class SiteData:
    """What the memory data source hands out; counts every read."""

    items: List[Any] = field(default_factory=list)
    layouts: List[Any] = field(default_factory=list)
    templates: List[Any] = field(default_factory=list)
    page_defaults: Any = None
    code: Any = field(default_factory=list)
    calls: Counter = field(default_factory=Counter)


class MemoryDataSource(DataSource):
    data: SiteData

    def up(self) -> None:
        self.data.calls["up"] += 1

    def down(self) -> None:
        self.data.calls["down"] += 1

    def _read(self, name: str) -> Any:
        self.data.calls[name] += 1
        value = getattr(self.data, name)
        return list(value) if isinstance(value, list) else value

    @property
    def items(self):
        return self._read("items")

    @property
    def layouts(self):
        return self._read("layouts")

    @property
    def templates(self):
        return self._read("templates")

    @property
    def page_defaults(self):
        return self._read("page_defaults")

    @property
    def code(self):
        return self._read("code")


class UpcaseFilter(Filter):
    def run(self, content: str, **params: Any) -> str:
        return content.upper()


class AppendFilter(Filter):
    def run(self, content: str, suffix: str = "!", **params: Any) -> str:
        return content + suffix


class TruncateFilter(Filter):
    def run(self, content: str, length: int = 3, **params: Any) -> str:
        return content[:length]


class ReverseBytesFilter(Filter):
    binary = True

    def run(self, content: bytes, **params: Any) -> bytes:
        return content[::-1]


@pytest.fixture
def registry() -> PluginRegistry:
    """Registry holding the built-in plugins plus the small test filters."""
    registry = register_builtin_plugins(PluginRegistry())
    registry.register(PluginKind.FILTER, "upcase", UpcaseFilter)
    registry.register(PluginKind.FILTER, "append", AppendFilter)
    registry.register(PluginKind.FILTER, "truncate", TruncateFilter)
    registry.register(PluginKind.FILTER, "reverse_bytes", ReverseBytesFilter)
    return registry


@pytest.fixture
def site_data() -> SiteData:
    return SiteData()


@pytest.fixture
def make_site(registry: PluginRegistry, site_data: SiteData) -> Callable[..., Site]:
    """Build a Site reading from `site_data`; keyword arguments become config."""
    source_class = type("MemoryDataSource", (MemoryDataSource,), {"data": site_data})
    registry.register(PluginKind.DATA_SOURCE, "memory", source_class)

    def factory(**config: Any) -> Site:
        config.setdefault("data_source", "memory")
        return Site(config, registry=registry)

    return factory
