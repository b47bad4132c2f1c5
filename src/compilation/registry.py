"""
Registration of the filters, routers and data sources shipped with the project.

Everything in here is registered in the default plugin registry on import.
Site code can register additional plugins, or replace these, by name.
"""
from core.plugins import PluginKind, PluginRegistry, plugin_registry
from data_sources.filesystem import FilesystemDataSource
from delivery.routers import DefaultRouter, NoDirsRouter
from filters.css_filter import CssMinifyFilter
from filters.helpers import EscapeHtmlFilter
from filters.jinja_filter import JinjaFilter
from filters.markdown_filter import MarkdownFilter

BUILTIN_FILTERS = (JinjaFilter, MarkdownFilter, CssMinifyFilter, EscapeHtmlFilter)
BUILTIN_ROUTERS = (DefaultRouter, NoDirsRouter)
BUILTIN_DATA_SOURCES = {"filesystem": FilesystemDataSource}


def register_builtin_plugins(registry: PluginRegistry) -> PluginRegistry:
    for filter_class in BUILTIN_FILTERS:
        for name in filter_class.identifiers:
            registry.register(PluginKind.FILTER, name, filter_class)

    for router_class in BUILTIN_ROUTERS:
        for name in router_class.identifiers:
            registry.register(PluginKind.ROUTER, name, router_class)

    for name, data_source_class in BUILTIN_DATA_SOURCES.items():
        registry.register(PluginKind.DATA_SOURCE, name, data_source_class)

    return registry


register_builtin_plugins(plugin_registry)
