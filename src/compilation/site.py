"""
Site - the in-memory representation of a site.

Holds the items, layouts, templates, page defaults and custom code loaded
from the data source, the site configuration, and the data source, router
and compiler that work on them.
"""
import functools
import logging
import re
import warnings
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union

import yaml

from core.code_snippet import CodeSnippet
from core.entities import Item, Layout, PageDefaults, Template, cleaned_identifier
from core.errors import UnknownDataSourceError, UnknownRouterError
from core.plugins import PluginKind, PluginRegistry, plugin, plugin_registry
from compilation.compiler import Compiler
from compilation.rules import RuleSet
from delivery.routers import Router
from filters.base import Filter
from services.config import DEFAULT_CONFIG, SiteConfig, merge_config

logger = logging.getLogger(__name__)

Entity = TypeVar("Entity")

LEGACY_CODE_FILENAME = "<site code>"
_LAST_SEGMENT = re.compile(r"[^/]+/$")


def _deprecated(message: str) -> None:
    warnings.warn(message, DeprecationWarning, stacklevel=4)
    logger.warning(f"DEPRECATION WARNING: {message}")


def _item_from_record(record: Mapping[str, Any]) -> Item:
    content = record.get("content", record.get("uncompiled_content", ""))
    attributes = {k: v for k, v in record.items() if k not in ("content", "uncompiled_content")}
    identifier = record.get("identifier") or record.get("path") or "/"
    return Item(
        content,
        attributes,
        identifier,
        mtime=record.get("mtime"),
        binary=bool(record.get("binary", False)),
    )


def _layout_from_record(record: Mapping[str, Any]) -> Layout:
    attributes = {k: v for k, v in record.items() if k != "content"}
    identifier = record.get("identifier") or record.get("path") or record.get("name")
    return Layout(record.get("content", ""), attributes, identifier, mtime=record.get("mtime"))


def _template_from_record(record: Mapping[str, Any]) -> Template:
    meta = record.get("meta") or {}
    if isinstance(meta, str):
        meta = yaml.safe_load(meta) or {}
    return Template(record.get("content", ""), dict(meta), record.get("name"))


def _normalize(
    records: Optional[Sequence[Union[Entity, Mapping[str, Any]]]],
    entity_type: Type[Entity],
    from_record: Callable[[Mapping[str, Any]], Entity],
    accessor: str,
) -> List[Entity]:
    """
    Entities pass through unchanged; plain mappings returned by older data
    sources are wrapped, with a deprecation warning.
    """
    records = list(records or [])
    if any(isinstance(record, Mapping) for record in records):
        _deprecated(
            f"DataSource.{accessor} should return {entity_type.__name__} objects, not plain mappings. "
            f"Future versions will not support these outdated data sources."
        )

    entities = []
    for record in records:
        if isinstance(record, entity_type):
            entities.append(record)
        elif isinstance(record, Mapping):
            entities.append(from_record(record))
        else:
            raise TypeError(f"DataSource.{accessor} returned unsupported {type(record).__name__}")
    return entities


def _normalize_page_defaults(record: Union[PageDefaults, Mapping[str, Any], None]) -> PageDefaults:
    if isinstance(record, PageDefaults):
        return record
    if record is None:
        return PageDefaults({})
    if isinstance(record, Mapping):
        _deprecated("DataSource.page_defaults should return a PageDefaults object, not a plain mapping.")
        return PageDefaults(dict(record))
    raise TypeError(f"DataSource.page_defaults returned unsupported {type(record).__name__}")


def _normalize_code(record: Union[CodeSnippet, Sequence[CodeSnippet], str, None]) -> List[CodeSnippet]:
    if record is None:
        return []
    if isinstance(record, CodeSnippet):
        return [record]
    if isinstance(record, str):
        _deprecated("DataSource.code should return CodeSnippet objects, not a string.")
        return [CodeSnippet(record, LEGACY_CODE_FILENAME)]

    snippets = list(record)
    for snippet in snippets:
        if not isinstance(snippet, CodeSnippet):
            raise TypeError(f"DataSource.code returned unsupported {type(snippet).__name__}")
    return snippets


class Site:
    """
    Creating a site resolves the data source, loads the custom code (which
    may define routers, filters and rules) and then resolves the router.
    Site data is only read by `load_data()`.
    """

    def __init__(
        self,
        config: Union[SiteConfig, Mapping[str, Any], None] = None,
        registry: Optional[PluginRegistry] = None,
    ):
        self.registry = registry if registry is not None else plugin_registry

        overrides = config.model_dump() if isinstance(config, SiteConfig) else config
        self.config = merge_config(DEFAULT_CONFIG, overrides)

        data_source_class = self.registry.find(PluginKind.DATA_SOURCE, self.config.data_source)
        if data_source_class is None:
            raise UnknownDataSourceError(self.config.data_source)
        self.data_source = data_source_class(self)

        self.compiler = Compiler(self)
        self.rules = RuleSet()

        self.items: List[Item] = []
        self.layouts: List[Layout] = []
        self.templates: List[Template] = []
        self.page_defaults = PageDefaults({}, site=self)
        self.code_snippets: List[CodeSnippet] = []
        self.code_namespace: Dict[str, Any] = {}

        self._code_loaded = False
        self._data_loaded = False

        # Custom code may define the router
        self.load_code()

        router_class = self.registry.find(PluginKind.ROUTER, self.config.router)
        if router_class is None:
            raise UnknownRouterError(self.config.router)
        self.router = router_class(self)

    def _new_code_namespace(self) -> Dict[str, Any]:
        return {
            "__name__": "site_code",
            "site": self,
            "rules": self.rules,
            "plugin_registry": self.registry,
            "plugin": functools.partial(plugin, registry=self.registry),
            "PluginKind": PluginKind,
            "Filter": Filter,
            "Router": Router,
        }

    def load_code(self, force: bool = False) -> None:
        """
        Execute the site's custom code once. All snippets share one
        namespace, so later snippets see what earlier ones defined.
        """
        if self._code_loaded and not force:
            return

        with self.data_source.loading():
            snippets = _normalize_code(self.data_source.code)

        self.rules.clear()
        self.code_namespace = self._new_code_namespace()
        for snippet in snippets:
            snippet.site = self
            snippet.load(self.code_namespace, force=force)

        self.code_snippets = snippets
        self._code_loaded = True
        logger.info(f"Loaded {len(snippets)} code snippets")

    def load_data(self, force: bool = False) -> None:
        """
        Fetch all site data from the data source and link items to their
        parents. Cached after the first call unless force is set.
        """
        if self._data_loaded and not force:
            return

        self.load_code(force)

        with self.data_source.loading():
            items = _normalize(self.data_source.items, Item, _item_from_record, "items")
            page_defaults = _normalize_page_defaults(self.data_source.page_defaults)
            layouts = _normalize(self.data_source.layouts, Layout, _layout_from_record, "layouts")
            templates = _normalize(self.data_source.templates, Template, _template_from_record, "templates")

        for entity in [*items, page_defaults, *layouts, *templates]:
            entity.site = self

        self.items = items
        self.page_defaults = page_defaults
        self.layouts = layouts
        self.templates = templates

        self._link_items()

        # Reps of the previous load refer to stale items
        self.compiler.reps = []
        self._data_loaded = True
        logger.info(f"Loaded {len(items)} items, {len(layouts)} layouts, {len(templates)} templates")

    def _link_items(self) -> None:
        by_path: Dict[str, Item] = {}
        for item in self.items:
            item.parent = None
            item.children = []
            by_path.setdefault(item.path, item)

        for item in self.items:
            if item.path == "/":
                continue
            parent = by_path.get(_LAST_SEGMENT.sub("", item.path))
            if parent is None:
                continue
            item.parent = parent
            parent.children.append(item)

    def item_with_identifier(self, identifier: str) -> Optional[Item]:
        wanted = cleaned_identifier(identifier)
        return next((item for item in self.items if item.identifier == wanted), None)
