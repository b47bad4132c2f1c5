"""
ItemRep: one compilable representation of an item, holding its snapshots
"""
import logging
from typing import Any, Dict, List, Optional

from core.entities import Content, Item, Layout
from core.errors import (
    CannotFilterBinaryError,
    CannotLayoutBinaryError,
    NoSuchSnapshotError,
    SnapshotExistsError,
    UnknownFilterError,
    UnmetDependencyError,
)
from core.plugins import PluginKind, PluginRegistry, plugin_registry

logger = logging.getLogger(__name__)

RAW = "raw"
PRE = "pre"
POST = "post"
LAST = "last"


class ItemRep:
    """
    A named view of an item (e.g. 'default', 'rss').

    Content lives in an ordered mapping of snapshot name -> content. The
    'last' snapshot is the active one; filter and layout steps read it and
    replace it. Other snapshots are written once per compilation pass.
    """

    def __init__(self, item: Item, name: str, registry: Optional[PluginRegistry] = None):
        self.item = item
        self.name = name
        self.binary = item.binary
        self.registry = registry or plugin_registry

        # Set by the router
        self.raw_path: Optional[str] = None
        self.path: Optional[str] = None

        self.assigns: Dict[str, Any] = {}
        self.snapshots: Dict[str, Content] = {}
        self.compiled = False
        self.reset()

    def reset(self) -> None:
        """Drop all compilation state and start again from the raw content."""
        self.snapshots = {RAW: self.item.raw_content, LAST: self.item.raw_content}
        self.assigns = {}
        self.compiled = False

    @property
    def content(self) -> Content:
        return self.snapshots[LAST]

    def has_snapshot(self, name: str) -> bool:
        return name in self.snapshots

    def snapshot(self, name: str) -> None:
        """Store the current 'last' content under the given name."""
        if name == LAST:
            return
        if name in self.snapshots:
            raise SnapshotExistsError(self, name)
        self.snapshots[name] = self.snapshots[LAST]

    def snapshot_names(self) -> List[str]:
        return list(self.snapshots)

    def compiled_content(self, snapshot: str = LAST) -> Content:
        """
        Content of the given snapshot. While the rep is not compiled only
        snapshots other than 'last' that already exist can be read.
        """
        if not self.compiled and (snapshot == LAST or snapshot not in self.snapshots):
            raise UnmetDependencyError(self)
        if snapshot not in self.snapshots:
            raise NoSuchSnapshotError(self, snapshot)
        return self.snapshots[snapshot]

    def filter(self, filter_name: str, filter_args: Optional[Dict[str, Any]] = None) -> None:
        filter_class = self._filter_class(filter_name)
        if self.binary and not getattr(filter_class, "binary", False):
            raise CannotFilterBinaryError(self, filter_name)

        result = filter_class(self.assigns).run(self.content, **(filter_args or {}))
        self.snapshots[LAST] = result

    def layout(self, layout: Layout, filter_name: str, filter_args: Optional[Dict[str, Any]] = None) -> None:
        """
        Render the layout's content through the filter, with this rep's
        current content available to the template as 'content'.
        """
        if self.binary:
            raise CannotLayoutBinaryError(self)
        filter_class = self._filter_class(filter_name)

        before = self.content
        assigns = dict(self.assigns, layout=layout, content=before)
        result = filter_class(assigns).run(layout.raw_content, **(filter_args or {}))

        if PRE not in self.snapshots:
            self.snapshots[PRE] = before
        self.snapshots[LAST] = result

    def finish(self) -> None:
        """Mark compilation as done; 'post' records the final content."""
        if POST not in self.snapshots:
            self.snapshots[POST] = self.snapshots[LAST]
        self.compiled = True

    def _filter_class(self, filter_name: str):
        filter_class = self.registry.find(PluginKind.FILTER, filter_name)
        if filter_class is None:
            raise UnknownFilterError(filter_name)
        return filter_class

    def __repr__(self) -> str:
        return f"<ItemRep item={self.item.identifier!r} name={self.name!r} binary={self.binary}>"
