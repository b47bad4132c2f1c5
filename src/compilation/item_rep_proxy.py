"""
ItemRepProxy - the item rep as seen by compilation rules
"""
import logging
from typing import Any, Dict, Optional

from core.entities import cleaned_identifier
from core.errors import UnknownLayoutError, UnmetDependencyError
from core.item_rep import LAST, ItemRep

logger = logging.getLogger(__name__)


class ItemRepProxy:
    """
    Wraps an item rep for the duration of one rule invocation.

    Layouts are addressed by identifier instead of by object. Before every
    filter or layout step the compiler recomputes the rep's assigns, since
    an earlier step may have changed what the next one should see.
    """

    def __init__(self, item_rep: ItemRep, compiler):
        self._item_rep = item_rep
        self._compiler = compiler

    @property
    def item(self):
        return self._item_rep.item

    @property
    def name(self) -> str:
        return self._item_rep.name

    @property
    def binary(self) -> bool:
        return self._item_rep.binary

    @property
    def path(self) -> Optional[str]:
        return self._item_rep.path

    @property
    def raw_path(self) -> Optional[str]:
        return self._item_rep.raw_path

    def compiled_content(self, snapshot: str = LAST):
        return self._item_rep.compiled_content(snapshot)

    def has_snapshot(self, name: str) -> bool:
        return self._item_rep.has_snapshot(name)

    def snapshot(self, name: str) -> None:
        self._item_rep.snapshot(name)

    def filter(self, name: str, args: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        """
        Run the 'last' content through the named filter. Arguments can be
        given as a dict or as keyword arguments.
        """
        filter_args = {**(args or {}), **kwargs}
        self._set_assigns()
        logger.debug(f"Filtering {self._item_rep} with {name}", extra={"item_rep": self._item_rep, "filter": name})
        try:
            self._item_rep.filter(name, filter_args)
        except UnmetDependencyError:
            raise
        except Exception:
            logger.error(
                f"Filter step '{name}' failed for {self._item_rep}",
                extra={"item_rep": self._item_rep, "filter": name},
            )
            raise

    def layout(self, layout_identifier: str) -> None:
        """Lay out the 'last' content using the layout with the given identifier."""
        self._set_assigns()

        layout = self._layout_with_identifier(layout_identifier)
        filter_name, filter_args = self._compiler.filter_for_layout(layout)

        logger.debug(
            f"Laying out {self._item_rep} with {layout.identifier} ({filter_name})",
            extra={"item_rep": self._item_rep, "filter": filter_name},
        )
        try:
            self._item_rep.layout(layout, filter_name, filter_args)
        except UnmetDependencyError:
            raise
        except Exception:
            logger.error(
                f"Layout step '{layout.identifier}' ({filter_name}) failed for {self._item_rep}",
                extra={"item_rep": self._item_rep, "filter": filter_name},
            )
            raise

    def _set_assigns(self) -> None:
        self._item_rep.assigns = self._compiler.assigns_for(self._item_rep)

    def _layout_with_identifier(self, layout_identifier: str):
        wanted = cleaned_identifier(layout_identifier)
        for layout in self._compiler.site.layouts:
            if layout.identifier == wanted:
                return layout
        raise UnknownLayoutError(layout_identifier)

    def __repr__(self) -> str:
        return f"<ItemRepProxy {self._item_rep!r}>"
