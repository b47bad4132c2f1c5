"""
Base class for filters
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from core.entities import Content


class Filter(ABC):
    """
    Base interface for all filters.

    A filter is created for a single step with the assigns of the rep
    being compiled, and transforms one piece of content. Filters that can
    handle bytes set `binary = True`; all others are text-only.
    """

    identifiers: Tuple[str, ...] = ()
    binary: bool = False

    def __init__(self, assigns: Optional[Dict[str, Any]] = None):
        self.assigns = dict(assigns or {})

    @property
    def item(self):
        return self.assigns.get("item")

    @property
    def item_rep(self):
        return self.assigns.get("item_rep")

    @property
    def site(self):
        return self.assigns.get("site")

    @abstractmethod
    def run(self, content: Content, **params: Any) -> Content:
        """
        Return the transformed content.
        Exceptions propagate to the rule that requested the step.
        """
        raise NotImplementedError
