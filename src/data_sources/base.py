"""
Base class for data sources
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Sequence, Union

from core.code_snippet import CodeSnippet
from core.entities import Item, Layout, PageDefaults, Template

logger = logging.getLogger(__name__)

# Data sources may still hand back plain records instead of entities
ItemRecord = Union[Item, Mapping[str, Any]]
LayoutRecord = Union[Layout, Mapping[str, Any]]
TemplateRecord = Union[Template, Mapping[str, Any]]
PageDefaultsRecord = Union[PageDefaults, Mapping[str, Any]]
CodeRecord = Union[CodeSnippet, Sequence[CodeSnippet], str]


class DataSource(ABC):
    """
    Base interface for all data sources.

    All reads happen inside `loading()`, which calls `up()` once when the
    outermost block is entered and `down()` once when it is left, whether
    or not the block raised.
    """

    def __init__(self, site):
        self.site = site
        self._references = 0

    @contextmanager
    def loading(self) -> Iterator["DataSource"]:
        if self._references == 0:
            self.up()
        self._references += 1
        try:
            yield self
        finally:
            self._references -= 1
            if self._references == 0:
                self.down()

    def up(self) -> None:
        """Acquire whatever the data source reads from."""

    def down(self) -> None:
        """Release what `up()` acquired."""

    @property
    @abstractmethod
    def items(self) -> List[ItemRecord]:
        raise NotImplementedError

    @property
    @abstractmethod
    def layouts(self) -> List[LayoutRecord]:
        raise NotImplementedError

    @property
    def page_defaults(self) -> PageDefaultsRecord:
        return PageDefaults({})

    @property
    def templates(self) -> List[TemplateRecord]:
        return []

    @property
    def code(self) -> CodeRecord:
        return []
