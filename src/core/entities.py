from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


Content = Union[str, bytes]


def cleaned_identifier(identifier: str) -> str:
    """
    Normalize an identifier to the '/foo/bar/' form.
    """
    stripped = str(identifier).strip("/")
    return f"/{stripped}/" if stripped else "/"


@dataclass(eq=False)
class Item:
    """
    A content unit loaded from a data source. The raw content is never
    modified; compilation works on the item's representations.
    """
    raw_content: Content
    attributes: Dict[str, Any]
    identifier: str
    mtime: Optional[float] = None
    binary: bool = False

    site: Any = field(default=None, repr=False)
    parent: Optional[Item] = field(default=None, repr=False)
    children: List[Item] = field(default_factory=list, repr=False)
    reps: List[Any] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self.identifier = cleaned_identifier(self.identifier)

    @property
    def path(self) -> str:
        return self.identifier

    def __getitem__(self, key: str) -> Any:
        return self.attributes.get(key)

    def rep_named(self, name: str):
        return next((rep for rep in self.reps if rep.name == name), None)


@dataclass(eq=False)
class Layout:
    """
    A reusable template, looked up by identifier.
    """
    raw_content: str
    attributes: Dict[str, Any]
    identifier: str
    mtime: Optional[float] = None

    site: Any = field(default=None, repr=False)

    def __post_init__(self):
        self.identifier = cleaned_identifier(self.identifier)

    def __getitem__(self, key: str) -> Any:
        return self.attributes.get(key)


@dataclass(eq=False)
class Template:
    """
    A starting point for new items: content plus default attributes.
    """
    raw_content: str
    attributes: Dict[str, Any]
    name: str

    site: Any = field(default=None, repr=False)


@dataclass(eq=False)
class PageDefaults:
    """
    Attributes applied to every item unless the item overrides them.
    """
    attributes: Dict[str, Any] = field(default_factory=dict)
    mtime: Optional[float] = None

    site: Any = field(default=None, repr=False)
