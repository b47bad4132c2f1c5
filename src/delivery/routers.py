"""
Routers decide where each item rep is written
"""
import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

from core.item_rep import ItemRep

logger = logging.getLogger(__name__)

DEFAULT_REP = "default"


class Router(ABC):
    """
    Base interface for all routers.
    """

    identifiers = ()

    def __init__(self, site):
        self.site = site

    @abstractmethod
    def path_for(self, rep: ItemRep) -> Optional[str]:
        """
        Site-relative output path starting with '/', e.g. '/about/index.html'.
        None means the rep is not written.
        """
        raise NotImplementedError

    def route(self, rep: ItemRep) -> Optional[str]:
        """Set rep.raw_path (on disk) and rep.path (URL) and return raw_path."""
        path = self.path_for(rep)
        if path is None:
            rep.raw_path = None
            rep.path = None
            return None

        rep.raw_path = os.path.join(self.site.config.output_dir, path.lstrip("/"))
        rep.path = self._strip_index_filename(path)
        return rep.raw_path

    def _strip_index_filename(self, path: str) -> str:
        directory, filename = path.rsplit("/", 1)
        if filename in self.site.config.index_filenames:
            return directory + "/"
        return path


def _extension(rep: ItemRep) -> str:
    return rep.item.attributes.get("extension") or "html"


class DefaultRouter(Router):
    """
    /about/ -> /about/index.html, other reps -> /about/index-<rep>.html,
    binary items -> /img/logo.png
    """

    identifiers = ("default",)

    def path_for(self, rep: ItemRep) -> Optional[str]:
        attributes = rep.item.attributes
        if attributes.get("skip_output"):
            return None

        identifier = rep.item.identifier
        if rep.binary and identifier != "/":
            return f"{identifier.rstrip('/')}.{_extension(rep)}"

        filename = attributes.get("filename", "index")
        if rep.name != DEFAULT_REP:
            filename = f"{filename}-{rep.name}"
        extension = attributes.get("output_extension", "html")
        return f"{identifier}{filename}.{extension}"


class NoDirsRouter(Router):
    """
    /about/ -> /about.html, / -> /index.html
    """

    identifiers = ("no_dirs",)

    def path_for(self, rep: ItemRep) -> Optional[str]:
        attributes = rep.item.attributes
        if attributes.get("skip_output"):
            return None

        identifier = rep.item.identifier
        extension = _extension(rep) if rep.binary else attributes.get("output_extension", "html")
        suffix = "" if rep.name == DEFAULT_REP else f"-{rep.name}"

        if identifier == "/":
            return f"/index{suffix}.{extension}"
        return f"{identifier.rstrip('/')}{suffix}.{extension}"
