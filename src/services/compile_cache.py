"""
CompileCache - decides which item reps need compiling again.
Compares the mtimes of items, layouts, page defaults and code snippets
with those recorded after the previous build.
"""
import logging
import os
from typing import Dict, Iterable, List, Optional, Tuple

from core.code_snippet import CodeSnippet
from core.entities import Item, Layout, PageDefaults
from core.item_rep import ItemRep
from services.database import Database

logger = logging.getLogger(__name__)

PAGE_DEFAULTS_KEY = ("page_defaults", "/")


def _newer(current: Optional[float], recorded: Optional[float]) -> bool:
    if current is None or recorded is None:
        return True
    return current > recorded


class CompileCache:
    def __init__(self, database: Database):
        self.db = database
        self._mtimes: Dict[Tuple[str, str], Optional[float]] = {}
        self._initialized = False

    async def initialize(self) -> None:
        """Create tables and read the mtimes of the previous build."""
        if not self._initialized:
            await self.db.init_tables()
            self._initialized = True
        self._mtimes = await self.db.get_mtimes()
        logger.info(f"Compile cache holds {len(self._mtimes)} entries")

    async def reset(self) -> None:
        await self.db.clear()
        self._mtimes = {}

    def _changed(self, kind: str, entries: Iterable[Tuple[str, Optional[float]]]) -> bool:
        current = dict(entries)
        recorded = {identifier for (k, identifier) in self._mtimes if k == kind}
        if recorded != set(current):
            return True
        return any(_newer(mtime, self._mtimes.get((kind, identifier))) for identifier, mtime in current.items())

    def code_changed(self, snippets: Iterable[CodeSnippet]) -> bool:
        return self._changed("code", ((snippet.filename, snippet.mtime) for snippet in snippets))

    def layouts_changed(self, layouts: Iterable[Layout]) -> bool:
        return self._changed("layout", ((layout.identifier, layout.mtime) for layout in layouts))

    def page_defaults_changed(self, page_defaults: PageDefaults) -> bool:
        if not page_defaults.attributes and PAGE_DEFAULTS_KEY not in self._mtimes:
            return False
        return _newer(page_defaults.mtime, self._mtimes.get(PAGE_DEFAULTS_KEY))

    def is_outdated(self, rep: ItemRep) -> bool:
        if _newer(rep.item.mtime, self._mtimes.get(("item", rep.item.identifier))):
            return True
        if rep.raw_path is not None and not os.path.exists(rep.raw_path):
            return True
        return False

    def outdated_reps(self, site, reps: Iterable[ItemRep]) -> List[ItemRep]:
        """
        Reps to compile. Changes to code, layouts or page defaults may affect
        any rep, so they make every rep outdated.
        """
        reps = list(reps)
        if (
            self.code_changed(site.code_snippets)
            or self.layouts_changed(site.layouts)
            or self.page_defaults_changed(site.page_defaults)
        ):
            logger.info("Site code, layouts or page defaults changed, recompiling everything")
            return reps

        outdated = [rep for rep in reps if self.is_outdated(rep)]
        logger.info(f"{len(outdated)} of {len(reps)} item reps are outdated")
        return outdated

    async def record(self, site, items: Optional[Iterable[Item]] = None) -> None:
        """Record current mtimes; items default to all items of the site."""
        items = site.items if items is None else items

        entries = [("item", item.identifier, item.mtime) for item in items]
        entries += [("layout", layout.identifier, layout.mtime) for layout in site.layouts]
        entries += [("code", snippet.filename, snippet.mtime) for snippet in site.code_snippets]
        if site.page_defaults.attributes or site.page_defaults.mtime is not None:
            entries.append((*PAGE_DEFAULTS_KEY, site.page_defaults.mtime))

        # Layouts and code that no longer exist must not linger
        await self.db.clear("layout")
        await self.db.clear("code")
        count = await self.db.record_mtimes(entries)
        self._mtimes = await self.db.get_mtimes()
        logger.info(f"Recorded {count} mtimes")
