"""
Compiler - runs every item rep through the filters and layouts its rule asks for.
"""
import logging
from collections import deque
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.entities import Layout
from core.errors import NoMatchingLayoutRuleError, RecursiveCompilationError, UnmetDependencyError
from core.item_rep import ItemRep
from core.mappings import freeze_recursively
from compilation.item_rep_proxy import ItemRepProxy

logger = logging.getLogger(__name__)


class Compiler:
    """
    Compiles item reps one at a time, in item order.

    A rule may read the compiled content of another rep. If that rep is
    not compiled yet, the current rep is reset and queued again after it;
    dependencies outside the requested reps are compiled as well.
    """

    def __init__(self, site):
        self.site = site
        self.reps: List[ItemRep] = []

    def build_reps(self) -> List[ItemRep]:
        """Create the reps of every item, as named by the compilation rules."""
        self.reps = []
        for item in self.site.items:
            item.reps = [
                ItemRep(item, name, registry=self.site.registry)
                for name in self.site.rules.rep_names_for(item)
            ]
            self.reps.extend(item.reps)

        logger.info(f"Built {len(self.reps)} item reps for {len(self.site.items)} items")
        return self.reps

    def compile(self, reps: Optional[Iterable[ItemRep]] = None) -> List[ItemRep]:
        """
        Compile the given reps (all reps by default) and return the reps
        compiled, in completion order.

        Errors other than unmet dependencies propagate to the caller; reps
        compiled before the failure keep their content.
        """
        if not self.reps:
            self.build_reps()

        queue = deque(self.reps if reps is None else reps)
        queued = set(map(id, queue))
        compiled: List[ItemRep] = []
        stalled = 0

        while queue:
            rep = queue.popleft()
            if rep.compiled:
                queued.discard(id(rep))
                stalled = 0
                continue

            try:
                self._compile_rep(rep)
            except UnmetDependencyError as e:
                rep.reset()
                dependency = e.item_rep
                logger.debug(f"{rep} waits for {dependency}")

                if id(dependency) not in queued:
                    queue.appendleft(dependency)
                    queued.add(id(dependency))
                    queue.append(rep)
                    stalled = 0
                    continue

                queue.append(rep)
                stalled += 1
                if stalled > len(queue):
                    raise RecursiveCompilationError(list(queue))
                continue

            queued.discard(id(rep))
            compiled.append(rep)
            stalled = 0

        return compiled

    def _compile_rep(self, rep: ItemRep) -> None:
        rule = self.site.rules.compilation_rule_for(rep)

        rep.reset()
        rule.apply_to(ItemRepProxy(rep, self))
        rep.finish()

        logger.info(f"Compiled {rep}", extra={"item_rep": rep})

    def assigns_for(self, rep: ItemRep) -> Dict[str, Any]:
        """
        The variables visible to a filter or layout step of the given rep.
        Built fresh on every call.
        """
        site = self.site
        page_defaults = site.page_defaults.attributes

        return {
            "content": None if rep.binary else rep.content,
            "item": rep.item,
            "item_rep": rep,
            "attributes": {**page_defaults, **rep.item.attributes},
            "site": site,
            "config": freeze_recursively(site.config.model_dump()),
            "items": tuple(site.items),
            "layouts": tuple(site.layouts),
            "templates": tuple(site.templates),
            "page_defaults": freeze_recursively(page_defaults),
        }

    def filter_for_layout(self, layout: Layout) -> Tuple[str, Dict[str, Any]]:
        """
        The filter that renders the layout: the first matching layout rule,
        otherwise the layout's own 'filter' attribute.
        """
        match = self.site.rules.filter_for_layout(layout)
        if match is not None:
            return match

        filter_name = layout.attributes.get("filter")
        if filter_name:
            return filter_name, dict(layout.attributes.get("filter_args") or {})

        raise NoMatchingLayoutRuleError(layout)
