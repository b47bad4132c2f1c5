"""
Compilation and layout rules declared by site code:

    @rules.compile("/blog/*", rep="default")
    def blog_post(rep):
        rep.filter("markdown")
        rep.layout("/post/")

    rules.layout("*", "jinja")
"""
import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.entities import Item, Layout
from core.errors import NoMatchingCompilationRuleError
from core.item_rep import ItemRep

logger = logging.getLogger(__name__)

DEFAULT_REP = "default"


@dataclass
class CompilationRule:
    pattern: str
    rep_name: str
    block: Callable[[Any], None]

    def applicable_to(self, item: Item) -> bool:
        return fnmatchcase(item.identifier, self.pattern)

    def apply_to(self, proxy) -> None:
        self.block(proxy)


@dataclass
class LayoutRule:
    pattern: str
    filter_name: str
    filter_args: Dict[str, Any] = field(default_factory=dict)

    def applicable_to(self, layout: Layout) -> bool:
        return fnmatchcase(layout.identifier, self.pattern)


class RuleSet:
    """
    Ordered rules; for any lookup the first matching rule wins.
    """

    def __init__(self):
        self.compilation_rules: List[CompilationRule] = []
        self.layout_rules: List[LayoutRule] = []

    def clear(self) -> None:
        self.compilation_rules.clear()
        self.layout_rules.clear()

    def compile(self, pattern: str, rep: str = DEFAULT_REP) -> Callable:
        def decorator(block: Callable[[Any], None]) -> Callable[[Any], None]:
            self.compilation_rules.append(CompilationRule(pattern, rep, block))
            return block
        return decorator

    def layout(self, pattern: str, filter_name: str, **filter_args: Any) -> None:
        self.layout_rules.append(LayoutRule(pattern, filter_name, filter_args))

    def rep_names_for(self, item: Item) -> List[str]:
        names = []
        for rule in self.compilation_rules:
            if rule.applicable_to(item) and rule.rep_name not in names:
                names.append(rule.rep_name)
        return names or [DEFAULT_REP]

    def compilation_rule_for(self, rep: ItemRep) -> CompilationRule:
        for rule in self.compilation_rules:
            if rule.rep_name == rep.name and rule.applicable_to(rep.item):
                return rule
        raise NoMatchingCompilationRuleError(rep)

    def filter_for_layout(self, layout: Layout) -> Optional[Tuple[str, Dict[str, Any]]]:
        for rule in self.layout_rules:
            if rule.applicable_to(layout):
                return rule.filter_name, dict(rule.filter_args)
        return None
