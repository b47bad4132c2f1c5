"""
Compilation module - turns loaded site data into compiled item reps.
"""
from compilation.compiler import Compiler
from compilation.item_rep_proxy import ItemRepProxy
from compilation.registry import register_builtin_plugins
from compilation.rules import RuleSet
from compilation.site import Site

__all__ = [
    "Compiler",
    "ItemRepProxy",
    "RuleSet",
    "Site",
    "register_builtin_plugins",
]
