"""
HTML escaping, usable as a helper and as a filter
"""
from typing import Any

from filters.base import Filter

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
)


def html_escape(text: str) -> str:
    """Escape &, <, > and double quotes."""
    for char, entity in _HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


class EscapeHtmlFilter(Filter):
    identifiers = ("escape_html", "html_escape")

    def run(self, content: str, **params: Any) -> str:
        return html_escape(content)
