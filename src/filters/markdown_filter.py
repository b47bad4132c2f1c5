"""
Markdown to HTML using markdown-it
"""
from typing import Any

from markdown_it import MarkdownIt

from filters.base import Filter


class MarkdownFilter(Filter):
    identifiers = ("markdown", "md")

    def run(self, content: str, preset: str = "commonmark", html: bool = True, **params: Any) -> str:
        md = MarkdownIt(preset, {"html": html})
        return md.render(content)
