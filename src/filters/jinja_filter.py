"""
Jinja2 template filter, also the usual filter for layouts
"""
from typing import Any, Optional

from jinja2 import Environment, FunctionLoader, StrictUndefined, Undefined

from core.entities import cleaned_identifier
from filters.base import Filter
from filters.helpers import html_escape


class JinjaFilter(Filter):
    """
    Renders the content as a Jinja2 template with the step's assigns as
    context. Other layouts can be included by identifier:

        {% include "/partials/footer/" %}
    """

    identifiers = ("jinja", "jinja2")

    def run(self, content: str, strict: bool = False, **params: Any) -> str:
        env = Environment(
            loader=FunctionLoader(self._load_layout),
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict else Undefined,
        )
        env.filters["h"] = html_escape

        template = env.from_string(content)
        return template.render(**{**self.assigns, **params})

    def _load_layout(self, identifier: str) -> Optional[str]:
        wanted = cleaned_identifier(identifier)
        for layout in self.assigns.get("layouts", ()):
            if layout.identifier == wanted:
                return layout.raw_content
        return None
