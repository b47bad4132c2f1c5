"""
CSS minification: drops comments and whitespace, shortens colours
"""
import re
from typing import Any

from filters.base import Filter

# Comments and quoted strings, matched together so neither hides the other
_COMMENT_OR_STRING = re.compile(r"""/\*.*?\*/|"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*'""", re.S)
_STRING_PLACEHOLDER = re.compile("\x00(\\d+)\x00")
_WHITESPACE = re.compile(r"\s+")
_AROUND_PUNCTUATION = re.compile(r"\s*([{};,>])\s*")
_EMPTY_DECLARATION = re.compile(r";+(?=})")
_DECLARATION_BLOCK = re.compile(r"\{([^{}]*)\}")
_AROUND_COLON = re.compile(r"\s*:\s*")
_DECLARATION_VALUE = re.compile(r"(?<=:)([^;]+)")
_ZERO_UNIT = re.compile(r"(?<![\w.#-])0(?:px|em|ex|pt|pc|in|cm|mm)\b")
_COLOR_TOKEN = re.compile(r"#[0-9a-fA-F]{6}\b|#[0-9a-fA-F]{3}\b|\b[a-zA-Z]+\b")

# Only entries where the replacement is shorter
_NAME_TO_HEX = {
    "black": "#000",
    "white": "#fff",
    "fuchsia": "#f0f",
    "magenta": "#f0f",
    "yellow": "#ff0",
    "aliceblue": "#f0f8ff",
    "antiquewhite": "#faebd7",
    "blanchedalmond": "#ffebcd",
    "lightgoldenrodyellow": "#fafad2",
    "lightslategray": "#789",
    "lightslategrey": "#789",
    "mediumspringgreen": "#00fa9a",
    "papayawhip": "#ffefd5",
}

_HEX_TO_NAME = {
    "#ff0000": "red",
    "#800000": "maroon",
    "#808000": "olive",
    "#800080": "purple",
    "#008000": "green",
    "#000080": "navy",
    "#008080": "teal",
    "#c0c0c0": "silver",
    "#808080": "gray",
    "#ffa500": "orange",
    "#f0ffff": "azure",
    "#f5f5dc": "beige",
    "#ffe4c4": "bisque",
    "#a52a2a": "brown",
    "#ff7f50": "coral",
    "#ffd700": "gold",
    "#4b0082": "indigo",
    "#fffff0": "ivory",
    "#f0e68c": "khaki",
    "#faf0e6": "linen",
    "#da70d6": "orchid",
    "#cd853f": "peru",
    "#ffc0cb": "pink",
    "#dda0dd": "plum",
    "#fa8072": "salmon",
    "#a0522d": "sienna",
    "#fffafa": "snow",
    "#d2b48c": "tan",
    "#ff6347": "tomato",
    "#ee82ee": "violet",
    "#f5deb3": "wheat",
}


def _expand_hex(value: str) -> str:
    if len(value) == 4:
        return "#" + "".join(c * 2 for c in value[1:])
    return value


def _shorten_hex(value: str) -> str:
    if len(value) == 7 and value[1] == value[2] and value[3] == value[4] and value[5] == value[6]:
        return "#" + value[1] + value[3] + value[5]
    return value


def _shorten_color(match: re.Match) -> str:
    token = match.group(0)
    lowered = token.lower()

    if lowered.startswith("#"):
        expanded = _expand_hex(lowered)
        return _HEX_TO_NAME.get(expanded, _shorten_hex(expanded))

    return _NAME_TO_HEX.get(lowered, token)


def _shorten_value(match: re.Match) -> str:
    value = match.group(1)
    if "url(" in value.lower():
        return value
    return _COLOR_TOKEN.sub(_shorten_color, value)


def _minify_declarations(match: re.Match) -> str:
    # Innermost braces only hold declarations, so colons here never belong to selectors
    block = _AROUND_COLON.sub(":", match.group(1))
    return "{" + _DECLARATION_VALUE.sub(_shorten_value, block) + "}"


def minify_css(css: str) -> str:
    """
    Quoted strings are set aside first and put back unchanged at the end.
    """
    strings = []

    def set_aside(match: re.Match) -> str:
        token = match.group(0)
        if token.startswith("/*"):
            return ""
        strings.append(token)
        return f"\x00{len(strings) - 1}\x00"

    css = _COMMENT_OR_STRING.sub(set_aside, css)
    css = _WHITESPACE.sub(" ", css)
    css = _AROUND_PUNCTUATION.sub(r"\1", css)
    css = _EMPTY_DECLARATION.sub("", css)
    css = _ZERO_UNIT.sub("0", css)
    css = _DECLARATION_BLOCK.sub(_minify_declarations, css)
    css = _STRING_PLACEHOLDER.sub(lambda m: strings[int(m.group(1))], css)
    return css.strip()


class CssMinifyFilter(Filter):
    identifiers = ("css_minify", "rainpress")

    def run(self, content: str, **params: Any) -> str:
        return minify_css(content)
