"""Style names and the per-dialect mapping tables.

Both markup dialects resolve onto the same set of styles:

    BBCode       Wakabamark    Style
    [b]          **            bold
    [i]          *             italic
    [u]                        underline
    [s]          ~~            strike
    [sup]                      superscript
    [sub]                      subscript
    [spoiler]    %%            spoiler
    [code]                     code
    [color=#f00]               color (value "#f00")
    [size=2]                   size (value "2")

The ``quote`` style has no tag; the parser attaches it to quote lines.
"""

import re
from typing import Final, Literal, get_args

from boardmark.errors import MarkupInvariantError

type Style = Literal[
    "bold",
    "italic",
    "underline",
    "strike",
    "superscript",
    "subscript",
    "spoiler",
    "code",
    "color",
    "size",
    "quote",
]

STYLES: Final[frozenset[str]] = frozenset(get_args(Style.__value__))

BBCODE_STYLES: Final[dict[str, Style]] = {
    "b": "bold",
    "i": "italic",
    "u": "underline",
    "s": "strike",
    "sup": "superscript",
    "sub": "subscript",
    "spoiler": "spoiler",
    "code": "code",
    "color": "color",
    "size": "size",
}

WAKABAMARK_STYLES: Final[dict[str, Style]] = {
    "**": "bold",
    "*": "italic",
    "~~": "strike",
    "%%": "spoiler",
}

# Tags whose start token must carry a validated value
VALUE_TAGS: Final[frozenset[str]] = frozenset({"color", "size"})

# Value syntax of [color=...] and [size=...]; matched case-insensitively
COLOR_VALUE: Final = r"#(?:[0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})"
SIZE_VALUE: Final = r"[1-9]\d?"

_VALUE_PATTERNS: Final[dict[str, re.Pattern[str]]] = {
    "color": re.compile(COLOR_VALUE, re.IGNORECASE),
    "size": re.compile(SIZE_VALUE),
}


def is_valid_value(style: str, value: str | None) -> bool:
    """Check a style value against the syntax the tokenizer accepts.

    Trees loaded from storage bypass the tokenizer, so renderers check
    values again before emitting them.

    Example:
        >>> is_valid_value("color", "#f00"), is_valid_value("color", "red")
        (True, False)
    """
    pattern = _VALUE_PATTERNS.get(style)
    return pattern is not None and value is not None and pattern.fullmatch(value) is not None


def bbcode_style(tag: str, index: int | None = None) -> Style:
    """Map a BBCode tag name onto its style.

    Raises:
        MarkupInvariantError: If the tag is not in the table.
    """
    try:
        return BBCODE_STYLES[tag]
    except KeyError:
        raise MarkupInvariantError(f"Unknown BBCode tag: {tag!r}", index) from None


def wakabamark_style(symbol: str, index: int | None = None) -> Style:
    """Map a Wakabamark symbol onto its style.

    Raises:
        MarkupInvariantError: If the symbol is not in the table.
    """
    try:
        return WAKABAMARK_STYLES[symbol]
    except KeyError:
        raise MarkupInvariantError(f"Unknown Wakabamark symbol: {symbol!r}", index) from None
