"""Part accumulator for the HTML renderer.

Rendering a post appends many short fragments (tags, escaped text runs).
Collecting them in a list and joining once keeps rendering linear in the
size of the output.
"""

from __future__ import annotations

from boardmark.utils.text import escape_html


class StringBuilder:
    """Collects HTML fragments for one render call.

    Usage:
        >>> out = StringBuilder()
        >>> out.append("<em>").append_escaped("a < b").append("</em>")
        >>> out.build()
        '<em>a &lt; b</em>'

    """

    __slots__ = ("_fragments",)

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def append(self, fragment: str) -> StringBuilder:
        """Add trusted markup as is."""
        if fragment:
            self._fragments.append(fragment)
        return self

    def append_escaped(self, text: str) -> StringBuilder:
        """Add user text, HTML-escaped."""
        return self.append(escape_html(text))

    def build(self) -> str:
        return "".join(self._fragments)
