"""HTML renderer for parsed posts.

Renders a node tree to an HTML fragment for API responses and previews.
All text is escaped; links are only emitted for http(s) URLs. Color and
size values are checked against the markup syntax again, since a stored
tree may carry anything; an invalid value renders the children only.

Style mapping:
    bold         <strong>
    italic       <em>
    underline    <u>
    strike       <del>
    superscript  <sup>
    subscript    <sub>
    spoiler      <span class="spoiler">
    code         <code>
    color        <span style="color: VALUE">
    size         <span class="size-VALUE">
    quote        <span class="quote">

Thread Safety:
A single HtmlRenderer can be shared; every render() call uses its own
StringBuilder.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from boardmark.errors import RenderError
from boardmark.nodes import Dice, Link, NewLine, Node, RefLink, Style, Text
from boardmark.stringbuilder import StringBuilder
from boardmark.styles import is_valid_value
from boardmark.utils.logger import get_logger
from boardmark.utils.text import escape_html, is_safe_url

logger = get_logger(__name__)

_STYLE_TAGS: Final[dict[str, tuple[str, str]]] = {
    "bold": ("<strong>", "</strong>"),
    "italic": ("<em>", "</em>"),
    "underline": ("<u>", "</u>"),
    "strike": ("<del>", "</del>"),
    "superscript": ("<sup>", "</sup>"),
    "subscript": ("<sub>", "</sub>"),
    "spoiler": ('<span class="spoiler">', "</span>"),
    "code": ("<code>", "</code>"),
    "quote": ('<span class="quote">', "</span>"),
}


class HtmlRenderer:
    """Render a node tree to HTML.

    Usage:
        >>> from boardmark import parse_message
        >>> HtmlRenderer().render(parse_message("Hello [b]world[/b]"))
        'Hello <strong>world</strong>'

    Args:
        board_url: Prefix for reflink targets; ``{slug}`` is substituted.

    """

    __slots__ = ("_board_url",)

    def __init__(self, *, board_url: str = "/{slug}/res/") -> None:
        self._board_url = board_url

    def render(self, nodes: Iterable[Node]) -> str:
        """Render top-level nodes to an HTML string.

        Raises:
            RenderError: If the tree contains an unknown node type.
        """
        sb = StringBuilder()
        self._render_nodes(nodes, sb)
        return sb.build()

    def _render_nodes(self, nodes: Iterable[Node], sb: StringBuilder) -> None:
        for node in nodes:
            self._render_node(node, sb)

    def _render_node(self, node: Node, sb: StringBuilder) -> None:
        match node:
            case Text(text=text):
                sb.append_escaped(text)
            case NewLine():
                sb.append("<br>\n")
            case Style():
                self._render_style(node, sb)
            case RefLink():
                self._render_reflink(node, sb)
            case Link():
                self._render_link(node, sb)
            case Dice():
                self._render_dice(node, sb)
            case _:
                msg = f"Cannot render {type(node).__name__}"
                raise RenderError(msg)

    def _render_style(self, node: Style, sb: StringBuilder) -> None:
        match node.style:
            case "color" if is_valid_value("color", node.value):
                open_tag, close_tag = f'<span style="color: {escape_html(node.value)}">', "</span>"
            case "size" if is_valid_value("size", node.value):
                open_tag, close_tag = f'<span class="size-{escape_html(node.value)}">', "</span>"
            case style if style in _STYLE_TAGS:
                open_tag, close_tag = _STYLE_TAGS[style]
            case style:
                logger.warning("Rendering style %r (value %r) without markup", style, node.value)
                open_tag, close_tag = "", ""

        sb.append(open_tag)
        self._render_nodes(node.children, sb)
        sb.append(close_tag)

    def _render_reflink(self, node: RefLink, sb: StringBuilder) -> None:
        if node.thread_id is not None and node.slug is not None:
            base = self._board_url.format(slug=node.slug)
            href = f"{base}{node.thread_id}#{node.post_id}"
        else:
            href = f"#{node.post_id}"
        sb.append(f'<a class="reflink" href="{escape_html(href)}">&gt;&gt;{node.post_id}</a>')

    def _render_link(self, node: Link, sb: StringBuilder) -> None:
        if not is_safe_url(node.url):
            sb.append_escaped(node.text)
            return
        icon = f' data-icon="{escape_html(node.icon)}"' if node.icon else ""
        sb.append(f'<a href="{escape_html(node.url)}" rel="nofollow noopener"{icon}>')
        sb.append_escaped(node.text)
        sb.append("</a>")

    def _render_dice(self, node: Dice, sb: StringBuilder) -> None:
        expression = f"##{node.count}d{node.max}##"
        if node.result is None:
            sb.append(f'<span class="dice">{expression}</span>')
            return
        rolls = ", ".join(str(value) for value in node.result)
        sb.append(
            f'<span class="dice" title="{expression}">'
            f"{expression} = {sum(node.result)} ({rolls})</span>"
        )


def render(nodes: Iterable[Node]) -> str:
    """Render nodes with a default HtmlRenderer."""
    return HtmlRenderer().render(nodes)
