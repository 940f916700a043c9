"""Tree normalization.

Merges neighbours that describe one run of content:

- two adjacent Text nodes become one Text with concatenated text
- two adjacent Style nodes with the same style and value become one Style
  whose children are the concatenation of both, normalized again

Normalization is applied at every level and reaches a fixed point in one
pass: ``normalize(normalize(nodes)) == normalize(nodes)``.
"""

from __future__ import annotations

from collections.abc import Iterable

from boardmark.nodes import Node, Style, Text


def normalize(nodes: Iterable[Node]) -> list[Node]:
    """Merge adjacent structurally identical nodes, recursively."""
    result: list[Node] = []
    for node in nodes:
        if isinstance(node, Style):
            node = Style(node.style, tuple(normalize(node.children)), value=node.value)

        previous = result[-1] if result else None
        merged = _merge(previous, node) if previous is not None else None
        if merged is not None:
            result[-1] = merged
        else:
            result.append(node)
    return result


def _merge(first: Node, second: Node) -> Node | None:
    """Merge two neighbours, or return None when they stay separate."""
    match first, second:
        case Text(text=a), Text(text=b):
            return Text(a + b)
        case Style(), Style() if first.style == second.style and first.value == second.value:
            children = normalize(first.children + second.children)
            return Style(first.style, tuple(children), value=first.value)
        case _:
            return None
