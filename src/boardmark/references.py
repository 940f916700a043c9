"""Extract cross-references from parsed trees.

When a post is stored, the application records which posts it replies
to and which embeds it links; both come from the parsed tree.
"""

from __future__ import annotations

from collections.abc import Iterable

from boardmark.nodes import Link, Node, RefLink
from boardmark.visitor import BaseVisitor


class _ReferenceCollector(BaseVisitor[None]):
    def __init__(self) -> None:
        self.post_ids: dict[int, None] = {}
        self.urls: dict[str, None] = {}

    def visit_reflink(self, node: RefLink) -> None:
        self.post_ids[node.post_id] = None

    def visit_link(self, node: Link) -> None:
        self.urls[node.url] = None


def collect_post_references(nodes: Iterable[Node]) -> list[int]:
    """Ids of all referenced posts, without duplicates, in document order.

    Reflinks that failed to resolve were turned into text and are not
    counted.
    """
    collector = _ReferenceCollector()
    collector.visit_all(nodes)
    return list(collector.post_ids)


def collect_link_urls(nodes: Iterable[Node]) -> list[str]:
    """URLs of all links, without duplicates, in document order."""
    collector = _ReferenceCollector()
    collector.visit_all(nodes)
    return list(collector.urls)
