"""Tree visitor and transformer for boardmark.

Provides a base visitor class with match-based dispatch and an immutable
transform function for rewriting frozen trees.

Collect all dice:

    class DiceCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.dice: list[Dice] = []

        def visit_dice(self, node: Dice) -> None:
            self.dice.append(node)

    collector = DiceCollector()
    collector.visit_all(nodes)

Drop spoilers:

    def drop_spoilers(node: Node) -> Node | None:
        if isinstance(node, Style) and node.style == "spoiler":
            return None
        return node

    nodes = transform(nodes, drop_spoilers)

Thread Safety:
    Visitors may accumulate mutable state; create one per thread. The
    transform function is pure.

"""

import dataclasses
from collections.abc import Callable, Iterable

from boardmark.nodes import Dice, Link, NewLine, Node, RefLink, Style, Text


class BaseVisitor[T]:
    """Base tree visitor with match-based dispatch.

    Subclass and override ``visit_*`` methods for node types you care about.
    Unhandled node types fall through to ``visit_default``. Children of
    Style nodes are walked automatically after the ``visit_style`` call.

    """

    def visit(self, node: Node) -> T:
        """Dispatch to the appropriate ``visit_*`` method, then walk children."""
        result = self._dispatch(node)
        if isinstance(node, Style):
            self.visit_all(node.children)
        return result

    def visit_all(self, nodes: Iterable[Node]) -> None:
        """Visit every node of a sequence in order."""
        for node in nodes:
            self.visit(node)

    def visit_default(self, node: Node) -> T:
        """Called for node types without a specific ``visit_*`` method."""
        return None  # type: ignore[return-value]

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_newline(self, node: NewLine) -> T:
        return self.visit_default(node)

    def visit_reflink(self, node: RefLink) -> T:
        return self.visit_default(node)

    def visit_link(self, node: Link) -> T:
        return self.visit_default(node)

    def visit_dice(self, node: Dice) -> T:
        return self.visit_default(node)

    def visit_style(self, node: Style) -> T:
        return self.visit_default(node)

    def _dispatch(self, node: Node) -> T:
        match node:
            case Text():
                return self.visit_text(node)
            case NewLine():
                return self.visit_newline(node)
            case RefLink():
                return self.visit_reflink(node)
            case Link():
                return self.visit_link(node)
            case Dice():
                return self.visit_dice(node)
            case Style():
                return self.visit_style(node)
            case _:
                return self.visit_default(node)


def transform(nodes: Iterable[Node], fn: Callable[[Node], Node | None]) -> list[Node]:
    """Apply a function to every node, returning a new tree.

    ``fn`` is called bottom-up: children are transformed first, then the
    parent receives its new children. Return ``None`` to remove a node.
    A Style node left without children is removed as well, since a Style
    always wraps at least one node.

    The result is not re-normalized; run ``normalize`` on it if removals
    may leave mergeable neighbours.

    Args:
        nodes: Top-level nodes
        fn: Function returning a (possibly new) node, or None

    Returns:
        New list of top-level nodes.

    """
    return [result for node in nodes if (result := _transform_node(node, fn)) is not None]


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    if isinstance(node, Style):
        children = tuple(transform(node.children, fn))
        if not children:
            return None
        if children != node.children:
            node = dataclasses.replace(node, children=children)
    return fn(node)
