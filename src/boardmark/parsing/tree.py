"""Leaf construction and style wrapping.

Every content token becomes one leaf node. Each leaf is then wrapped in a
Style node for every span covering its index, so the first span in sorted
order ends up outermost. Adjacent wrappers are merged afterwards by the
normalizer.
"""

from __future__ import annotations

from boardmark.nodes import Dice, Leaf, Link, NewLine, Node, RefLink, Style, Text
from boardmark.parsing.spans import Span
from boardmark.tokens import (
    DiceToken,
    LinkToken,
    NewLineToken,
    QuoteToken,
    RefLinkToken,
    TextToken,
    Token,
)


def build_leaf(token: Token) -> Leaf | Style | None:
    """Build the leaf node for a content token; None for marker tokens."""
    match token:
        case TextToken(text=text):
            return Text(text)
        case NewLineToken():
            return NewLine()
        case QuoteToken(text=text, quote=quote):
            return Style("quote", (Text(text),), value=quote)
        case RefLinkToken(post_id=post_id):
            return RefLink(post_id)
        case LinkToken(text=text, url=url, icon=icon):
            return Link(text, url, icon)
        case DiceToken(count=count, max=max_):
            return Dice(count, max_)
        case _:
            return None


def build_tree(tokens: list[Token], spans: list[Span]) -> list[Node]:
    """Wrap every content token in the styles covering it.

    Args:
        tokens: Token stream from the tokenizer
        spans: Sorted spans from ``build_spans``

    Returns:
        One (possibly wrapped) node per content token, in token order.
    """
    nodes: list[Node] = []
    for token in tokens:
        node = build_leaf(token)
        if node is None:
            continue

        covering = [span for span in spans if span.covers(token.index)]
        for span in reversed(covering):
            node = Style(span.style, (node,), value=span.value)
        nodes.append(node)
    return nodes
