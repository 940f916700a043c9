"""Parser turning a token stream into a normalized node tree.

Three stages, all pure and synchronous:

1. ``build_spans``: match start/end markers into style spans
2. ``build_tree``: wrap each content token in the styles covering it
3. ``normalize``: merge adjacent identical nodes

Example:
    >>> from boardmark.tokenizer import tokenize
    >>> Parser().parse(tokenize("Hello [b]world[/b]"))
    [Text(text='Hello '), Style(style='bold', children=(Text(text='world'),), value=None)]

Thread Safety:
Parser instances hold no state; one instance can be shared freely.

"""

from __future__ import annotations

from typing import Final

from boardmark.nodes import Node
from boardmark.parsing import build_spans, build_tree, normalize
from boardmark.tokens import Token


class Parser:
    """Token stream to node tree."""

    __slots__ = ()

    def parse(self, tokens: list[Token]) -> list[Node]:
        """Parse tokens into a normalized node tree.

        Args:
            tokens: Output of ``Tokenizer.tokenize``

        Returns:
            Top-level nodes of the message.

        Raises:
            MarkupInvariantError: If the token list has an end marker
                without a start marker (never produced by the tokenizer).
        """
        spans = build_spans(tokens)
        return normalize(build_tree(tokens, spans))


_DEFAULT_PARSER: Final = Parser()


def parse(tokens: list[Token]) -> list[Node]:
    """Parse tokens with the module-level parser."""
    return _DEFAULT_PARSER.parse(tokens)
