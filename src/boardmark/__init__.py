"""boardmark: forum post markup engine.

Turns free-text posts into a structured, serializable rich-text tree.
Supports two inline markup dialects at once (BBCode and Wakabamark),
cross-post references, hyperlinks, quotes and dice rolls.

Quick Start:
    >>> from boardmark import parse_message, render
    >>> nodes = parse_message("Hello [b]brutally[/b] %%cruel%% world!")
    >>> render(nodes)
    'Hello <strong>brutally</strong> <span class="spoiler">cruel</span> world!'

The three stages can also be run separately:
    >>> from boardmark import tokenize, parse, post_process
    >>> tokens = tokenize(">>1 ##2d6##")
    >>> nodes = parse(tokens)
    >>> nodes = await post_process(nodes, lookups)

Persist ``to_json(nodes)`` alongside the raw message; ``from_json``
restores the tree.
"""

import random
from collections.abc import Sequence

from boardmark.config import (
    MarkupConfig,
    get_markup_config,
    markup_config_context,
    reset_markup_config,
    set_markup_config,
)
from boardmark.errors import BoardmarkError, MarkupInvariantError, RenderError
from boardmark.lookups import EmbedInfo, Lookups, MemoryLookups, PostRef
from boardmark.nodes import Dice, Link, NewLine, Node, RefLink, Style, Text
from boardmark.parser import Parser, parse
from boardmark.parsing import normalize
from boardmark.postprocess import PostProcessor, post_process
from boardmark.references import collect_link_urls, collect_post_references
from boardmark.renderers.html import HtmlRenderer, render
from boardmark.serialization import from_dict, from_json, to_dict, to_json
from boardmark.tokenizer import Tokenizer, tokenize
from boardmark.tokens import Token
from boardmark.visitor import BaseVisitor, transform

__version__ = "0.1.0"


def parse_message(text: str) -> list[Node]:
    """Tokenize and parse a raw message.

    Example:
        >>> parse_message("Hello %%brutally cruel%% world!")
        [Text(text='Hello '), Style(style='spoiler', children=(Text(text='brutally cruel'),), value=None), Text(text=' world!')]
    """
    return parse(tokenize(text))


async def process_message(
    text: str,
    lookups: Lookups,
    *,
    rng: random.Random | None = None,
    config: MarkupConfig | None = None,
) -> list[Node]:
    """Run all three stages on a raw message.

    This is what the application calls at post creation and when
    re-processing stored messages.
    """
    return await post_process(parse_message(text), lookups, rng=rng, config=config)


class Markup:
    """Markup processor bound to a configuration.

    Usage:
        >>> markup = Markup(config=MarkupConfig(resolve_embeds=False))
        >>> nodes = await markup.process("See >>42", lookups)
        >>> markup.render(nodes)

    Thread Safety:
        Holds only immutable state.

    """

    __slots__ = ("_config", "_parser", "_renderer", "_rng", "_tokenizer")

    def __init__(
        self,
        *,
        config: MarkupConfig | None = None,
        rng: random.Random | None = None,
        board_url: str = "/{slug}/res/",
    ) -> None:
        """Initialize Markup processor.

        Args:
            config: Post-processing configuration (defaults if None)
            rng: Random generator for dice (process-wide generator if None)
            board_url: Reflink URL prefix used by ``render``
        """
        self._config = config or MarkupConfig()
        self._rng = rng
        self._tokenizer = Tokenizer()
        self._parser = Parser()
        self._renderer = HtmlRenderer(board_url=board_url)

    def parse(self, text: str) -> list[Node]:
        """Tokenize and parse a raw message (no lookups)."""
        return self._parser.parse(self._tokenizer.tokenize(text))

    async def process(self, text: str, lookups: Lookups) -> list[Node]:
        """Tokenize, parse and post-process a raw message."""
        return await post_process(self.parse(text), lookups, rng=self._rng, config=self._config)

    async def reprocess(self, nodes: Sequence[Node], lookups: Lookups) -> list[Node]:
        """Post-process an already parsed (for example, stored) tree again.

        Dice that were already rolled keep their results.
        """
        return await post_process(nodes, lookups, rng=self._rng, config=self._config)

    def render(self, nodes: Sequence[Node]) -> str:
        """Render nodes to HTML."""
        return self._renderer.render(nodes)


__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "tokenize",
    "parse",
    "post_process",
    "parse_message",
    "process_message",
    "render",
    "normalize",
    # Nodes
    "Node",
    "Text",
    "NewLine",
    "RefLink",
    "Link",
    "Dice",
    "Style",
    # Pipeline components
    "Token",
    "Tokenizer",
    "Parser",
    "PostProcessor",
    "HtmlRenderer",
    # Lookups
    "Lookups",
    "MemoryLookups",
    "PostRef",
    "EmbedInfo",
    # Visitor + Transform
    "BaseVisitor",
    "transform",
    # References
    "collect_post_references",
    "collect_link_urls",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Configuration (ContextVar-based)
    "MarkupConfig",
    "get_markup_config",
    "set_markup_config",
    "reset_markup_config",
    "markup_config_context",
    # Errors
    "BoardmarkError",
    "MarkupInvariantError",
    "RenderError",
    # High-level
    "Markup",
]
