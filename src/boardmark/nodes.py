"""Typed tree nodes for parsed posts.

All nodes are frozen dataclasses with slots for:
- Immutability: a parsed message is a value, persisted and re-served verbatim
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: Python 3.10+ match statements work naturally

Node Hierarchy:
Node (base)
├── Text
├── NewLine
├── RefLink
├── Link
├── Dice
└── Style (container)

Post-processing never mutates nodes; it builds new ones with
``dataclasses.replace``.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass

from boardmark.styles import Style as StyleName


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all tree nodes."""


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text content."""

    text: str


@dataclass(frozen=True, slots=True)
class NewLine(Node):
    """Line break."""


@dataclass(frozen=True, slots=True)
class RefLink(Node):
    """Reference to another post.

    Markup: >>123

    ``thread_id`` and ``slug`` are filled in by post-processing when the
    target post exists.

    """

    post_id: int
    thread_id: int | None = None
    slug: str | None = None


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink.

    ``text`` starts as the URL itself and is replaced by the embed title
    when the URL resolves to a known embed.

    """

    text: str
    url: str
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class Dice(Node):
    """Dice roll.

    Markup: ##2d6##

    ``result`` holds ``count`` values in ``[1, max]`` once rolled.

    """

    count: int
    max: int
    result: tuple[int, ...] | None = None


@dataclass(frozen=True, slots=True)
class Style(Node):
    """Styled run of content.

    Always wraps at least one child. ``value`` carries the color for
    ``color``, the size for ``size`` and the quoted text for ``quote``.

    """

    style: StyleName
    children: tuple[Node, ...]
    value: str | None = None


type Leaf = Text | NewLine | RefLink | Link | Dice
