"""Token definitions for the boardmark tokenizer.

The tokenizer produces a flat list of tokens that the parser consumes.
Every token carries its raw captured text, its ordinal ``index`` in the
token stream and the character ``offset`` where it starts in the source
(after carriage returns are stripped).

Span matching works on ``index``: tokens are numbered as the source is
scanned, so indices stay strictly increasing even after adjacent text
tokens are merged.

Token Hierarchy:
Token (base)
├── TextToken
├── NewLineToken
├── QuoteToken            > quoted line
├── RefLinkToken          >>123
├── LinkToken             https://example.com
├── DiceToken             ##2d6##
├── BBCodeStartToken      [b], [color=#f00], [size=2]
├── BBCodeEndToken        [/b]
├── WakabamarkStartToken  ** * %% ~~
└── WakabamarkEndToken

Thread Safety:
All tokens are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Token:
    """Base class for all tokens.

    Attributes:
        text: Raw text captured from the source
        index: Ordinal position in the token stream
        offset: Character offset of the token in the source

    """

    text: str
    index: int
    offset: int


@dataclass(frozen=True, slots=True)
class TextToken(Token):
    """Literal text, including markup that failed to pair."""


@dataclass(frozen=True, slots=True)
class NewLineToken(Token):
    """A single ``\\n``."""


@dataclass(frozen=True, slots=True)
class QuoteToken(Token):
    """A line starting with ``>``.

    ``quote`` is the rest of the line after the marker.
    """

    quote: str


@dataclass(frozen=True, slots=True)
class RefLinkToken(Token):
    """Reference to another post: ``>>123``."""

    post_id: int


@dataclass(frozen=True, slots=True)
class LinkToken(Token):
    """Bare http(s) URL."""

    url: str
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class DiceToken(Token):
    """Dice expression ``##NdM##``: roll ``count`` dice with ``max`` faces."""

    count: int
    max: int


@dataclass(frozen=True, slots=True)
class BBCodeStartToken(Token):
    """Opening BBCode tag. ``value`` is set for color and size."""

    tag: str
    value: str | None = None


@dataclass(frozen=True, slots=True)
class BBCodeEndToken(Token):
    """Closing BBCode tag."""

    tag: str


@dataclass(frozen=True, slots=True)
class WakabamarkStartToken(Token):
    """Opening Wakabamark toggle symbol."""

    symbol: str


@dataclass(frozen=True, slots=True)
class WakabamarkEndToken(Token):
    """Closing Wakabamark toggle symbol."""

    symbol: str


def as_text(token: Token) -> TextToken:
    """Degrade any token to a text token carrying its raw text."""
    return TextToken(text=token.text, index=token.index, offset=token.offset)
