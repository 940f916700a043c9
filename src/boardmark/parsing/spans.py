"""Style span resolution.

Walks the marker tokens with a single stack of open spans and turns every
matched start/end pair into a ``Span`` over token indices. Spans that
cross without nesting are then split so that the tree builder can wrap
leaves consistently.

Example:
    [b] brutally [i] _ [/b] cruel [/i]
     1      2     3  4   5    6     7

    b = Span(1, 5), i = Span(3, 7) cross; b is split at 3:
    Span(1, 3, bold), Span(3, 5, bold), Span(3, 7, italic)

"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Literal

from boardmark.errors import MarkupInvariantError
from boardmark.styles import Style, bbcode_style, wakabamark_style
from boardmark.tokens import (
    BBCodeEndToken,
    BBCodeStartToken,
    Token,
    WakabamarkEndToken,
    WakabamarkStartToken,
)
from boardmark.utils.logger import get_logger

logger = get_logger(__name__)

type Dialect = Literal["bbcode", "wakabamark"]


@dataclass(frozen=True, slots=True)
class Span:
    """Styled interval over token indices, both ends inclusive.

    Attributes:
        start: Index of the opening marker token
        end: Index of the closing marker token
        style: Style applied to every content token in the interval
        value: Style value (color, size), if any

    """

    start: int
    end: int
    style: Style
    value: str | None = None

    def covers(self, index: int) -> bool:
        return self.start <= index <= self.end


@dataclass(frozen=True, slots=True)
class OpenSpan:
    """Stack entry for a start marker awaiting its end marker."""

    dialect: Dialect
    key: str
    start: int
    value: str | None = None


def build_spans(tokens: list[Token]) -> list[Span]:
    """Collect style spans from the marker tokens.

    Content tokens are ignored. Spans come back overlap-fixed and sorted
    by ``(start, end)``.

    Raises:
        MarkupInvariantError: If an end marker has no open partner. The
            tokenizer degrades such markers to text, so this means the
            token list did not come from it.
    """
    spans: list[Span] = []
    open_spans: list[OpenSpan] = []

    for token in tokens:
        match token:
            case BBCodeStartToken(tag=tag, value=value):
                open_spans.append(OpenSpan("bbcode", tag, token.index, value))
            case WakabamarkStartToken(symbol=symbol):
                open_spans.append(OpenSpan("wakabamark", symbol, token.index))
            case BBCodeEndToken(tag=key) | WakabamarkEndToken(symbol=key):
                dialect: Dialect = "bbcode" if isinstance(token, BBCodeEndToken) else "wakabamark"
                spans.append(_close_span(open_spans, dialect, key, token.index))

    spans = fix_overlaps(spans)
    spans.sort(key=lambda span: (span.start, span.end))
    return spans


def _close_span(open_spans: list[OpenSpan], dialect: Dialect, key: str, index: int) -> Span:
    """Pop the topmost open span for ``key`` and turn it into a Span."""
    for i in range(len(open_spans) - 1, -1, -1):
        entry = open_spans[i]
        if entry.dialect == dialect and entry.key == key:
            del open_spans[i]
            if dialect == "bbcode":
                style = bbcode_style(key, index)
            else:
                style = wakabamark_style(key, index)
            return Span(entry.start, index, style, entry.value)

    logger.error("Unpaired %s end marker %r reached the span resolver", dialect, key)
    raise MarkupInvariantError(f"No open {dialect} span for {key!r}", index)


def fix_overlaps(spans: list[Span]) -> list[Span]:
    """Split spans that partially cross a later span.

    For every pair where ``first`` starts before ``second`` and ends
    inside it, ``first`` is cut at ``second.start`` and the remainder is
    appended, so it is compared against the rest of the list too.

    Only this orientation is handled. Spans are emitted in closing order,
    so the span that closes first of a crossing pair is always ``first``;
    the mirrored orientation can only arise between appended remainders.

    Args:
        spans: Spans in closing order

    Returns:
        New list; the input is not modified.
    """
    result = list(spans)
    i = 0
    while i < len(result) - 1:
        j = i + 1
        while j < len(result):
            first = result[i]
            second = result[j]
            if first.start < second.start < first.end < second.end:
                result[i] = dataclasses.replace(first, end=second.start)
                result.append(dataclasses.replace(first, start=second.start))
            j += 1
        i += 1
    return result
