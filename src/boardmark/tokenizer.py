"""Single-pattern tokenizer for BBCode and Wakabamark markup.

Scans a post with one combined regular expression whose alternatives are
ordered by priority, classifies each match by the named group that
captured it, and emits everything between matches as text.

Markup never fails: a tag that cannot be paired, or a value that does
not validate, is degraded back to literal text.

Example:
    >>> from boardmark.tokenizer import tokenize
    >>> [type(t).__name__ for t in tokenize("Hello [b]world[/b]")]
    ['TextToken', 'BBCodeStartToken', 'TextToken', 'BBCodeEndToken']

Thread Safety:
Tokenizer instances hold no state between calls; the compiled pattern
is module-level and read-only.

"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final

from boardmark.styles import COLOR_VALUE, SIZE_VALUE
from boardmark.tokens import (
    BBCodeEndToken,
    BBCodeStartToken,
    DiceToken,
    LinkToken,
    NewLineToken,
    QuoteToken,
    RefLinkToken,
    TextToken,
    Token,
    WakabamarkEndToken,
    WakabamarkStartToken,
    as_text,
)

URL_PATTERN: Final = (
    r"https?://"  # Protocol
    r"(?:[^?#@\[\]\s]+@)?"  # Optional HTTP Basic Auth
    r"(?:[^.\[\]\s-][^?#/\[\]\s]*|\[[0-9a-f:]+\](?::\d+)?)"  # Hostname or IPv6
    r"(?:/[^/?#\[\]\s]*)*"  # Path parts
    r"(?:\?[^#\[\]\s]+)?"  # Optional query
    r"(?:#[^\[\]\s]+)?"  # Optional fragment
)

_SIMPLE_TAGS: Final = r"[bius]|su[pb]|spoiler"

TOKEN_PATTERN: Final = (
    r"(?P<code>\[code\](?P<code_body>[\s\S]*?)\[/code\])"  # Code pair as a single match
    rf"|\[(?P<bb_start>{_SIMPLE_TAGS})\]"  # BBCode start tags
    rf"|\[(?P<bb_color>color)=(?P<color>{COLOR_VALUE})\]"  # Color start tag
    rf"|\[(?P<bb_size>size)=(?P<size>{SIZE_VALUE})\]"  # Size start tag
    rf"|\[/(?P<bb_end>{_SIMPLE_TAGS}|color|size)\]"  # BBCode end tags
    r"|>>(?P<reflink>\d+)"
    r"|^>(?P<quote>.*?)$"
    r"|(?P<wakabamark>\*\*|\*|%%|~~)"
    r"|(?P<newline>\n)"
    rf"|(?P<link>{URL_PATTERN})"
    r"|##(?P<dice_count>\d{1,2})d(?P<dice_max>\d{1,4})##"
)

_TOKEN_RE: Final = re.compile(TOKEN_PATTERN, re.IGNORECASE | re.MULTILINE)


class Tokenizer:
    """Tokenizer for forum post markup.

    Usage:
        >>> tokenizer = Tokenizer()
        >>> tokens = tokenizer.tokenize("Hello %%brutally cruel%% world!")
        >>> [t.text for t in tokens]
        ['Hello ', '%%', 'brutally cruel', '%%', ' world!']

    Wakabamark symbols are toggles: the first occurrence opens, the next
    occurrence of the same symbol closes. Two markers of the same symbol
    can therefore never nest.

    """

    __slots__ = ()

    def tokenize(self, text: str) -> list[Token]:
        """Split ``text`` into an ordered token list.

        Args:
            text: Raw post message

        Returns:
            Tokens ordered by index, with unpaired tags degraded to text
            and adjacent text merged.
        """
        text = text.replace("\r", "")
        tokens = self._scan(text)
        tokens = self.convert_unpaired_tags_to_text(tokens)
        return self.merge_text_tokens(tokens)

    def _scan(self, text: str) -> list[Token]:
        """Classify every match of the token pattern."""
        result: list[Token] = []
        open_symbols: list[str] = []
        pos = 0

        for found in _TOKEN_RE.finditer(text):
            start = found.start()
            if start > pos:
                result.append(TextToken(text=text[pos:start], index=len(result), offset=pos))
            pos = found.end()

            if found["code"] is not None:
                body_start = found.start("code_body")
                body_end = found.end("code_body")
                result.append(
                    BBCodeStartToken(text=text[start:body_start], index=len(result), offset=start, tag="code")
                )
                result.append(
                    TextToken(text=found["code_body"], index=len(result), offset=body_start)
                )
                result.append(
                    BBCodeEndToken(text=text[body_end:pos], index=len(result), offset=body_end, tag="code")
                )
                continue

            result.append(self._classify(found, len(result), open_symbols))

        if pos < len(text):
            result.append(TextToken(text=text[pos:], index=len(result), offset=pos))

        return result

    def _classify(self, found: re.Match[str], index: int, open_symbols: list[str]) -> Token:
        """Build the token for a single non-code match."""
        raw = found.group()
        offset = found.start()

        match found.lastgroup:
            case "bb_start":
                return BBCodeStartToken(text=raw, index=index, offset=offset, tag=found["bb_start"].lower())
            case "color" | "size" as tag:
                return BBCodeStartToken(text=raw, index=index, offset=offset, tag=tag, value=found[tag])
            case "bb_end":
                return BBCodeEndToken(text=raw, index=index, offset=offset, tag=found["bb_end"].lower())
            case "reflink":
                return RefLinkToken(text=raw, index=index, offset=offset, post_id=int(found["reflink"]))
            case "quote":
                return QuoteToken(text=raw, index=index, offset=offset, quote=found["quote"])
            case "wakabamark":
                if raw in open_symbols:
                    open_symbols.remove(raw)
                    return WakabamarkEndToken(text=raw, index=index, offset=offset, symbol=raw)
                open_symbols.append(raw)
                return WakabamarkStartToken(text=raw, index=index, offset=offset, symbol=raw)
            case "newline":
                return NewLineToken(text=raw, index=index, offset=offset)
            case "link":
                return LinkToken(text=raw, index=index, offset=offset, url=raw)
            case "dice_max":
                return DiceToken(
                    text=raw,
                    index=index,
                    offset=offset,
                    count=int(found["dice_count"]),
                    max=int(found["dice_max"]),
                )
            case _:
                return TextToken(text=raw, index=index, offset=offset)

    def convert_unpaired_tags_to_text(self, tokens: list[Token]) -> list[Token]:
        """Degrade tags without a partner to text.

        BBCode tags pair by tag name, Wakabamark markers by exact symbol;
        each dialect has its own stack. An end token pairs with the most
        recent open entry of the same key, wherever it sits in the stack.

        Args:
            tokens: Classified tokens in source order

        Returns:
            New token list of the same length.
        """
        result = list(tokens)
        open_tags: list[BBCodeStartToken] = []
        open_symbols: list[WakabamarkStartToken] = []

        for position, token in enumerate(result):
            match token:
                case BBCodeStartToken():
                    open_tags.append(token)
                case BBCodeEndToken(tag=tag):
                    if not _pop_matching(open_tags, lambda t: t.tag == tag):
                        result[position] = as_text(token)
                case WakabamarkStartToken():
                    open_symbols.append(token)
                case WakabamarkEndToken(symbol=symbol):
                    if not _pop_matching(open_symbols, lambda t: t.symbol == symbol):
                        result[position] = as_text(token)

        # Anything still open never closed
        unclosed = {t.index for t in open_tags} | {t.index for t in open_symbols}
        if unclosed:
            result = [as_text(t) if t.index in unclosed else t for t in result]

        return result

    def merge_text_tokens(self, tokens: list[Token]) -> list[Token]:
        """Merge runs of adjacent text tokens, keeping the first index."""
        result: list[Token] = []
        for token in tokens:
            previous = result[-1] if result else None
            if isinstance(token, TextToken) and isinstance(previous, TextToken):
                result[-1] = TextToken(
                    text=previous.text + token.text,
                    index=previous.index,
                    offset=previous.offset,
                )
            else:
                result.append(token)
        return result


def _pop_matching[T](stack: list[T], predicate: Callable[[T], bool]) -> bool:
    """Remove the topmost entry matching ``predicate``; report whether one existed."""
    for i in range(len(stack) - 1, -1, -1):
        if predicate(stack[i]):
            del stack[i]
            return True
    return False


_DEFAULT_TOKENIZER: Final = Tokenizer()


def tokenize(text: str) -> list[Token]:
    """Tokenize a post message with the module-level tokenizer."""
    return _DEFAULT_TOKENIZER.tokenize(text)
