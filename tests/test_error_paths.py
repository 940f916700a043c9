"""Tests for error types, style tables and small utilities."""

import logging

import pytest

from boardmark.errors import BoardmarkError, MarkupInvariantError, RenderError
from boardmark.stringbuilder import StringBuilder
from boardmark.styles import (
    BBCODE_STYLES,
    STYLES,
    VALUE_TAGS,
    WAKABAMARK_STYLES,
    bbcode_style,
    is_valid_value,
    wakabamark_style,
)
from boardmark.tokenizer import tokenize
from boardmark.tokens import BBCodeStartToken, WakabamarkStartToken
from boardmark.utils import escape_html, get_logger, is_safe_url


class TestErrors:
    """Exception hierarchy and messages."""

    def test_hierarchy(self) -> None:
        assert issubclass(MarkupInvariantError, BoardmarkError)
        assert issubclass(RenderError, BoardmarkError)

    def test_invariant_error_with_index(self) -> None:
        error = MarkupInvariantError("No open span", index=3)
        assert str(error) == "token 3: No open span"
        assert error.index == 3
        assert error.message == "No open span"

    def test_invariant_error_without_index(self) -> None:
        assert str(MarkupInvariantError("broken")) == "broken"


class TestStyleTables:
    """Every marker the tokenizer can emit maps onto a style."""

    def test_tables_map_onto_styles(self) -> None:
        assert set(BBCODE_STYLES.values()) <= STYLES
        assert set(WAKABAMARK_STYLES.values()) <= STYLES
        assert VALUE_TAGS <= set(BBCODE_STYLES)

    def test_every_tokenized_tag_has_a_style(self) -> None:
        markup = (
            "[b][i][u][s][sup][sub][spoiler][color=#fff][size=2]x"
            "[/size][/color][/spoiler][/sub][/sup][/s][/u][/i][/b]"
            "**~~%%*x*%%~~**"
        )
        seen: set[str] = set()
        for token in tokenize(markup):
            match token:
                case BBCodeStartToken(tag=tag):
                    seen.add(bbcode_style(tag))
                case WakabamarkStartToken(symbol=symbol):
                    seen.add(wakabamark_style(symbol))
        assert seen == STYLES - {"code", "quote"}

    @pytest.mark.parametrize(
        ("style", "value", "valid"),
        [
            ("color", "#f00", True),
            ("color", "#F00A", True),
            ("color", "#a1b2c3", True),
            ("color", "#a1b2c3d4", True),
            ("color", "#12345", False),
            ("color", "red", False),
            ("color", "#fff;", False),
            ("color", None, False),
            ("size", "1", True),
            ("size", "99", True),
            ("size", "0", False),
            ("size", "100", False),
            ("size", "3px", False),
            ("bold", None, False),
        ],
    )
    def test_is_valid_value(self, style: str, value: str | None, valid: bool) -> None:
        assert is_valid_value(style, value) is valid

    def test_unknown_keys_raise(self) -> None:
        with pytest.raises(MarkupInvariantError, match="token 4"):
            bbcode_style("blink", 4)
        with pytest.raises(MarkupInvariantError):
            wakabamark_style("__")


class TestUtils:
    """Logger naming, escaping and URL checks."""

    def test_logger_prefix(self) -> None:
        assert get_logger("postprocess").name == "boardmark.postprocess"
        assert get_logger("boardmark.tokenizer").name == "boardmark.tokenizer"
        assert isinstance(get_logger("x"), logging.Logger)

    def test_escape_html(self) -> None:
        assert escape_html("") == ""
        assert escape_html("a & \"b\" 'c'") == "a &amp; &quot;b&quot; &#x27;c&#x27;"

    @pytest.mark.parametrize(
        ("url", "safe"),
        [
            ("https://a.com", True),
            ("HTTP://a.com", True),
            ("javascript:alert(1)", False),
            ("data:text/html,x", False),
            ("//a.com", False),
        ],
    )
    def test_is_safe_url(self, url: str, safe: bool) -> None:
        assert is_safe_url(url) is safe

    def test_string_builder(self) -> None:
        sb = StringBuilder()
        assert sb.build() == ""
        sb.append("<b>").append("").append_escaped("x & y").append("</b>")
        assert sb.build() == "<b>x &amp; y</b>"
