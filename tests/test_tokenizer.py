"""Tests for the single-pattern tokenizer."""

from boardmark.tokenizer import Tokenizer, tokenize
from boardmark.tokens import (
    BBCodeEndToken,
    BBCodeStartToken,
    DiceToken,
    LinkToken,
    NewLineToken,
    QuoteToken,
    RefLinkToken,
    TextToken,
    WakabamarkEndToken,
    WakabamarkStartToken,
)


def _kinds(text: str) -> list[str]:
    return [type(token).__name__ for token in tokenize(text)]


# =============================================================================
# Basic tokens
# =============================================================================


class TestBasicTokens:
    """Plain text, newlines, quotes, reflinks, links and dice."""

    def test_empty_string(self) -> None:
        assert tokenize("") == []

    def test_text(self) -> None:
        assert tokenize("Hello world!") == [TextToken("Hello world!", 0, 0)]

    def test_text_with_new_line(self) -> None:
        assert tokenize("Hello\nworld!") == [
            TextToken("Hello", 0, 0),
            NewLineToken("\n", 1, 5),
            TextToken("world!", 2, 6),
        ]

    def test_carriage_returns_are_stripped(self) -> None:
        assert tokenize("a\r\nb") == [
            TextToken("a", 0, 0),
            NewLineToken("\n", 1, 1),
            TextToken("b", 2, 2),
        ]

    def test_quote(self) -> None:
        assert tokenize("> Hello world!") == [
            QuoteToken("> Hello world!", 0, 0, quote=" Hello world!")
        ]

    def test_quote_only_at_line_start(self) -> None:
        assert tokenize("a > b") == [TextToken("a > b", 0, 0)]

    def test_quote_on_second_line(self) -> None:
        assert tokenize("line\n>quote") == [
            TextToken("line", 0, 0),
            NewLineToken("\n", 1, 4),
            QuoteToken(">quote", 2, 5, quote="quote"),
        ]

    def test_reflink(self) -> None:
        assert tokenize(">>83") == [RefLinkToken(">>83", 0, 0, post_id=83)]

    def test_reflink_takes_priority_over_quote(self) -> None:
        assert tokenize(">>12 hi") == [
            RefLinkToken(">>12", 0, 0, post_id=12),
            TextToken(" hi", 1, 4),
        ]

    def test_reflink_inside_text(self) -> None:
        assert _kinds("see >>12 now") == ["TextToken", "RefLinkToken", "TextToken"]

    def test_link(self) -> None:
        assert tokenize("https://google.com") == [
            LinkToken("https://google.com", 0, 0, url="https://google.com")
        ]

    def test_link_with_query_and_path(self) -> None:
        url = "https://www.youtube.com/watch?v=PEKkdIT8JPM&t=102s"
        assert tokenize(url) == [LinkToken(url, 0, 0, url=url)]

    def test_link_with_basic_auth_and_fragment(self) -> None:
        url = "http://user:pw@example.com/a/b?x=1#top"
        assert tokenize(url) == [LinkToken(url, 0, 0, url=url)]

    def test_link_with_ipv6_host(self) -> None:
        url = "http://[::1]:8080/path"
        assert tokenize(url) == [LinkToken(url, 0, 0, url=url)]

    def test_link_stops_at_whitespace(self) -> None:
        assert tokenize("go https://a.com/x now") == [
            TextToken("go ", 0, 0),
            LinkToken("https://a.com/x", 1, 3, url="https://a.com/x"),
            TextToken(" now", 2, 18),
        ]

    def test_link_stops_at_bracket(self) -> None:
        assert _kinds("[b]https://a.com[/b]") == [
            "BBCodeStartToken",
            "LinkToken",
            "BBCodeEndToken",
        ]

    def test_dice(self) -> None:
        assert tokenize("##2d6##") == [DiceToken("##2d6##", 0, 0, count=2, max=6)]

    def test_dice_is_case_insensitive(self) -> None:
        assert tokenize("##10D1000##") == [DiceToken("##10D1000##", 0, 0, count=10, max=1000)]

    def test_dice_with_too_many_dice_is_text(self) -> None:
        assert tokenize("##123d6##") == [TextToken("##123d6##", 0, 0)]


# =============================================================================
# Markup dialects
# =============================================================================


class TestWakabamark:
    """Toggle symbols resolved through the symbol stack."""

    def test_spoiler(self) -> None:
        assert tokenize("Hello %%brutally cruel%% world!") == [
            TextToken("Hello ", 0, 0),
            WakabamarkStartToken("%%", 1, 6, symbol="%%"),
            TextToken("brutally cruel", 2, 8),
            WakabamarkEndToken("%%", 3, 22, symbol="%%"),
            TextToken(" world!", 4, 24),
        ]

    def test_nested_different_symbols(self) -> None:
        assert _kinds("**bold *it* bold**") == [
            "WakabamarkStartToken",
            "TextToken",
            "WakabamarkStartToken",
            "TextToken",
            "WakabamarkEndToken",
            "TextToken",
            "WakabamarkEndToken",
        ]

    def test_same_symbol_toggles_instead_of_nesting(self) -> None:
        assert _kinds("*a *b* c*") == [
            "WakabamarkStartToken",
            "TextToken",
            "WakabamarkEndToken",
            "TextToken",
            "WakabamarkStartToken",
            "TextToken",
            "WakabamarkEndToken",
        ]

    def test_unclosed_symbol_is_text(self) -> None:
        assert tokenize("**bold") == [TextToken("**bold", 0, 0)]

    def test_triple_asterisk_unclosed(self) -> None:
        assert tokenize("***") == [TextToken("***", 0, 0)]


class TestBBCode:
    """Bracket tags, values and the atomic code construct."""

    def test_bbcode(self) -> None:
        assert tokenize("Hello [b]brutally[/b] [i]cruel[/i] world!") == [
            TextToken("Hello ", 0, 0),
            BBCodeStartToken("[b]", 1, 6, tag="b"),
            TextToken("brutally", 2, 9),
            BBCodeEndToken("[/b]", 3, 17, tag="b"),
            TextToken(" ", 4, 21),
            BBCodeStartToken("[i]", 5, 22, tag="i"),
            TextToken("cruel", 6, 25),
            BBCodeEndToken("[/i]", 7, 30, tag="i"),
            TextToken(" world!", 8, 34),
        ]

    def test_bbcode_with_value(self) -> None:
        assert tokenize("Hello [color=#f00]brutally cruel[/color] world!") == [
            TextToken("Hello ", 0, 0),
            BBCodeStartToken("[color=#f00]", 1, 6, tag="color", value="#f00"),
            TextToken("brutally cruel", 2, 18),
            BBCodeEndToken("[/color]", 3, 32, tag="color"),
            TextToken(" world!", 4, 40),
        ]

    def test_all_color_lengths(self) -> None:
        for value in ("#f00", "#f00a", "#ff0000", "#ff0000aa"):
            tokens = tokenize(f"[color={value}]x[/color]")
            assert tokens[0] == BBCodeStartToken(f"[color={value}]", 0, 0, tag="color", value=value)

    def test_invalid_color_is_text(self) -> None:
        text = "[color=red]x[/color]"
        assert tokenize(text) == [TextToken(text, 0, 0)]

    def test_size(self) -> None:
        tokens = tokenize("[size=12]x[/size]")
        assert tokens[0] == BBCodeStartToken("[size=12]", 0, 0, tag="size", value="12")
        assert tokens[2] == BBCodeEndToken("[/size]", 2, 10, tag="size")

    def test_invalid_size_is_text(self) -> None:
        for text in ("[size=0]x[/size]", "[size=100]x[/size]", "[size=05]x[/size]"):
            assert tokenize(text) == [TextToken(text, 0, 0)]

    def test_tags_are_case_insensitive(self) -> None:
        assert tokenize("[B]x[/b]") == [
            BBCodeStartToken("[B]", 0, 0, tag="b"),
            TextToken("x", 1, 3),
            BBCodeEndToken("[/b]", 2, 4, tag="b"),
        ]

    def test_unpaired_bbcode_as_text(self) -> None:
        text = "Hello [b]brutally cruel[/i] world!"
        assert tokenize(text) == [TextToken(text, 0, 0)]

    def test_end_before_start_is_text(self) -> None:
        assert tokenize("[/b]x[b]") == [TextToken("[/b]x[b]", 0, 0)]

    def test_crossing_tags_stay_paired(self) -> None:
        assert _kinds("[b][i][/b][/i]") == [
            "BBCodeStartToken",
            "BBCodeStartToken",
            "BBCodeEndToken",
            "BBCodeEndToken",
        ]

    def test_code(self) -> None:
        assert tokenize("Hello [code]brutally[i] [/i]cruel[/code] world!") == [
            TextToken("Hello ", 0, 0),
            BBCodeStartToken("[code]", 1, 6, tag="code"),
            TextToken("brutally[i] [/i]cruel", 2, 12),
            BBCodeEndToken("[/code]", 3, 33, tag="code"),
            TextToken(" world!", 4, 40),
        ]

    def test_code_interior_is_not_rescanned(self) -> None:
        assert tokenize("[code]**x**\n>>1[/code]")[1] == TextToken("**x**\n>>1", 1, 6)

    def test_dialects_mix(self) -> None:
        assert _kinds("**[i]x[/i]**") == [
            "WakabamarkStartToken",
            "BBCodeStartToken",
            "TextToken",
            "BBCodeEndToken",
            "WakabamarkEndToken",
        ]


# =============================================================================
# Reconciliation and merging
# =============================================================================


class TestReconciliation:
    """Unpaired tag handling and text merging on raw token lists."""

    def test_unpaired_end_becomes_text(self) -> None:
        tokens = [
            TextToken("a", 0, 0),
            BBCodeEndToken("[/b]", 1, 1, tag="b"),
        ]
        assert Tokenizer().convert_unpaired_tags_to_text(tokens) == [
            TextToken("a", 0, 0),
            TextToken("[/b]", 1, 1),
        ]

    def test_unclosed_start_becomes_text(self) -> None:
        tokens = [WakabamarkStartToken("%%", 0, 0, symbol="%%")]
        assert Tokenizer().convert_unpaired_tags_to_text(tokens) == [TextToken("%%", 0, 0)]

    def test_dialects_do_not_pair_with_each_other(self) -> None:
        tokens = [
            WakabamarkStartToken("*", 0, 0, symbol="*"),
            BBCodeEndToken("[/i]", 1, 1, tag="i"),
        ]
        assert Tokenizer().convert_unpaired_tags_to_text(tokens) == [
            TextToken("*", 0, 0),
            TextToken("[/i]", 1, 1),
        ]

    def test_input_is_not_modified(self) -> None:
        tokens = [BBCodeEndToken("[/b]", 0, 0, tag="b")]
        Tokenizer().convert_unpaired_tags_to_text(tokens)
        assert tokens == [BBCodeEndToken("[/b]", 0, 0, tag="b")]

    def test_merge_keeps_first_index(self) -> None:
        tokens = [
            TextToken("Hello ", 0, 0),
            TextToken("world!", 1, 6),
            NewLineToken("\n", 2, 12),
            TextToken("x", 3, 13),
        ]
        assert Tokenizer().merge_text_tokens(tokens) == [
            TextToken("Hello world!", 0, 0),
            NewLineToken("\n", 2, 12),
            TextToken("x", 3, 13),
        ]
