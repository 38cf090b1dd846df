"""tokenize のプレースホルダ字句解析テスト."""

from __future__ import annotations

import pytest

from esqly.exceptions import TemplateParseError
from esqly.parser.tokenizer import Literal, Placeholder, placeholder_indices, tokenize


class TestBasicTokenize:
    """基本的な分割を検証する."""

    def test_no_placeholder(self) -> None:
        assert tokenize("{ 'match_all' : {} }") == [Literal("{ 'match_all' : {} }")]

    def test_empty_template(self) -> None:
        assert tokenize("") == []

    def test_single_placeholder(self) -> None:
        segments = tokenize("age:?0")
        assert segments == [Literal("age:"), Placeholder(index=0, start=4, end=6)]

    def test_placeholder_only(self) -> None:
        assert tokenize("?3") == [Placeholder(index=3, start=0, end=2)]

    def test_quoted_placeholder_keeps_quotes_in_literals(self) -> None:
        segments = tokenize("'name' : '?0' }")
        assert segments == [
            Literal("'name' : '"),
            Placeholder(index=0, start=10, end=12),
            Literal("' }"),
        ]

    def test_multi_digit_index(self) -> None:
        segments = tokenize("?11,?1")
        assert segments[0] == Placeholder(index=11, start=0, end=3)
        assert segments[2] == Placeholder(index=1, start=4, end=6)

    def test_adjacent_placeholders(self) -> None:
        assert placeholder_indices(tokenize("?0?1")) == [0, 1]


class TestRepeatedAndUnordered:
    """繰り返し・順不同のインデックスを検証する."""

    def test_indices_in_scan_order(self) -> None:
        template = "name:(?0, ?11, ?1, ?2, ?3, ?4, ?5, ?6, ?7, ?8, ?9, ?10, ?11, ?0, ?1)"
        assert placeholder_indices(tokenize(template)) == [0, 11, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 1]

    def test_leading_zero(self) -> None:
        assert placeholder_indices(tokenize("?01")) == [1]


class TestLiteralMarker:
    """数字が続かない記号はリテラルとして扱う."""

    def test_wildcard_in_query_string(self) -> None:
        assert tokenize("name:te?t") == [Literal("name:te?t")]

    def test_non_ascii_digit(self) -> None:
        """ASCII 以外の数字はインデックスにしない."""
        assert tokenize("name:te?٣") == [Literal("name:te?٣")]
        assert tokenize("?１") == [Literal("?１")]

    def test_trailing_marker(self) -> None:
        assert tokenize("why?") == [Literal("why?")]

    def test_marker_followed_by_digit_after_literal_marker(self) -> None:
        segments = tokenize("a? ?2")
        assert segments == [Literal("a? "), Placeholder(index=2, start=3, end=5)]


class TestMalformedPlaceholder:
    """解釈できないプレースホルダはエラー."""

    def test_negative_index(self) -> None:
        with pytest.raises(TemplateParseError) as exc_info:
            tokenize("age:?-1")
        assert exc_info.value.position == 4

    def test_signed_index(self) -> None:
        with pytest.raises(TemplateParseError):
            tokenize("?+2")


class TestCustomMarker:
    """プレースホルダ記号の変更を検証する."""

    def test_colon_marker(self) -> None:
        segments = tokenize("age::0 AND q:?0", marker=":")
        assert placeholder_indices(segments) == [0]
        assert segments[0] == Literal("age:")
        assert segments[-1] == Literal(" AND q:?0")

    def test_dollar_marker_is_escaped(self) -> None:
        assert placeholder_indices(tokenize("$0-$1", marker="$")) == [0, 1]

    @pytest.mark.parametrize("marker", ["", "??", "1", "-"])
    def test_invalid_marker(self, marker: str) -> None:
        with pytest.raises(ValueError):
            tokenize("?0", marker=marker)
