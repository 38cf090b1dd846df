"""位置プレースホルダ付きクエリテンプレートのバインド."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from esqly.exceptions import ParameterIndexError
from esqly.formatter import BoundArgument
from esqly.parser.tokenizer import DEFAULT_MARKER, Literal, Segment, placeholder_indices, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StringQuery:
    """バインド済みのクエリ."""

    source: str
    """プレースホルダ置換後のクエリ文字列."""

    named_params: dict[str, Any] = field(default_factory=dict, hash=False)
    """バインドに使った引数(名前付き、クエリメソッド経由の場合)."""


class QueryTemplate:
    """位置プレースホルダ(?0, ?1, ...)付きクエリテンプレート.

    構築時に一度だけ字句解析し、bind() ではセグメント列を再利用する。
    インスタンスは不変で、複数スレッドから同時に bind() してよい。

    Examples:
        >>> from esqly.formatter import BoundArgument, ParameterKind
        >>> t = QueryTemplate("{ 'term' : { 'age' : ?0 } }")
        >>> t.bind([BoundArgument(ParameterKind.SCALAR, 30)])
        "{ 'term' : { 'age' : 30 } }"

    """

    def __init__(self, template: str, *, marker: str = DEFAULT_MARKER) -> None:
        """初期化.

        Args:
            template: クエリテンプレート文字列
            marker: プレースホルダ記号

        Raises:
            TemplateParseError: 解釈できないプレースホルダを含む

        """
        self._template = template
        self._marker = marker
        self._segments: tuple[Segment, ...] = tuple(tokenize(template, marker))
        indices = placeholder_indices(list(self._segments))
        self._required_count = max(indices) + 1 if indices else 0
        logger.debug("compiled query template with %d placeholder(s): %r", len(indices), template)

    @property
    def template(self) -> str:
        """元のテンプレート文字列."""
        return self._template

    @property
    def marker(self) -> str:
        return self._marker

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def required_count(self) -> int:
        """バインドに必要な最小引数数(最大インデックス + 1)."""
        return self._required_count

    def bind(self, arguments: Sequence[BoundArgument]) -> str:
        """プレースホルダを引数のフラグメントで置換した文字列を返す.

        置換は出現ごとに独立して行い、置換結果は再走査しない。

        Args:
            arguments: 位置順のバインド引数

        Returns:
            置換後のクエリ文字列

        Raises:
            ParameterIndexError: インデックスが引数数以上
            UnsupportedTypeError: 種別に合わない値

        """
        parts: list[str] = []
        for segment in self._segments:
            if isinstance(segment, Literal):
                parts.append(segment.text)
                continue
            if segment.index >= len(arguments):
                raise ParameterIndexError(segment.index, len(arguments))
            parts.append(arguments[segment.index].format())
        return "".join(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryTemplate):
            return NotImplemented
        return self._template == other._template and self._marker == other._marker

    def __hash__(self) -> int:
        return hash((self._template, self._marker))

    def __repr__(self) -> str:
        return f"QueryTemplate({self._template!r})"


def bind(template: str, arguments: Sequence[BoundArgument], *, marker: str = DEFAULT_MARKER) -> str:
    """テンプレート文字列を直接バインドする.

    同じテンプレートを繰り返し使う場合は QueryTemplate を保持すること。
    """
    return QueryTemplate(template, marker=marker).bind(arguments)
