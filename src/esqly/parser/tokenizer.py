"""クエリテンプレート内プレースホルダの字句解析."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from esqly.exceptions import TemplateParseError

# プレースホルダ記法:
#   ?0, ?1, ... ?11 - 引数リストの位置(0 始まり)
#
# 例:
#   { 'term' : { 'age' : ?0 } }        - そのまま埋め込み
#   { 'term' : { 'name' : '?0' } }     - テンプレート側でクォート
#   name:(?0, ?11, ?1, ?0)             - 同じ位置の繰り返し・順不同
#
# 記号の後に数字以外が続く場合(te?t、末尾の ?)はリテラル。
# 記号の後に符号付き数字が続く場合(?-1)は構文エラー。

DEFAULT_MARKER = "?"
"""デフォルトのプレースホルダ記号."""


@lru_cache(maxsize=16)
def _placeholder_pattern(marker: str) -> re.Pattern[str]:
    """記号ごとのプレースホルダパターンを返す."""
    if len(marker) != 1 or marker.isdigit() or marker in "+-":
        msg = f"placeholder marker must be a single non-digit character, got {marker!r}"
        raise ValueError(msg)
    return re.compile(
        re.escape(marker)
        + r"([+-])?"  # 符号(エラー検出用)
        + r"([0-9]+)"  # インデックス(ASCII 数字のみ)
    )


@dataclass(frozen=True)
class Literal:
    """プレースホルダ以外のテンプレート文字列."""

    text: str
    """元文字列そのまま."""


@dataclass(frozen=True)
class Placeholder:
    """プレースホルダトークン."""

    index: int
    """引数リストの位置(0 始まり)."""

    start: int
    """元文字列内の開始位置."""

    end: int
    """元文字列内の終了位置."""


Segment = Literal | Placeholder


def tokenize(template: str, marker: str = DEFAULT_MARKER) -> list[Segment]:
    """テンプレートをリテラルとプレースホルダのセグメント列に分割する.

    セグメントを順に連結(プレースホルダは元の記法)すると元文字列に戻る。

    Args:
        template: クエリテンプレート文字列
        marker: プレースホルダ記号

    Returns:
        Segment のリスト(出現順)

    Raises:
        TemplateParseError: 符号付きインデックスなど解釈できないプレースホルダ

    """
    segments: list[Segment] = []
    pos = 0
    for m in _placeholder_pattern(marker).finditer(template):
        if m.group(1):
            msg = f"malformed placeholder {m.group(0)!r}: index must be a non-negative integer"
            raise TemplateParseError(msg, m.start())
        if m.start() > pos:
            segments.append(Literal(template[pos : m.start()]))
        segments.append(Placeholder(index=int(m.group(2)), start=m.start(), end=m.end()))
        pos = m.end()
    if pos < len(template):
        segments.append(Literal(template[pos:]))
    return segments


def placeholder_indices(segments: list[Segment]) -> list[int]:
    """セグメント列に現れるインデックスを出現順に返す(重複あり)."""
    return [s.index for s in segments if isinstance(s, Placeholder)]
