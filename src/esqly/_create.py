"""create_query 便利関数."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from esqly.formatter import BoundArgument, ParameterKind, infer_kind
from esqly.parser.template import QueryTemplate, StringQuery
from esqly.parser.tokenizer import DEFAULT_MARKER


def create_query(
    template: str,
    values: Sequence[Any],
    kinds: Sequence[ParameterKind] | None = None,
    *,
    marker: str = DEFAULT_MARKER,
) -> StringQuery:
    """テンプレートに位置引数をバインドしてクエリを生成する.

    Args:
        template: クエリテンプレート
        values: 位置順の引数値
        kinds: 位置順の宣言種別。省略時は値から推定する
        marker: プレースホルダ記号

    Returns:
        StringQuery

    Raises:
        ValueError: values と kinds の長さが異なる
        ParameterIndexError: テンプレートが引数数以上の位置を参照している
        UnsupportedTypeError: 種別を決定できない、または種別に合わない値

    """
    if kinds is None:
        kinds = [infer_kind(v) for v in values]
    elif len(kinds) != len(values):
        msg = f"got {len(values)} value(s) but {len(kinds)} kind(s)"
        raise ValueError(msg)
    arguments = [BoundArgument(k, v) for k, v in zip(kinds, values)]
    return StringQuery(source=QueryTemplate(template, marker=marker).bind(arguments))
