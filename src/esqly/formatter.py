"""バインド値をプレースホルダ位置に埋め込むテキストへ変換する."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from esqly.escape_utils import escape_string
from esqly.exceptions import UnsupportedTypeError


class ParameterKind(Enum):
    """宣言型によるパラメータ種別.

    値の実行時型ではなく、メソッドに宣言された型で決まる。
    """

    STRING = "string"
    """文字列スカラー(エスケープあり、クォートなし)."""

    SCALAR = "scalar"
    """数値・真偽値などの非文字列スカラー."""

    STRING_COLLECTION = "string_collection"
    """文字列のコレクション(要素ごとにクォート + エスケープ)."""

    SCALAR_COLLECTION = "scalar_collection"
    """非文字列スカラーのコレクション."""

    @property
    def is_collection(self) -> bool:
        """コレクション種別か."""
        return self in (ParameterKind.STRING_COLLECTION, ParameterKind.SCALAR_COLLECTION)


@dataclass(frozen=True)
class BoundArgument:
    """宣言種別と実行時値の組."""

    kind: ParameterKind
    """宣言種別."""

    value: Any
    """実行時値."""

    def format(self) -> str:
        """この引数のフラグメントを返す."""
        return format_value(self.value, self.kind)


SCALAR_TYPES: tuple[type, ...] = (bool, int, float, Decimal)
"""SCALAR として扱う型."""


def format_value(value: Any, kind: ParameterKind) -> str:
    """値を宣言種別に従ってテキスト化する.

    Args:
        value: 実行時値
        kind: 宣言種別

    Returns:
        プレースホルダと置き換えるテキスト

    Raises:
        UnsupportedTypeError: None 値、入れ子コレクションなど表現できない値

    """
    if kind is ParameterKind.STRING:
        return _format_string(value)
    if kind is ParameterKind.SCALAR:
        return _format_scalar(value)
    if kind is ParameterKind.STRING_COLLECTION:
        return "[" + ",".join(f'"{_format_string(e)}"' for e in _elements(value)) + "]"
    if kind is ParameterKind.SCALAR_COLLECTION:
        return "[" + ",".join(_format_scalar(e) for e in _elements(value)) + "]"
    msg = f"unsupported parameter kind: {kind!r}"
    raise UnsupportedTypeError(msg)


def _format_string(value: Any) -> str:
    if value is None:
        msg = "None cannot be bound to a string placeholder"
        raise UnsupportedTypeError(msg)
    return escape_string(value if isinstance(value, str) else str(value))


def _format_scalar(value: Any) -> str:
    if value is None:
        msg = "None cannot be bound to a scalar placeholder"
        raise UnsupportedTypeError(msg)
    if isinstance(value, bool):
        return "true" if value else "false"
    if not isinstance(value, SCALAR_TYPES):
        msg = f"{type(value).__name__} value {value!r} cannot be bound as a scalar"
        raise UnsupportedTypeError(msg)
    return str(value)


def _elements(value: Any) -> list[Any]:
    """コレクション値の要素を反復順で取り出す."""
    if not _is_collection(value):
        msg = f"{type(value).__name__} value cannot be bound as a collection"
        raise UnsupportedTypeError(msg)
    elements = list(value)
    for e in elements:
        if e is None:
            msg = "collection contains None"
            raise UnsupportedTypeError(msg)
        if isinstance(e, Mapping) or _is_collection(e):
            msg = "nested collections are not supported"
            raise UnsupportedTypeError(msg)
    return elements


def _is_collection(value: Any) -> bool:
    """文字列・バイト列・マッピング以外のイテラブルか."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, Mapping):
        return False
    return isinstance(value, Iterable)


def infer_kind(value: Any) -> ParameterKind:
    """実行時値から種別を推定する.

    宣言型がない場合(create_query で kinds 省略時)にのみ使う。
    空コレクションはどちらの種別でも [] になるので SCALAR_COLLECTION とする。

    Raises:
        UnsupportedTypeError: 推定できない値

    """
    if isinstance(value, str):
        return ParameterKind.STRING
    if isinstance(value, SCALAR_TYPES):
        return ParameterKind.SCALAR
    if isinstance(value, Collection) and _is_collection(value):
        elements = list(value)
        if elements and all(isinstance(e, str) for e in elements):
            return ParameterKind.STRING_COLLECTION
        if all(isinstance(e, SCALAR_TYPES) for e in elements):
            return ParameterKind.SCALAR_COLLECTION
    msg = f"cannot infer parameter kind for {type(value).__name__} value {value!r}"
    raise UnsupportedTypeError(msg)
