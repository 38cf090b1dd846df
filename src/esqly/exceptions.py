"""esqly 例外クラス."""

from __future__ import annotations


class EsqlyError(Exception):
    """esqly の基底例外."""


class TemplateParseError(EsqlyError):
    """クエリテンプレートのプレースホルダ構文エラー."""

    def __init__(self, message: str, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (position {position})"
        super().__init__(message)
        self.position = position


class ParameterIndexError(EsqlyError):
    """プレースホルダのインデックスが引数の範囲外."""

    def __init__(self, index: int, count: int) -> None:
        super().__init__(
            f"placeholder ?{index} references argument {index}, but only {count} argument(s) are bound"
        )
        self.index = index
        self.count = count


class UnsupportedTypeError(EsqlyError):
    """宣言型または値が4種類のパラメータ種別に当てはまらない."""


class QueryMethodError(EsqlyError):
    """クエリメソッドのシグネチャを解釈できない."""
