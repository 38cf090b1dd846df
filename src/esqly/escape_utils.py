"""クエリ文字列値のエスケープユーティリティ."""

from __future__ import annotations


def escape_string(value: str) -> str:
    r"""文字列内のバックスラッシュとダブルクォートをエスケープする.

    外側のクォートは付与しない。テンプレート側で '"?0"' のように囲むか、
    コレクション展開時に formatter が付与する。

    Args:
        value: エスケープ対象の文字列

    Returns:
        エスケープ済み文字列

    Examples:
        >>> escape_string('hello "Stranger"')
        'hello \\"Stranger\\"'
        >>> escape_string("C:\\temp")
        'C:\\\\temp'

    """
    # \ は " より先に処理する
    return value.replace("\\", "\\\\").replace('"', '\\"')
