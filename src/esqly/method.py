"""@query デコレータとクエリメソッド.

メソッドのシグネチャ(型アノテーション)からパラメータ種別を一度だけ決定し、
呼び出しごとには値のバインドだけを行う。

Examples:
    >>> class PersonRepository:
    ...     @query("{ 'bool' : { 'must' : { 'term' : { 'age' : ?0 } } } }")
    ...     def find_by_age(self, age: int) -> StringQuery: ...
    >>> PersonRepository().find_by_age(30).source
    "{ 'bool' : { 'must' : { 'term' : { 'age' : 30 } } } }"

"""

from __future__ import annotations

import collections.abc
import functools
import inspect
import logging
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar, get_args, get_origin, get_type_hints

from esqly.exceptions import ParameterIndexError, QueryMethodError, UnsupportedTypeError
from esqly.formatter import SCALAR_TYPES, BoundArgument, ParameterKind
from esqly.parser.template import QueryTemplate, StringQuery
from esqly.parser.tokenizer import DEFAULT_MARKER

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# 要素型を1つ取るコレクション型(get_origin の結果)
_COLLECTION_ORIGINS: frozenset[Any] = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Collection,
        collections.abc.Iterable,
        collections.abc.Set,
        collections.abc.MutableSet,
    }
)

_SELF_NAMES = ("self", "cls")


def classify(annotation: Any) -> ParameterKind:
    """宣言型をパラメータ種別に分類する.

    Args:
        annotation: 型アノテーション(get_type_hints で解決済みのもの)

    Returns:
        パラメータ種別

    Raises:
        UnsupportedTypeError: 4種別のいずれにも当てはまらない型

    """
    base, explicit = _unwrap_annotated(annotation)
    if explicit is not None:
        return explicit

    scalar = _classify_scalar(base)
    if scalar is not None:
        return scalar

    origin = get_origin(base)
    if origin in _COLLECTION_ORIGINS:
        element = _element_type(base, origin)
        element_kind = _classify_scalar(_unwrap_annotated(element)[0])
        if element_kind is ParameterKind.STRING:
            return ParameterKind.STRING_COLLECTION
        if element_kind is ParameterKind.SCALAR:
            return ParameterKind.SCALAR_COLLECTION
        msg = f"unsupported collection element type {element!r} in {annotation!r}"
        raise UnsupportedTypeError(msg)

    if isinstance(base, type) and base in _COLLECTION_ORIGINS:
        msg = f"collection type {annotation!r} must declare its element type"
        raise UnsupportedTypeError(msg)
    msg = f"unsupported parameter type {annotation!r}"
    raise UnsupportedTypeError(msg)


def _unwrap_annotated(annotation: Any) -> tuple[Any, ParameterKind | None]:
    """Annotated[T, ...] を T と明示種別に分解する."""
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        for meta in metadata:
            if isinstance(meta, ParameterKind):
                return base, meta
        return base, None
    return annotation, None


def _classify_scalar(tp: Any) -> ParameterKind | None:
    if get_origin(tp) is not None or not isinstance(tp, type):
        return None
    if issubclass(tp, str):
        return ParameterKind.STRING
    if issubclass(tp, SCALAR_TYPES):
        return ParameterKind.SCALAR
    return None


def _element_type(annotation: Any, origin: Any) -> Any:
    args = get_args(annotation)
    if origin is tuple:
        # tuple[X, ...] または tuple[X, X] のような同型タプル
        elements = [a for a in args if a is not Ellipsis]
        if elements and all(e == elements[0] for e in elements):
            return elements[0]
    elif len(args) == 1:
        return args[0]
    msg = f"collection type {annotation!r} must declare exactly one element type"
    raise UnsupportedTypeError(msg)


@dataclass(frozen=True)
class QueryParameter:
    """クエリメソッドのパラメータ."""

    name: str
    """パラメータ名."""

    index: int
    """プレースホルダの位置(self を除いた 0 始まり)."""

    kind: ParameterKind
    """宣言種別."""


class QueryMethod:
    """テンプレートとパラメータ種別を結び付けたクエリメソッド."""

    def __init__(self, func: Callable[..., Any], template: str, *, marker: str = DEFAULT_MARKER) -> None:
        """初期化.

        Args:
            func: 対象の関数(本体は実行しない)
            template: クエリテンプレート
            marker: プレースホルダ記号

        Raises:
            QueryMethodError: 可変長引数や型アノテーションのないパラメータ
            UnsupportedTypeError: 分類できない宣言型
            ParameterIndexError: テンプレートが存在しない位置を参照している
            TemplateParseError: テンプレートの構文エラー

        """
        self._func = func
        self._template = QueryTemplate(template, marker=marker)
        self._signature = inspect.signature(func)
        self._parameters = tuple(self._describe_parameters())
        if self._template.required_count > len(self._parameters):
            raise ParameterIndexError(self._template.required_count - 1, len(self._parameters))
        logger.debug(
            "registered query method %s with %d parameter(s)",
            func.__qualname__,
            len(self._parameters),
        )

    def _describe_parameters(self) -> list[QueryParameter]:
        try:
            hints = get_type_hints(self._func, include_extras=True)
        except NameError as e:
            msg = f"cannot resolve annotations of {self._func.__qualname__}: {e}"
            raise QueryMethodError(msg) from e

        result: list[QueryParameter] = []
        for position, param in enumerate(self._signature.parameters.values()):
            if position == 0 and param.name in _SELF_NAMES and param.name not in hints:
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                msg = f"{self._func.__qualname__}: variadic parameter {param.name!r} is not supported"
                raise QueryMethodError(msg)
            if param.name not in hints:
                msg = f"{self._func.__qualname__}: parameter {param.name!r} has no type annotation"
                raise QueryMethodError(msg)
            result.append(QueryParameter(name=param.name, index=len(result), kind=classify(hints[param.name])))
        return result

    @property
    def name(self) -> str:
        return self._func.__name__

    @property
    def template(self) -> QueryTemplate:
        return self._template

    @property
    def parameters(self) -> tuple[QueryParameter, ...]:
        return self._parameters

    def create_query(self, *args: Any, **kwargs: Any) -> StringQuery:
        """引数をバインドしたクエリを返す.

        メソッドの場合は第1引数にインスタンスを渡す。
        引数の過不足は TypeError(inspect.Signature.bind と同じ)。
        """
        bound = self._signature.bind(*args, **kwargs)
        bound.apply_defaults()
        named = {p.name: bound.arguments[p.name] for p in self._parameters}
        arguments = [BoundArgument(p.kind, named[p.name]) for p in self._parameters]
        return StringQuery(source=self._template.bind(arguments), named_params=named)

    def __repr__(self) -> str:
        return f"QueryMethod({self._func.__qualname__}, {self._template.template!r})"


def query(template: str, *, marker: str = DEFAULT_MARKER) -> Callable[[F], F]:
    """関数・メソッドにクエリテンプレートを付与するデコレータ.

    デコレート後の呼び出しは本体を実行せず StringQuery を返す。

    Args:
        template: クエリテンプレート
        marker: プレースホルダ記号

    """

    def decorator(func: F) -> F:
        method = QueryMethod(func, template, marker=marker)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> StringQuery:
            return method.create_query(*args, **kwargs)

        wrapper.__query_method__ = method  # type: ignore[attr-defined]
        return typing.cast(F, wrapper)

    return decorator


def query_method_of(func: Callable[..., Any]) -> QueryMethod:
    """@query でデコレートされた関数の QueryMethod を返す.

    Raises:
        QueryMethodError: @query でデコレートされていない

    """
    method = getattr(func, "__query_method__", None)
    if not isinstance(method, QueryMethod):
        msg = f"{getattr(func, '__qualname__', func)!r} is not decorated with @query"
        raise QueryMethodError(msg)
    return method
