"""esqly: positional query templates for search repositories."""

from esqly._create import create_query
from esqly.escape_utils import escape_string
from esqly.exceptions import (
    EsqlyError,
    ParameterIndexError,
    QueryMethodError,
    TemplateParseError,
    UnsupportedTypeError,
)
from esqly.formatter import BoundArgument, ParameterKind, format_value, infer_kind
from esqly.method import QueryMethod, QueryParameter, classify, query, query_method_of
from esqly.parser.template import QueryTemplate, StringQuery, bind

__all__ = [
    "BoundArgument",
    "EsqlyError",
    "ParameterIndexError",
    "ParameterKind",
    "QueryMethod",
    "QueryMethodError",
    "QueryParameter",
    "QueryTemplate",
    "StringQuery",
    "TemplateParseError",
    "UnsupportedTypeError",
    "bind",
    "classify",
    "create_query",
    "escape_string",
    "format_value",
    "infer_kind",
    "query",
    "query_method_of",
]
