"""esqly テンプレートパーサパッケージ."""

from esqly.parser.template import QueryTemplate, StringQuery, bind
from esqly.parser.tokenizer import Literal, Placeholder, Segment, tokenize

__all__ = ["Literal", "Placeholder", "QueryTemplate", "Segment", "StringQuery", "bind", "tokenize"]
