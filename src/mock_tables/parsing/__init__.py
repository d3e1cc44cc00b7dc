"""Parsing module for the ``or`` filter mini-language."""

from mock_tables.parsing.filter_lexer import FilterLexer
from mock_tables.parsing.filter_parser import (
    SUPPORTED_OR_OPERATORS,
    AnyOf,
    FilterParser,
    MalformedTerm,
    OrTerm,
    parse_or_filter,
)

__all__ = [
    "AnyOf",
    "FilterLexer",
    "FilterParser",
    "MalformedTerm",
    "OrTerm",
    "SUPPORTED_OR_OPERATORS",
    "parse_or_filter",
]
