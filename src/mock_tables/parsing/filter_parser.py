"""Parser for the ``or`` filter mini-language.

``status.eq.active,status.eq.new`` parses into an :class:`AnyOf` node with one
:class:`OrTerm` per comma-separated term. Only ``eq`` and ``neq`` are
supported; terms using another operator, or that do not parse at all, are
kept in the tree and evaluate to false.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import ply.yacc as yacc

from mock_tables.parsing.filter_lexer import FilterLexer

SUPPORTED_OR_OPERATORS = frozenset({"eq", "neq"})


@dataclass(frozen=True)
class OrTerm:
    """A ``column.operator.value`` term. The value is always the raw text."""

    column: str
    operator: str
    value: str

    @property
    def supported(self) -> bool:
        return self.operator in SUPPORTED_OR_OPERATORS


@dataclass(frozen=True)
class MalformedTerm:
    """A term that could not be parsed."""

    text: str
    reason: str = ""


@dataclass(frozen=True)
class AnyOf:
    """The disjunction of every term of one ``or`` filter."""

    terms: tuple[OrTerm | MalformedTerm, ...]
    source: str = ""


class FilterParser:
    """Parser for ``or`` filter strings."""

    tokens = FilterLexer.tokens

    def __init__(self) -> None:
        self.lexer = FilterLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_term_with_value(self, p: yacc.YaccProduction) -> None:
        """term : IDENTIFIER DOT IDENTIFIER DOT VALUE"""
        p[0] = OrTerm(column=p[1], operator=p[3], value=p[5])

    def p_term_empty_value(self, p: yacc.YaccProduction) -> None:
        """term : IDENTIFIER DOT IDENTIFIER DOT"""
        p[0] = OrTerm(column=p[1], operator=p[3], value="")

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="term", **kwargs)

    def parse_term(self, data: str) -> OrTerm:
        """Parse a single term, raising SyntaxError if it is malformed."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.lexer.input(data)
        return self.parser.parse(data, lexer=self.lexer.lexer)

    def parse(self, data: str) -> AnyOf:
        """Parse a comma-separated filter string.

        Never raises for bad input; every term that fails to parse becomes a
        :class:`MalformedTerm`.
        """
        terms: list[OrTerm | MalformedTerm] = []
        for raw_term in data.split(","):
            try:
                terms.append(self.parse_term(raw_term))
            except SyntaxError as error:
                terms.append(MalformedTerm(text=raw_term, reason=str(error)))
        return AnyOf(terms=tuple(terms), source=data)


_shared_parser: FilterParser | None = None


def parse_or_filter(data: str) -> AnyOf:
    """Parse ``data`` with a lazily built module-level parser."""
    global _shared_parser
    if _shared_parser is None:
        _shared_parser = FilterParser()
    return _shared_parser.parse(data)
