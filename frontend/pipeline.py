# frontend/pipeline.py
"""Convenience functions for the ConVector front end."""

from __future__ import annotations
from typing import List

from frontend.expr_parser import ExprParser
from frontend.lexer import lex
from frontend.parse_errors import UnexpectedTokenError
from ir import Statement


def parse_line(src: str) -> Statement:
    """Parse a single statement (one REPL line).

    Args:
        src: Source code string

    Returns:
        The parsed Statement

    Raises:
        SyntaxError: on a lexing error
        ParseError: if the text is not exactly one statement
    """
    parser = ExprParser(lex(src))
    parser.skip_separators()
    stmt = parser.parse_statement()
    parser.skip_separators()
    if not parser.at_end():
        tok = parser.current()
        raise UnexpectedTokenError(
            expected="EndOfFile", found=tok.stringify(), line=tok.line, pos=tok.pos
        )
    return stmt


def parse_source(src: str) -> List[Statement]:
    """Parse all statements of a source text. Stops at the first error.

    Args:
        src: Source code string

    Returns:
        Statements in source order
    """
    return list(ExprParser(lex(src)).parse_statements())
