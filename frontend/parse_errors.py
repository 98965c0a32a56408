# parse_errors.py
"""Errors raised by the expression parser."""

from __future__ import annotations
from typing import Optional


class ParseError(Exception):
    """Base class for statement parse failures.

    `code` is a stable identifier used by diagnostics; `line` is the source
    line of the offending token when known.
    """
    code = "ParseError"

    def __init__(self, message: str, line: Optional[int] = None, pos: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.pos = pos


class UnmatchedOpenParenError(ParseError):
    code = "UnmatchedOpenParen"

    def __init__(self, line=None, pos=None):
        super().__init__("Unmatched opening parenthesis", line, pos)


class UnmatchedCloseParenError(ParseError):
    code = "UnmatchedCloseParen"

    def __init__(self, line=None, pos=None):
        super().__init__("Unmatched closing parenthesis", line, pos)


class UnexpectedEndOfInputError(ParseError):
    code = "UnexpectedEndOfInput"

    def __init__(self, line=None, pos=None, message: str = "Unexpected end of input tokens array"):
        super().__init__(message, line, pos)


class IncompleteStatementError(UnexpectedEndOfInputError):
    """End of input reached inside a matrix literal."""
    code = "IncompleteStatement"

    def __init__(self, line=None, pos=None):
        super().__init__(line, pos, message="Incomplete statement: matrix literal is not closed")


class InvalidArithmeticExpressionError(ParseError):
    """Operator/operand adjacency that cannot form an expression."""
    code = "InvalidArithmaticExpression"

    def __init__(self, detail: str = "", line=None, pos=None):
        message = "Invalid arithmetic expression"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, line, pos)


class EmptyMatrixElementError(ParseError):
    code = "EmptyMatrixElement"

    def __init__(self, line=None, pos=None):
        super().__init__("Empty matrix elements are not allowed", line, pos)


class DimensionsMismatchError(ParseError):
    """Matrix literal row length differs from the row before it."""
    code = "DimensionsMismatch"

    def __init__(self, expected_len: int, actual_len: int, line=None, pos=None):
        super().__init__(f"Dimensions mismatch ({expected_len} vs {actual_len})", line, pos)
        self.expected_len = expected_len
        self.actual_len = actual_len


class UnexpectedTokenError(ParseError):
    code = "UnexpectedToken"

    def __init__(self, expected: Optional[str] = None, found: Optional[str] = None,
                 line=None, pos=None):
        message = "Unexpected token"
        if expected is not None:
            message = f"{message}, expected '{expected}'"
        if found is not None:
            message = f"{message}, found '{found}'"
        super().__init__(message, line, pos)
        self.expected = expected
        self.found = found
