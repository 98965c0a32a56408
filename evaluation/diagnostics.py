# diagnostics.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from frontend.parse_errors import ParseError
from runtime.errors import EvalError

# ---------------
# Diagnostic dataclass
# ---------------

@dataclass(frozen=True)
class Diagnostic:
    """Structured error diagnostic for one failed statement.

    Fields:
        line: Source line number (1-based)
        code: Error code (e.g. "NonexistantVar")
        message: Human-readable message (no line number prefix)
        col: Optional column (1-based), when the error points at a token
    """
    line: int
    code: str
    message: str
    col: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.code} line {self.line}: {self.message}"

# ---------------
# Constructors
# ---------------

def from_parse_error(err: ParseError, fallback_line: int) -> Diagnostic:
    line = err.line if err.line is not None else fallback_line
    return Diagnostic(line=line, code=err.code, message=err.message)


def from_eval_error(err: EvalError, line: int) -> Diagnostic:
    return Diagnostic(line=line, code=err.code, message=err.message)


def from_syntax_error(err: SyntaxError) -> Diagnostic:
    """Lexing errors carry their position on the SyntaxError itself."""
    return Diagnostic(
        line=err.lineno or 1,
        code="LexError",
        message=err.msg,
        col=err.offset,
    )
