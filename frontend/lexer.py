# lexer.py
"""ConVector lexer.

Tokenizes one line (or a whole script) into a list of Token objects. Line
comments start with '%', which lets script files carry test expectations.
"""

import re
from dataclasses import dataclass
from typing import List

TokenKind = str

@dataclass
class Token:
    kind: TokenKind # "ID", "NUMBER", "NEWLINE", "+", "["
    value: str # original text
    pos: int # character offset for error messages
    line: int  # line number
    col: int = 0  # column (1-based)

    def stringify(self) -> str:
        """Human-readable token name used in parse error messages."""
        if self.kind == "NUMBER":
            return f"NumericLiteral: {self.value}"
        if self.kind == "ID":
            return f"Identifier: {self.value}"
        return TOKEN_NAMES.get(self.kind, self.kind)


TOKEN_NAMES = {
    "+": "Plus",
    "-": "Minus",
    "*": "Asterisk",
    "/": "Slash",
    "=": "Equal",
    "(": "OpenParen",
    ")": "CloseParen",
    "[": "OpenBracket",
    "]": "CloseBracket",
    "{": "OpenCurly",
    "}": "CloseCurly",
    ",": "Comma",
    ";": "SemiColon",
    "NEWLINE": "EndOfLine",
    "EOF": "EndOfFile",
}

TOKEN_SPEC = [
    ("NUMBER",   r"\d[\d_]*(?:\.[\d_]*)?"), # ints or floats, '_' digit separators
    ("ID",       r"[A-Za-z_]\w*"), # identifiers
    ("OP",       r"[+\-*/=()\[\]{},;]"),
    ("NEWLINE",  r"\r\n|\r|\n"),
    ("SKIP",     r"[ \t\f\v]+"), # spaces/tabs
    ("COMMENT",  r"%[^\r\n]*"), # comments
    ("MISMATCH", r"."), # anything else is an error
]

MASTER_RE = re.compile("|".join(
    f"(?P<{name}>{pat})" for name, pat in TOKEN_SPEC
))

EXPONENT_RE = re.compile(r"e_*([+\-]?)(\d[\d_]*)?")


def _lex_error(message: str, line: int, col: int) -> SyntaxError:
    err = SyntaxError(message)
    err.lineno = line
    err.offset = col
    return err


def lex(src: str) -> List[Token]:
    """Turn a ConVector source string into a list of Tokens.

    Numbers may use '_' as a digit separator and an 'e' exponent. A number
    immediately followed by any other letter is rejected.
    """
    tokens: List[Token] = []
    line = 1
    line_start = 0
    pos = 0

    while pos < len(src):
        m = MASTER_RE.match(src, pos)
        kind = m.lastgroup
        value = m.group()
        start_pos = pos
        col = start_pos - line_start + 1

        if kind == "NUMBER":
            end = m.end()
            if end < len(src) and src[end] == "e":
                exp = EXPONENT_RE.match(src, end)
                if exp.group(2) is None:
                    raise _lex_error(
                        f"The scientific notation is not complete in {src[start_pos:exp.end()]!r} "
                        f"at line {line}", line, col)
                end = exp.end()
            if end < len(src) and src[end] == ".":
                raise _lex_error(
                    f"Could not parse a numeric literal with more than one dot at line {line}",
                    line, col)
            if end < len(src) and src[end].isalpha():
                bad = src[end]
                raise _lex_error(
                    f"Unsupported syntax {bad!r} at line {line}: "
                    f"suffixes other than 'e' are not supported", line, col)
            value = src[start_pos:end]
            tokens.append(Token("NUMBER", value, start_pos, line, col))
            pos = end
        elif kind == "ID":
            tokens.append(Token("ID", value, start_pos, line, col))
            pos = m.end()
        elif kind == "OP":
            tokens.append(Token(value, value, start_pos, line, col))
            pos = m.end()
        elif kind == "NEWLINE":
            tokens.append(Token("NEWLINE", value, start_pos, line, col))
            line += 1
            pos = m.end()
            line_start = pos
        elif kind == "SKIP" or kind == "COMMENT":
            pos = m.end()
        else:
            raise _lex_error(f"Unexpected character {value!r} at line {line}, column {col}", line, col)

    tokens.append(Token("EOF", "", len(src), line, len(src) - line_start + 1))
    return tokens


def number_value(tok: Token) -> float:
    """Numeric value of a NUMBER token ('_' separators dropped)."""
    return float(tok.value.replace("_", ""))
