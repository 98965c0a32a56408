"""Unit tests for the ConVector lexer.

Run with:

    python3 tests/test_lexer.py
"""
import sys
import os

# Ensure project root is on the path regardless of working directory.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from frontend.lexer import lex, number_value


def kinds(src):
    return [t.kind for t in lex(src)]


def raises_syntax_error(src):
    try:
        lex(src)
    except SyntaxError as e:
        return e
    return None


def test_simple_expression():
    assert kinds("1 + x") == ["NUMBER", "+", "ID", "EOF"]


def test_empty_source_is_just_eof():
    toks = lex("")
    assert [t.kind for t in toks] == ["EOF"]


def test_all_punctuation():
    assert kinds("+-*/=()[]{},;") == list("+-*/=()[]{},;") + ["EOF"]


def test_number_forms():
    toks = lex("42 3.25 1_000 1e5 2.5e-3 1_000.5e-1_0 7.")
    values = [number_value(t) for t in toks if t.kind == "NUMBER"]
    assert values == [42.0, 3.25, 1000.0, 1e5, 2.5e-3, 1000.5e-10, 7.0], values


def test_two_dots_rejected():
    err = raises_syntax_error("x = 2.5.1")
    assert err is not None
    assert "more than one dot" in err.msg


def test_letter_suffix_rejected():
    err = raises_syntax_error("3x")
    assert err is not None
    assert "suffixes other than 'e'" in err.msg


def test_incomplete_exponent_rejected():
    err = raises_syntax_error("1e")
    assert err is not None
    assert "scientific notation" in err.msg
    assert raises_syntax_error("1e+") is not None


def test_unknown_character_reports_position():
    err = raises_syntax_error("x = 1\ny = $")
    assert err is not None
    assert err.lineno == 2
    assert err.offset == 5


def test_newline_variants():
    toks = lex("a\r\nb\rc\nd")
    assert [t.kind for t in toks].count("NEWLINE") == 3
    d = [t for t in toks if t.value == "d"][0]
    assert d.line == 4
    assert d.col == 1


def test_comments_are_skipped():
    assert kinds("x = 1 % the answer\n% whole line") == ["ID", "=", "NUMBER", "NEWLINE", "EOF"]


def test_identifiers_are_case_sensitive():
    toks = lex("Ab ab _x1")
    assert [t.value for t in toks if t.kind == "ID"] == ["Ab", "ab", "_x1"]


def test_stringify():
    toks = lex("x 1.5 ] ;\n")
    assert [t.stringify() for t in toks] == [
        "Identifier: x", "NumericLiteral: 1.5", "CloseBracket", "SemiColon",
        "EndOfLine", "EndOfFile",
    ]


def test_token_columns():
    toks = lex("ab + 12")
    assert [(t.line, t.col) for t in toks] == [(1, 1), (1, 4), (1, 6), (1, 8)]


if __name__ == "__main__":
    failures = 0
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            try:
                fn()
                print(f"PASS: {name}")
            except AssertionError as e:
                failures += 1
                print(f"FAIL: {name}: {e}")
    sys.exit(1 if failures else 0)
