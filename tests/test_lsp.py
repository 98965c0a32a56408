"""Tests for the language server helpers (no client connection needed)."""
import sys
import os

# Ensure project root is on the path regardless of working directory.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lsprotocol import types

from evaluation.diagnostics import Diagnostic
from lsp.diagnostics import to_lsp_diagnostic
from lsp.hover import get_hover
from lsp import server as lsp_server
from runtime.env import Env
from runtime.matrix import Matrix
from runtime.values import Scalar


def test_diagnostic_spans_rest_of_line():
    d = Diagnostic(line=2, code="DimensionsMismatch", message="Dimensions mismatch (2 vs 1)")
    out = to_lsp_diagnostic(d, ["x = 1", "[1, 2; 3]"])
    assert out.range.start == types.Position(line=1, character=0)
    assert out.range.end == types.Position(line=1, character=9)
    assert out.severity == types.DiagnosticSeverity.Error
    assert out.code == "DimensionsMismatch"
    assert out.source == "convector"


def test_diagnostic_with_column():
    d = Diagnostic(line=1, code="LexError", message="bad", col=5)
    out = to_lsp_diagnostic(d, ["y = 3x"])
    assert out.range.start.character == 4
    assert out.range.end.character == 6


def test_nonexistent_var_is_warning():
    d = Diagnostic(line=1, code="NonexistantVar", message="Variable q does not exist")
    assert to_lsp_diagnostic(d, ["q"]).severity == types.DiagnosticSeverity.Warning


def test_diagnostic_past_end_of_source():
    d = Diagnostic(line=5, code="UnexpectedEndOfInput", message="Unexpected end of input tokens array")
    out = to_lsp_diagnostic(d, ["1 +"])
    assert out.range.start == types.Position(line=4, character=0)
    assert out.range.end == types.Position(line=4, character=0)


def make_env():
    env = Env()
    env.set("x", Scalar(3.0))
    env.set("m", Matrix.try_from_rows([[1, 2], [3, 4]]))
    return env


def test_hover_scalar():
    h = get_hover(make_env(), "x = 3\ny = x + 1", 1, 4)
    assert h is not None
    assert "`x` = `3`" in h.contents.value
    assert h.range.start == types.Position(line=1, character=4)
    assert h.range.end == types.Position(line=1, character=5)


def test_hover_matrix():
    h = get_hover(make_env(), "m", 0, 0)
    assert h is not None
    assert "2x2 matrix" in h.contents.value
    assert "1  2" in h.contents.value


def test_hover_misses():
    env = make_env()
    assert get_hover(env, "x = 1 % x", 0, 8) is None  # inside a comment
    assert get_hover(env, "zz + 1", 0, 0) is None  # unbound
    assert get_hover(env, "x", 3, 0) is None  # line out of range
    assert get_hover(env, "x + 1", 0, 2) is None  # not on an identifier


def test_evaluate_document():
    cached = lsp_server.evaluate_document("a = [1, 2]\nb = a * 2\nc = q")
    assert cached.env.get("b").rows() == [[2, 4]]
    assert [d.code for d in cached.diagnostics] == ["NonexistantVar"]
    assert cached.source_hash == lsp_server._compute_hash("a = [1, 2]\nb = a * 2\nc = q")


def test_apply_settings():
    saved = dict(lsp_server.server_settings)
    try:
        lsp_server._apply_settings({"zeroTolerance": 1e-9, "evaluateOnChange": True})
        assert lsp_server.server_settings["zero_tolerance"] == 1e-9
        assert lsp_server.server_settings["evaluate_on_change"] is True
        lsp_server._apply_settings({"zeroTolerance": "not a number"})
        assert lsp_server.server_settings["zero_tolerance"] == 1e-9
        lsp_server._apply_settings({"zeroTolerance": -1})
        assert lsp_server.server_settings["zero_tolerance"] == 1e-9

        src = "[1, 1; 1, 1.000000000000001] / [1, 1; 1, 1.000000000000001]"
        cached = lsp_server.evaluate_document(src)
        assert [d.code for d in cached.diagnostics] == ["NoninvertibleDivisorMatrix"]
    finally:
        lsp_server.server_settings.clear()
        lsp_server.server_settings.update(saved)


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
