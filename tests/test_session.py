"""Tests for the evaluation session, result rendering and display helpers."""
import sys
import os
# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import math
import unittest
from evaluation import EvalContext, Session, render_output, run_source
from runtime.display import format_number, format_value, format_compact
from runtime.matrix import Matrix
from runtime.values import Scalar


class TestSession(unittest.TestCase):
    def test_statements_share_environment(self):
        result = run_source("x = 1\ny = x + 1\ny")
        self.assertTrue(result.ok)
        self.assertEqual([o.name for o in result.outputs], ["x", "y", "y"])
        self.assertEqual(render_output(result.outputs[-1]), "y = 2")

    def test_session_persists_across_sources(self):
        session = Session()
        session.run_source("a = 4")
        result = session.run_source("a * 2")
        self.assertEqual(result.outputs[0].value, Scalar(8.0))
        self.assertEqual(session.env.get("ans"), Scalar(8.0))

    def test_parse_error_recovers_at_next_statement(self):
        session = Session()
        result = session.run_source("x = 1\n1 +\ny = 2")
        self.assertEqual(len(result.diagnostics), 1)
        d = result.diagnostics[0]
        self.assertEqual(d.code, "InvalidArithmaticExpression")
        self.assertEqual(d.line, 2)
        self.assertEqual(session.env.get("y"), Scalar(2.0))

    def test_parse_error_inside_multiline_matrix(self):
        session = Session()
        result = session.run_source("[1, 2\n3]\nk = 1")
        self.assertEqual([d.code for d in result.diagnostics], ["DimensionsMismatch"])
        self.assertEqual(session.env.get("k"), Scalar(1.0))

    def test_eval_error_continues(self):
        session = Session()
        result = session.run_source("a = b\nc = 3")
        self.assertEqual(len(result.diagnostics), 1)
        self.assertEqual(str(result.diagnostics[0]), "NonexistantVar line 1: Variable b does not exist")
        self.assertNotIn("a", session.env)
        self.assertEqual(session.env.get("c"), Scalar(3.0))

    def test_lex_error_is_one_diagnostic(self):
        session = Session()
        result = session.run_source("x = 1\ny = 3x")
        self.assertEqual(len(result.diagnostics), 1)
        d = result.diagnostics[0]
        self.assertEqual(d.code, "LexError")
        self.assertEqual(d.line, 2)
        self.assertEqual(d.col, 5)
        self.assertNotIn("x", session.env)

    def test_crash_on_error_stops(self):
        session = Session(EvalContext(crash_on_error=True))
        result = session.run_source("q\nz = 1")
        self.assertEqual(len(result.diagnostics), 1)
        self.assertNotIn("z", session.env)

    def test_printable_respects_semicolon_and_echo(self):
        session = Session()
        self.assertEqual(session.printable(session.run_source("1;\n2")), ["ans = 2"])
        quiet = Session(EvalContext(echo=False))
        self.assertEqual(quiet.printable(quiet.run_source("2")), [])

    def test_unnamed_result_renders_bare_value(self):
        result = run_source("(t = 2) * 3")
        self.assertIsNone(result.outputs[0].name)
        self.assertEqual(render_output(result.outputs[0]), "6")

    def test_matrix_output(self):
        result = run_source("m = [1, 2; 3, 4]")
        self.assertEqual(render_output(result.outputs[0]), "m = [\n  1  2\n  3  4\n]")

    def test_multiline_matrix_statement(self):
        result = run_source("m = [1, 2\n3, 4]\nm + 1")
        self.assertTrue(result.ok)
        self.assertEqual(result.outputs[1].value.rows(), [[2, 3], [4, 5]])
        self.assertEqual(result.outputs[1].line, 3)


class TestDisplay(unittest.TestCase):
    def test_format_number(self):
        self.assertEqual(format_number(3.0), "3")
        self.assertEqual(format_number(-4.0), "-4")
        self.assertEqual(format_number(-0.0), "0")
        self.assertEqual(format_number(2.5), "2.5")
        self.assertEqual(format_number(0.1), "0.1")
        self.assertEqual(format_number(1e20), "1e+20")
        self.assertEqual(format_number(math.nan), "NaN")
        self.assertEqual(format_number(math.inf), "inf")
        self.assertEqual(format_number(-math.inf), "-inf")

    def test_format_value(self):
        self.assertEqual(format_value(Scalar(7.0)), "7")
        self.assertEqual(format_value(Matrix.empty()), "[]")

    def test_format_compact(self):
        self.assertEqual(format_compact(Matrix.try_from_rows([[1, 2], [3, 4.5]])), "[1,2;3,4.5]")
        self.assertEqual(format_compact(Matrix.empty()), "[]")
        self.assertEqual(format_compact(Scalar(0.5)), "0.5")


if __name__ == '__main__':
    unittest.main()
