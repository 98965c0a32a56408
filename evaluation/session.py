# session.py
"""Evaluation session: one environment fed by successive source texts.

A session lexes a source once, then parses and evaluates it statement by
statement. A statement that fails to parse or evaluate is reported as a
Diagnostic and the session moves on to the next one.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from frontend.expr_parser import ExprParser
from frontend.lexer import lex
from frontend.parse_errors import ParseError
from runtime.display import format_value
from runtime.env import Env
from runtime.errors import EvalError
from runtime.values import RuntimeVal
from evaluation.context import EvalContext
from evaluation.diagnostics import Diagnostic, from_parse_error, from_eval_error, from_syntax_error
from evaluation.eval_expr import evaluate_binding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Output:
    """Value produced by one successful statement."""
    line: int
    name: Optional[str]
    value: RuntimeVal
    print_result: bool


@dataclass
class RunResult:
    outputs: List[Output] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def render_output(output: Output) -> str:
    """REPL text for a result: 'name = value', or just the value."""
    text = format_value(output.value)
    if output.name is None:
        return text
    return f"{output.name} = {text}"


class Session:
    def __init__(self, ctx: Optional[EvalContext] = None, env: Optional[Env] = None):
        self.ctx = ctx if ctx is not None else EvalContext()
        self.env = env if env is not None else Env()

    def run_source(self, src: str) -> RunResult:
        """Evaluate every statement of src against the session environment."""
        result = RunResult()

        try:
            tokens = lex(src)
        except SyntaxError as e:
            result.diagnostics.append(from_syntax_error(e))
            logger.debug("lex error: %s", e)
            return result

        parser = ExprParser(tokens)
        while True:
            parser.skip_separators()
            if parser.at_end():
                break

            start = parser.i
            start_line = parser.current().line
            try:
                stmt = parser.parse_statement()
            except ParseError as e:
                result.diagnostics.append(from_parse_error(e, start_line))
                logger.debug("line %d: parse error %s", start_line, e.code)
                if self.ctx.crash_on_error:
                    break
                parser.recover_to_stmt_boundary(start)
                continue

            try:
                binding = evaluate_binding(stmt, self.env, self.ctx)
            except EvalError as e:
                result.diagnostics.append(from_eval_error(e, stmt.line))
                logger.debug("line %d: eval error %s", stmt.line, e.code)
                if self.ctx.crash_on_error:
                    break
                continue

            result.outputs.append(
                Output(stmt.line, binding.name, binding.value, stmt.print_result)
            )

        return result

    def printable(self, result: RunResult) -> List[str]:
        """Rendered outputs the REPL should echo."""
        if not self.ctx.echo:
            return []
        return [render_output(o) for o in result.outputs if o.print_result]
