# evaluation/__init__.py
"""Evaluation package: runs parsed ConVector statements against an environment."""

from __future__ import annotations
from typing import Optional

from evaluation.context import EvalContext
from evaluation.diagnostics import Diagnostic
from evaluation.eval_expr import Binding, eval_expr, evaluate, evaluate_binding
from evaluation.session import Output, RunResult, Session, render_output
from runtime.env import Env


def run_source(src: str, ctx: Optional[EvalContext] = None, env: Optional[Env] = None) -> RunResult:
    """Evaluate a whole source text in a fresh (or given) environment."""
    return Session(ctx, env).run_source(src)


__all__ = [
    "EvalContext", "Diagnostic", "Binding", "eval_expr", "evaluate", "evaluate_binding",
    "Output", "RunResult", "Session", "render_output", "run_source",
]
