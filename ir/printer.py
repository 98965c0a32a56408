# printer.py
"""Text dumps of tokens and expression nodes (--debug output, tests)."""

from __future__ import annotations
import math
from typing import List

from ir.ir import ExprNode, Var, Number, MatrixLit, OperatorNode, ArithmeticExpr, Statement


def format_node(node: ExprNode) -> str:
    """Postfix text of a node, in evaluation order.

    1 + 2 * 3 prints as "1 2 3 * +".
    """
    if isinstance(node, Var):
        return node.name
    if isinstance(node, Number):
        value = node.value
        if math.isfinite(value) and value == int(value) and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    if isinstance(node, MatrixLit):
        rows = [", ".join(format_node(cell) for cell in row) for row in node.rows]
        return "[" + "; ".join(rows) + "]"
    if isinstance(node, OperatorNode):
        return node.op.symbol
    if isinstance(node, ArithmeticExpr):
        return " ".join(format_node(n) for n in node.evaluation_order())
    raise TypeError(f"Unknown expression node: {type(node).__name__}")


def format_statement(stmt: Statement) -> str:
    flags = []
    if stmt.store_in_ans:
        flags.append("ans")
    if stmt.print_result:
        flags.append("print")
    return f"stmt@{stmt.line}({format_node(stmt.expr)}) [{', '.join(flags)}]"


def format_tokens(tokens: List) -> str:
    """One token per line: 'line:col Kind'."""
    return "\n".join(f"{tok.line}:{tok.col} {tok.stringify()}" for tok in tokens)
