# eval_binop.py
"""Binary operator dispatch over resolved runtime values."""

from __future__ import annotations
from typing import TYPE_CHECKING

from ir import Operator
from runtime.errors import InvalidArithmeticExpressionError
from runtime.values import RuntimeVal, try_add, try_sub, try_mul, try_div

if TYPE_CHECKING:
    from evaluation.context import EvalContext


def eval_binop(op: Operator, left: RuntimeVal, right: RuntimeVal, ctx: EvalContext) -> RuntimeVal:
    """Apply an arithmetic operator to two values.

    Assignment is not arithmetic; the postfix evaluator handles it before
    operands are resolved, so reaching here with ASSIGN is an error.
    """
    if op is Operator.ADD:
        return try_add(left, right)
    if op is Operator.SUBTRACT:
        return try_sub(left, right)
    if op is Operator.MULTIPLY:
        return try_mul(left, right)
    if op is Operator.DIVIDE:
        return try_div(left, right, ctx.zero_tolerance)
    raise InvalidArithmeticExpressionError(f"'{op.symbol}' is not an arithmetic operator")
