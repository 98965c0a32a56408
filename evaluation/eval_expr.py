# eval_expr.py
"""Expression and statement evaluation.

Postfix sequences are evaluated with an explicit operand stack. Variables
are pushed as unresolved references and looked up only when an arithmetic
operator consumes them, which is what lets the left side of '=' name a
variable that does not exist yet.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from ir import (
    Operator, ExprNode, Var, Number, MatrixLit, OperatorNode, ArithmeticExpr, Statement,
)
from runtime.env import Env
from runtime.errors import InvalidArithmeticExpressionError, AssignmentToNonVariableError
from runtime.matrix import Matrix
from runtime.values import RuntimeVal, Scalar
from evaluation.context import EvalContext
from evaluation.eval_binop import eval_binop
from evaluation.matrix_literals import eval_matrix_literal

logger = logging.getLogger(__name__)

ANS = "ans"


@dataclass(frozen=True)
class VarRef:
    """Unresolved variable on the operand stack. Never returned to callers."""
    name: str


Operand = Union[VarRef, Scalar, Matrix]


@dataclass(frozen=True)
class Binding:
    """Result of a statement: the value and the name it is displayed under.

    name is "ans" when the statement stored into ans, the variable name for
    an assignment or a bare variable read, and None otherwise.
    """
    name: Optional[str]
    value: RuntimeVal


def _resolve(operand: Operand, env: Env) -> RuntimeVal:
    if isinstance(operand, VarRef):
        return env.get(operand.name)
    return operand


def eval_expr(node: ExprNode, env: Env, ctx: EvalContext) -> RuntimeVal:
    """Evaluate an expression node to a value (variables resolved)."""
    return _resolve(_eval_operand(node, env, ctx), env)


def _eval_operand(node: ExprNode, env: Env, ctx: EvalContext) -> Operand:
    if isinstance(node, Number):
        return Scalar(node.value)
    if isinstance(node, Var):
        return VarRef(node.name)
    if isinstance(node, MatrixLit):
        return eval_matrix_literal(node, lambda cell: eval_expr(cell, env, ctx))
    if isinstance(node, ArithmeticExpr):
        return eval_postfix(node, env, ctx)
    if isinstance(node, OperatorNode):
        raise InvalidArithmeticExpressionError(f"operator '{node.op.symbol}' has no operands")
    raise TypeError(f"Unknown expression node: {type(node).__name__}")


def eval_postfix(expr: ArithmeticExpr, env: Env, ctx: EvalContext) -> Operand:
    """Run a postfix sequence and return the single operand it leaves.

    The stored sequence is walked from its tail and never mutated.
    Assignment binds in `env` and leaves the variable reference on the
    stack, so `x = 5` evaluates to VarRef('x').
    """
    stack: List[Operand] = []

    for node in reversed(expr.postfix):
        if not isinstance(node, OperatorNode):
            stack.append(_eval_operand(node, env, ctx))
            continue

        if len(stack) < 2:
            raise InvalidArithmeticExpressionError(
                f"operator '{node.op.symbol}' needs two operands"
            )
        right = _resolve(stack.pop(), env)
        left = stack.pop()

        if node.op is Operator.ASSIGN:
            if not isinstance(left, VarRef):
                raise AssignmentToNonVariableError()
            env.set(left.name, right)
            logger.debug("line %d: %s assigned", node.line, left.name)
            stack.append(left)
        else:
            stack.append(eval_binop(node.op, _resolve(left, env), right, ctx))

    if len(stack) != 1:
        raise InvalidArithmeticExpressionError(
            f"expression left {len(stack)} values instead of one"
        )
    return stack[0]


def evaluate_binding(stmt: Statement, env: Env, ctx: Optional[EvalContext] = None) -> Binding:
    """Evaluate a statement against env.

    The statement runs in a child scope that is committed only if it
    succeeds, so an error never leaves a partial assignment behind.
    """
    ctx = ctx if ctx is not None else EvalContext()
    scratch = env.push_scope()

    result = _eval_operand(stmt.expr, scratch, ctx)
    if isinstance(result, VarRef):
        # resolved for display only
        binding = Binding(result.name, scratch.get(result.name))
    elif stmt.store_in_ans:
        scratch.set(ANS, result)
        binding = Binding(ANS, result)
    else:
        binding = Binding(None, result)

    env.commit(scratch)
    return binding


def evaluate(stmt: Statement, env: Env, ctx: Optional[EvalContext] = None) -> RuntimeVal:
    """Evaluate a statement and return its value."""
    return evaluate_binding(stmt, env, ctx).value
