# ir.py
"""Expression representation for ConVector statements.

The parser emits one Statement per source statement. Its expression is either
a single operand node (Var, Number, MatrixLit) or an ArithmeticExpr holding a
flat postfix sequence of operand and OperatorNode entries.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Operator(Enum):
    """Binary operators, in order of the symbols they are written with."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    ASSIGN = "="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def precedence(self) -> int:
        """Lower binds looser."""
        return _PRECEDENCE[self]

    @property
    def is_right_assoc(self) -> bool:
        return self is Operator.ASSIGN

    @staticmethod
    def from_symbol(symbol: str) -> "Operator":
        return Operator(symbol)


_PRECEDENCE = {
    Operator.MULTIPLY: 3,
    Operator.DIVIDE: 3,
    Operator.ADD: 2,
    Operator.SUBTRACT: 2,
    Operator.ASSIGN: 1,
}

OPERATOR_SYMBOLS = frozenset(op.symbol for op in Operator)

# ----- Expressions -----

@dataclass(frozen=True)
class ExprNode:
    """Base class for all expression nodes."""
    line: int

@dataclass(frozen=True)
class Var(ExprNode):
    """Variable reference, resolved lazily by the engine."""
    name: str

@dataclass(frozen=True)
class Number(ExprNode):
    """Scalar literal."""
    value: float

@dataclass(frozen=True)
class MatrixLit(ExprNode):
    """Matrix literal ([1, 2; 3, 4]). Rows are checked to be equal length at parse time."""
    rows: Tuple[Tuple[ExprNode, ...], ...]

@dataclass(frozen=True)
class OperatorNode(ExprNode):
    """Operator entry of a postfix sequence. Never a standalone statement."""
    op: Operator

@dataclass(frozen=True)
class ArithmeticExpr(ExprNode):
    """Postfix operator sequence.

    Stored in reverse evaluation order: the last element is evaluated first,
    so the engine walks it from the tail. Never contains another
    ArithmeticExpr.
    """
    postfix: Tuple[ExprNode, ...]

    def evaluation_order(self) -> Tuple[ExprNode, ...]:
        return tuple(reversed(self.postfix))

# ----- Statements -----

@dataclass(frozen=True)
class Statement:
    """One parsed statement plus the flags the engine and REPL read."""
    expr: ExprNode
    store_in_ans: bool
    print_result: bool
    line: int


def contains_assign(node: ExprNode) -> bool:
    """True if the node is (or its postfix sequence contains) an assignment."""
    if isinstance(node, OperatorNode):
        return node.op is Operator.ASSIGN
    if isinstance(node, ArithmeticExpr):
        return any(
            isinstance(n, OperatorNode) and n.op is Operator.ASSIGN
            for n in node.postfix
        )
    return False


def stores_in_ans(node: ExprNode) -> bool:
    """Whether a statement made of this node updates the implicit `ans`.

    Literals and computed values do; a bare variable read or anything
    containing an assignment does not.
    """
    if isinstance(node, (Number, MatrixLit)):
        return True
    if isinstance(node, Var):
        return False
    if isinstance(node, ArithmeticExpr):
        return not contains_assign(node)
    raise TypeError(f"Not a statement expression: {type(node).__name__}")
