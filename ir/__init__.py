from ir.ir import (
    Operator, OPERATOR_SYMBOLS,
    ExprNode, Var, Number, MatrixLit, OperatorNode, ArithmeticExpr,
    Statement, contains_assign, stores_in_ans,
)

__all__ = [
    "Operator", "OPERATOR_SYMBOLS",
    "ExprNode", "Var", "Number", "MatrixLit", "OperatorNode", "ArithmeticExpr",
    "Statement", "contains_assign", "stores_in_ans",
]
