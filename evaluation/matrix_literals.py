# matrix_literals.py
"""Evaluation of matrix literals."""

from __future__ import annotations
from typing import Callable, List

from ir import ExprNode, MatrixLit
from runtime.errors import NestedMatricesError, InconsistentMatrixWidthError
from runtime.matrix import Matrix
from runtime.values import RuntimeVal, Scalar


def eval_matrix_literal(node: MatrixLit, eval_cell: Callable[[ExprNode], RuntimeVal]) -> RuntimeVal:
    """Evaluate every cell of a matrix literal and build the value.

    Cells must be scalars (one level of nesting only). A 1x1 literal
    collapses to a Scalar; [] is the empty matrix.
    """
    rows: List[List[float]] = []
    for row in node.rows:
        values: List[float] = []
        for cell in row:
            value = eval_cell(cell)
            if isinstance(value, Matrix):
                raise NestedMatricesError()
            values.append(value.value)
        if rows and len(values) != len(rows[0]):
            raise InconsistentMatrixWidthError(len(rows[0]), len(values))
        rows.append(values)

    if len(rows) == 1 and len(rows[0]) == 1:
        return Scalar(rows[0][0])
    return Matrix.try_from_rows(rows)
