# errors.py
"""Errors raised while evaluating a statement."""

from __future__ import annotations
from typing import Tuple


class EvalError(Exception):
    """Base class for evaluation failures. Aborts the current statement only."""
    code = "EvalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonexistentVarError(EvalError):
    code = "NonexistantVar"

    def __init__(self, name: str):
        super().__init__(f"Variable {name} does not exist")
        self.name = name


class NestedMatricesError(EvalError):
    code = "NestedMatrices"

    def __init__(self):
        super().__init__("Nested matrices are not supported")


class InconsistentMatrixWidthError(EvalError):
    code = "InconsistantMatrixWidth"

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Inconsistent matrix width (expected {expected}, found {actual})")
        self.expected = expected
        self.actual = actual


class DimensionsMismatchError(EvalError):
    code = "DimensionsMismatch"

    def __init__(self, lhs_shape: Tuple[int, int], rhs_shape: Tuple[int, int]):
        super().__init__(
            f"Dimensions mismatch ({lhs_shape[0]}x{lhs_shape[1]} vs {rhs_shape[0]}x{rhs_shape[1]})"
        )
        self.lhs_shape = lhs_shape
        self.rhs_shape = rhs_shape


class NoninvertibleDivisorMatrixError(EvalError):
    code = "NoninvertibleDivisorMatrix"

    def __init__(self):
        super().__init__("The divisor matrix is not invertible")


class InvalidArithmeticExpressionError(EvalError):
    code = "InvalidArithmaticExpression"

    def __init__(self, detail: str = ""):
        message = "Invalid arithmetic expression"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class AssignmentToNonVariableError(EvalError):
    code = "AssignmentToNonVariable"

    def __init__(self):
        super().__init__("Only a variable can be assigned to")
