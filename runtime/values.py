# values.py
"""Runtime values and the arithmetic defined over them.

A RuntimeVal is either a Scalar or a Matrix. Each try_* function covers all
four {Scalar, Matrix} pairings and raises an EvalError when the shapes do not
allow the operation.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from runtime.errors import DimensionsMismatchError, NoninvertibleDivisorMatrixError
from runtime.matrix import Matrix, float_div


@dataclass(frozen=True)
class Scalar:
    """A single IEEE-754 double."""
    value: float

    def __str__(self) -> str:
        from runtime.display import format_number
        return format_number(self.value)


RuntimeVal = Union[Scalar, Matrix]


def is_runtime_val(value) -> bool:
    return isinstance(value, (Scalar, Matrix))


def try_add(left: RuntimeVal, right: RuntimeVal) -> RuntimeVal:
    if isinstance(left, Scalar):
        if isinstance(right, Scalar):
            return Scalar(left.value + right.value)
        return right.add_scalar(left.value)
    if isinstance(right, Scalar):
        return left.add_scalar(right.value)
    if left.shape != right.shape:
        raise DimensionsMismatchError(left.shape, right.shape)
    return left + right


def try_sub(left: RuntimeVal, right: RuntimeVal) -> RuntimeVal:
    if isinstance(left, Scalar):
        if isinstance(right, Scalar):
            return Scalar(left.value - right.value)
        return right.scalar_sub(left.value)
    if isinstance(right, Scalar):
        return left.sub_scalar(right.value)
    if left.shape != right.shape:
        raise DimensionsMismatchError(left.shape, right.shape)
    return left - right


def try_mul(left: RuntimeVal, right: RuntimeVal) -> RuntimeVal:
    """Scalar products broadcast; matrix products need lhs width == rhs height."""
    if isinstance(left, Scalar):
        if isinstance(right, Scalar):
            return Scalar(left.value * right.value)
        return right.mul_scalar(left.value)
    if isinstance(right, Scalar):
        return left.mul_scalar(right.value)
    if left.ncols != right.nrows:
        raise DimensionsMismatchError(left.shape, right.shape)
    return left.matmul(right)


def try_div(left: RuntimeVal, right: RuntimeVal, tol: float = 0.0) -> RuntimeVal:
    """Division. Matrix / Matrix is lhs * inv(rhs).

    The divisor matrix must be square and the same shape as the dividend.
    `tol` is the zero tolerance used while inverting it.
    """
    if isinstance(left, Scalar):
        if isinstance(right, Scalar):
            return Scalar(float_div(left.value, right.value))
        return right.scalar_div(left.value)
    if isinstance(right, Scalar):
        return left.div_scalar(right.value)
    if not right.is_square() or left.shape != right.shape:
        raise DimensionsMismatchError(left.shape, right.shape)
    inverse = right.try_invert(tol)
    if inverse is None:
        raise NoninvertibleDivisorMatrixError()
    return left.matmul(inverse)
