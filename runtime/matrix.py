# matrix.py
"""Dense numeric matrix for the ConVector runtime.

Values are IEEE-754 doubles kept in a flat row-major buffer. The elimination
routines (LU decomposition, inversion) work on row-list copies so the
receiver is never mutated, and compare pivots against zero exactly unless a
tolerance is passed in.
"""

from __future__ import annotations
import math
from typing import Iterator, List, Optional, Sequence, Tuple

from runtime.errors import InconsistentMatrixWidthError

Shape2D = Tuple[int, int]


def float_div(a: float, b: float) -> float:
    """IEEE-754 division: x/0 gives +-inf or nan instead of raising."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _is_zero(x: float, tol: float) -> bool:
    # tol == 0.0 is the exact `x == 0.0` test (NaN is never zero)
    return abs(x) <= tol


def _permutation_sign(perm: Sequence[int]) -> float:
    """+1.0 for an even permutation, -1.0 for an odd one."""
    seen = [False] * len(perm)
    sign = 1.0
    for start in range(len(perm)):
        if seen[start]:
            continue
        length = 0
        j = start
        while not seen[j]:
            seen[j] = True
            j = perm[j]
            length += 1
        if length % 2 == 0:
            sign = -sign
    return sign


class Matrix:
    """Row-major matrix of floats.

    Invariant: len(data) == rows * cols. A 1x1 matrix stays a matrix; the
    evaluator decides when to collapse it into a scalar.
    """
    __slots__ = ("_data", "_shape")

    def __init__(self, data: Sequence[float] = (), shape: Shape2D = (0, 0)):
        rows, cols = shape
        if rows < 0 or cols < 0:
            raise ValueError(f"Negative matrix shape {shape}")
        buffer = [float(x) for x in data]
        if len(buffer) != rows * cols:
            raise ValueError(
                f"Buffer of length {len(buffer)} does not fit shape {rows}x{cols}"
            )
        self._data: List[float] = buffer
        self._shape: Shape2D = (rows, cols)

    # Constructors

    @staticmethod
    def empty() -> Matrix:
        return Matrix()

    @staticmethod
    def try_from_rows(rows: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix from a list of rows.

        Raises:
            InconsistentMatrixWidthError: if the rows differ in length
        """
        if not rows:
            return Matrix()
        width = len(rows[0])
        for row in rows:
            if len(row) != width:
                raise InconsistentMatrixWidthError(width, len(row))
        return Matrix([cell for row in rows for cell in row], (len(rows), width))

    @staticmethod
    def identity(size: int) -> Matrix:
        return Matrix.identity_rect(size, size)

    @staticmethod
    def identity_rect(nrows: int, ncols: int) -> Matrix:
        data = [0.0] * (nrows * ncols)
        for i in range(min(nrows, ncols)):
            data[i * ncols + i] = 1.0
        return Matrix(data, (nrows, ncols))

    @staticmethod
    def zeros(nrows: int, ncols: Optional[int] = None) -> Matrix:
        ncols = nrows if ncols is None else ncols
        return Matrix([0.0] * (nrows * ncols), (nrows, ncols))

    @staticmethod
    def ones(nrows: int, ncols: Optional[int] = None) -> Matrix:
        ncols = nrows if ncols is None else ncols
        return Matrix([1.0] * (nrows * ncols), (nrows, ncols))

    @staticmethod
    def from_permutations_vector(perm: Sequence[int]) -> Matrix:
        """Permutation matrix P with P[i, perm[i]] = 1, so (P*A)[i] == A[perm[i]]."""
        out = Matrix.zeros(len(perm))
        for row, col in enumerate(perm):
            out[row, col] = 1.0
        return out

    # Shape

    @property
    def shape(self) -> Shape2D:
        return self._shape

    @property
    def nrows(self) -> int:
        return self._shape[0]

    @property
    def ncols(self) -> int:
        return self._shape[1]

    height = nrows
    width = ncols

    def is_square(self) -> bool:
        return self._shape[0] == self._shape[1]

    def is_empty(self) -> bool:
        return not self._data

    # Indexing and iteration

    def _flat_index(self, index) -> int:
        if isinstance(index, tuple):
            row, col = index
            if not (0 <= row < self.nrows and 0 <= col < self.ncols):
                raise IndexError(f"Matrix was indexed out of bounds: {index} in {self.nrows}x{self.ncols}")
            return row * self.ncols + col
        if not 0 <= index < len(self._data):
            raise IndexError(f"Matrix was indexed out of bounds: {index}")
        return index

    def __getitem__(self, index) -> float:
        return self._data[self._flat_index(index)]

    def __setitem__(self, index, value: float) -> None:
        self._data[self._flat_index(index)] = float(value)

    def __iter__(self) -> Iterator[float]:
        return iter(self._data)

    def cells(self) -> List[float]:
        """Copy of the row-major buffer."""
        return list(self._data)

    def rows(self) -> List[List[float]]:
        """Copy of the matrix as a list of rows."""
        cols = self.ncols
        return [self._data[r * cols:(r + 1) * cols] for r in range(self.nrows)]

    def last_cell(self) -> Optional[float]:
        return self._data[-1] if self._data else None

    def copy(self) -> Matrix:
        return Matrix(self._data, self._shape)

    def swap_rows(self, row1: int, row2: int) -> None:
        if not (0 <= row1 < self.nrows and 0 <= row2 < self.nrows):
            raise IndexError("Matrix was indexed out of bounds")
        cols = self.ncols
        a, b = row1 * cols, row2 * cols
        self._data[a:a + cols], self._data[b:b + cols] = self._data[b:b + cols], self._data[a:a + cols]

    def swap_rows_starting_from(self, row1: int, row2: int, start_col: int) -> None:
        """Swap the cells of two rows in columns [start_col, ncols)."""
        self._swap_row_span(row1, row2, start_col, self.ncols)

    def swap_rows_ending_before(self, row1: int, row2: int, end_col: int) -> None:
        """Swap the cells of two rows in columns [0, end_col)."""
        self._swap_row_span(row1, row2, 0, end_col)

    def _swap_row_span(self, row1: int, row2: int, start: int, end: int) -> None:
        if not (0 <= row1 < self.nrows and 0 <= row2 < self.nrows):
            raise IndexError("Matrix was indexed out of bounds")
        if not 0 <= start <= end <= self.ncols:
            raise IndexError(f"Column span [{start}, {end}) out of bounds")
        cols = self.ncols
        a, b = row1 * cols, row2 * cols
        self._data[a + start:a + end], self._data[b + start:b + end] = (
            self._data[b + start:b + end], self._data[a + start:a + end]
        )

    # Comparison

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._shape == other._shape and self._data == other._data

    __hash__ = None

    def is_close(self, other: Matrix, rel_tol: float = 1e-9, abs_tol: float = 1e-12) -> bool:
        """Element-wise closeness (same shape required)."""
        if self._shape != other._shape:
            return False
        return all(
            math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)
            for a, b in zip(self._data, other._data)
        )

    # Matrix arithmetic

    def _check_same_shape(self, other: Matrix) -> None:
        if self._shape != other._shape:
            raise ValueError(
                f"LHS and RHS matrices shapes do not match ({self._shape} vs {other._shape})"
            )

    def __add__(self, other):
        if isinstance(other, Matrix):
            self._check_same_shape(other)
            return Matrix([a + b for a, b in zip(self._data, other._data)], self._shape)
        if isinstance(other, (int, float)):
            return self.add_scalar(other)
        return NotImplemented

    def __radd__(self, other):
        if isinstance(other, (int, float)):
            return self.add_scalar(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Matrix):
            self._check_same_shape(other)
            return Matrix([a - b for a, b in zip(self._data, other._data)], self._shape)
        if isinstance(other, (int, float)):
            return self.sub_scalar(other)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, (int, float)):
            return self.scalar_sub(other)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return self.matmul(other)
        if isinstance(other, (int, float)):
            return self.mul_scalar(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float)):
            return self.mul_scalar(other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Matrix):
            inverse = other.try_invert()
            if inverse is None:
                raise ValueError("RHS matrix is not invertible")
            return self.matmul(inverse)
        if isinstance(other, (int, float)):
            return self.div_scalar(other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, (int, float)):
            return self.scalar_div(other)
        return NotImplemented

    def __neg__(self) -> Matrix:
        return Matrix([-cell for cell in self._data], self._shape)

    def matmul(self, other: Matrix) -> Matrix:
        """Standard row-by-column product. LHS width must equal RHS height."""
        if self.ncols != other.nrows:
            raise ValueError(
                f"LHS matrix width must match RHS matrix height ({self._shape} vs {other._shape})"
            )
        n, m, p = self.nrows, self.ncols, other.ncols
        a, b = self._data, other._data
        out = [0.0] * (n * p)
        for r in range(n):
            for c in range(p):
                acc = 0.0
                for k in range(m):
                    acc += a[r * m + k] * b[k * p + c]
                out[r * p + c] = acc
        return Matrix(out, (n, p))

    # Scalar broadcasting

    def add_scalar(self, scalar: float) -> Matrix:
        return Matrix([cell + scalar for cell in self._data], self._shape)

    def sub_scalar(self, scalar: float) -> Matrix:
        return Matrix([cell - scalar for cell in self._data], self._shape)

    def mul_scalar(self, scalar: float) -> Matrix:
        return Matrix([cell * scalar for cell in self._data], self._shape)

    def div_scalar(self, scalar: float) -> Matrix:
        return Matrix([float_div(cell, scalar) for cell in self._data], self._shape)

    def scalar_sub(self, scalar: float) -> Matrix:
        """scalar - self, cell by cell."""
        return (-self).add_scalar(scalar)

    def scalar_div(self, scalar: float) -> Matrix:
        """scalar / self, cell by cell."""
        return Matrix([float_div(scalar, cell) for cell in self._data], self._shape)

    # Decompositions

    def lu_decomp(self, tol: float = 0.0) -> Tuple[Matrix, Matrix, List[int], int]:
        """LU decomposition with partial pivoting.

        Returns:
            (L, U, P, rank) where L is unit lower-triangular (nrows x nrows),
            U is the row-echelon form, and P is a permutation vector such that
            P*A = L*U (see Matrix.from_permutations_vector).

        A column with no usable pivot is skipped without advancing the pivot
        row, which is how rank-deficient matrices are handled.
        """
        nrows, ncols = self._shape
        lower = [[0.0] * nrows for _ in range(nrows)]
        upper = self.rows()
        perm = list(range(nrows))

        shift = 0
        pivot = 0
        while pivot < nrows and pivot + shift < ncols:
            pivot_col = pivot + shift

            # Swap in a row with a non-zero cell in this column if needed
            if _is_zero(upper[pivot][pivot_col], tol):
                for row in range(pivot + 1, nrows):
                    if _is_zero(upper[row][pivot_col], tol):
                        continue
                    upper[pivot], upper[row] = upper[row], upper[pivot]
                    lower[pivot][:pivot], lower[row][:pivot] = lower[row][:pivot], lower[pivot][:pivot]
                    perm[pivot], perm[row] = perm[row], perm[pivot]
                    break

            # No pivot in this column
            if _is_zero(upper[pivot][pivot_col], tol):
                shift += 1
                continue

            pivot_row = upper[pivot]
            for row in range(pivot + 1, nrows):
                target = upper[row]
                if _is_zero(target[pivot_col], tol):
                    continue
                factor = target[pivot_col] / pivot_row[pivot_col]
                for col in range(ncols):
                    target[col] -= pivot_row[col] * factor
                lower[row][pivot] = factor

            pivot += 1

        for i in range(nrows):
            lower[i][i] = 1.0

        rank = min(nrows, ncols - shift)
        return (
            Matrix([c for row in lower for c in row], (nrows, nrows)),
            Matrix([c for row in upper for c in row], (nrows, ncols)),
            perm,
            rank,
        )

    def row_echelon_form(self, tol: float = 0.0) -> Matrix:
        _, upper, _, _ = self.lu_decomp(tol)
        return upper

    def rank(self, tol: float = 0.0) -> int:
        _, _, _, rank = self.lu_decomp(tol)
        return rank

    def try_det(self, tol: float = 0.0) -> Optional[float]:
        """Product of the row-echelon diagonal, or None if not square.

        The sign flip of row swaps is not applied; see try_det_signed.
        """
        if not self.is_square():
            return None
        upper = self.row_echelon_form(tol)
        res = 1.0
        for i in range(upper.nrows):
            res *= upper[i, i]
        return res

    def try_det_signed(self, tol: float = 0.0) -> Optional[float]:
        """Determinant with the permutation parity applied."""
        if not self.is_square():
            return None
        _, upper, perm, _ = self.lu_decomp(tol)
        res = _permutation_sign(perm)
        for i in range(upper.nrows):
            res *= upper[i, i]
        return res

    def try_invert(self, tol: float = 0.0) -> Optional[Matrix]:
        """Gauss-Jordan inverse, or None if not square or singular."""
        if not self.is_square():
            return None
        n = self.nrows
        work = self.rows()
        res = Matrix.identity(n).rows()

        for prim in range(n):
            if _is_zero(work[prim][prim], tol):
                for row in range(prim + 1, n):
                    if not _is_zero(work[row][prim], tol):
                        work[prim], work[row] = work[row], work[prim]
                        res[prim], res[row] = res[row], res[prim]
                        break
                else:
                    return None

            factor = 1.0 / work[prim][prim]
            work[prim] = [cell * factor for cell in work[prim]]
            res[prim] = [cell * factor for cell in res[prim]]
            # x * (1/x) can round to 1 - ulp
            work[prim][prim] = 1.0

            for row in range(n):
                if row == prim:
                    continue
                f = work[row][prim]
                work[row] = [c - p * f for c, p in zip(work[row], work[prim])]
                res[row] = [c - p * f for c, p in zip(res[row], res[prim])]
                work[row][prim] = 0.0

        # Full rank check on the reduced last row
        if n == 0:
            return None
        last = work[n - 1]
        if abs(last[n - 1] - 1.0) > tol:
            return None
        if any(not _is_zero(cell, tol) for cell in last[:n - 1]):
            return None

        return Matrix([c for row in res for c in row], (n, n))

    # Display

    def __str__(self) -> str:
        from runtime.display import format_matrix
        return format_matrix(self)

    def __repr__(self) -> str:
        return f"Matrix({self.rows()!r})"
