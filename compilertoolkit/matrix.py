"""Dense matrices, their incremental construction, LU factorisation and solving."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

MAX_DIMENSION = 10


class MatrixLimitError(ValueError):
    """Raised when a matrix would grow beyond the allowed dimensions."""


@dataclass
class Matrix:
    """A rectangular matrix of floats stored row by row."""

    rows: list[list[float]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.rows = [[float(value) for value in row] for row in self.rows]
        widths = {len(row) for row in self.rows}
        if len(widths) > 1:
            raise ValueError("all matrix rows must have the same length")

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def is_square(self) -> bool:
        """Tell whether the matrix has as many rows as columns."""
        return self.row_count == self.column_count


class MatrixBuilder:
    """Builds a matrix one value and one row at a time.

    Short rows are padded with zeros; no dimension may exceed ten.
    """

    def __init__(self, max_dimension: int = MAX_DIMENSION) -> None:
        self.max_dimension = max_dimension
        self._reset()

    def _reset(self) -> None:
        self._rows: list[list[float]] = [[]]
        self._columns = 0
        self._row = 0
        self._column = 0

    def _fail(self) -> None:
        self._reset()
        raise MatrixLimitError("Matrix limits out of boundaries.")

    def _grow_rows(self, count: int) -> None:
        if count > self.max_dimension:
            self._fail()
        while len(self._rows) < count:
            self._rows.append([0.0] * self._columns)

    def _grow_columns(self, count: int) -> None:
        if count > self.max_dimension:
            self._fail()
        for row in self._rows:
            row.extend([0.0] * (count - len(row)))
        self._columns = count

    def add_column(self, number: float) -> None:
        """Append a value to the current row."""
        self._column += 1
        if self._column > self._columns:
            self._grow_columns(self._column)
        if self._row + 1 > len(self._rows):
            self._grow_rows(self._row + 1)
        self._rows[self._row][self._column - 1] = float(number)

    def add_row(self) -> None:
        """Start a new row."""
        self._row += 1
        self._column = 0
        if self._row > len(self._rows):
            self._grow_rows(self._row)

    def build(self) -> Matrix:
        """Return the matrix built so far and start afresh."""
        matrix = Matrix([list(row) for row in self._rows])
        self._reset()
        return matrix


@dataclass(frozen=True)
class LinearSystemResult:
    """Outcome of solving an augmented system n x (n + 1)."""

    determinant: float
    solution: Optional[tuple[float, ...]]
    has_solution: bool

    @property
    def infinitely_many(self) -> bool:
        """Whether the system is consistent but undetermined."""
        return self.has_solution and self.solution is None


def count_digits(number: float) -> int:
    """Count the characters of the integer part, including a minus sign."""
    value = int(number)
    if value == 0:
        return 1
    sign = 1 if value < 0 else 0
    return sign + int(math.log10(abs(value))) + 1


def format_matrix(matrix: Matrix, precision: int) -> str:
    """Render the matrix in a bracketed box with aligned columns."""
    digits = [[count_digits(value) for value in row] for row in matrix.rows]
    widest = [max(column) for column in zip(*digits)] if digits and digits[0] else []

    columns = matrix.column_count
    width = max(columns - 1, 0) + sum(widest)
    if precision > 0:
        width += columns * (precision + 1)

    border = "\n+-" + " " * width + "-+"
    lines = [border]
    for row, row_digits in zip(matrix.rows, digits):
        cells = "".join(
            " " + " " * (most - own) + f"{value:.{precision}f}"
            for value, own, most in zip(row, row_digits, widest)
        )
        lines.append(f"\n|{cells} |")
    lines.append(border)
    return "".join(lines)


def lu_decomposition(matrix: Matrix) -> tuple[Matrix, Matrix]:
    """Factor the leading square block into unit-lower L and upper U (no pivoting).

    A zero pivot leaves the entries of L below it at zero.
    """
    n = matrix.row_count
    if matrix.column_count < n:
        raise ValueError("matrix needs at least as many columns as rows")
    a = matrix.rows
    lower = [[0.0] * n for _ in range(n)]
    upper = [[0.0] * n for _ in range(n)]

    for i in range(n):
        for j in range(i, n):
            upper[i][j] = a[i][j] - sum(lower[i][k] * upper[k][j] for k in range(i))
        lower[i][i] = 1.0
        pivot = upper[i][i]
        for j in range(i + 1, n):
            if pivot == 0:
                lower[j][i] = 0.0
            else:
                total = sum(lower[j][k] * upper[k][i] for k in range(i))
                lower[j][i] = (a[j][i] - total) / pivot

    return Matrix(lower), Matrix(upper)


def _diagonal_product(upper: Matrix) -> float:
    return math.prod(upper.rows[i][i] for i in range(upper.row_count))


def determinant(matrix: Matrix) -> float:
    """Return the determinant of a square matrix."""
    if not matrix.is_square():
        raise ValueError("Matrix format incorrect!")
    _, upper = lu_decomposition(matrix)
    return _diagonal_product(upper)


def solve_linear_system(matrix: Matrix) -> LinearSystemResult:
    """Solve the augmented system [A | b] given as an n x (n + 1) matrix."""
    n = matrix.row_count
    if matrix.column_count != n + 1:
        raise ValueError("Matrix format incorrect!")

    lower, upper = lu_decomposition(matrix)
    det = _diagonal_product(upper)
    b = [row[n] for row in matrix.rows]
    l_rows, u_rows = lower.rows, upper.rows

    y: list[float] = []
    for i in range(n):
        y.append(b[i] - sum(l_rows[i][j] * y[j] for j in range(i)))

    impossible = False
    x = [0.0] * n
    for i in reversed(range(n)):
        rest = y[i] - sum(u_rows[i][j] * x[j] for j in range(i + 1, n))
        if u_rows[i][i] == 0:
            if rest != 0:
                impossible = True
            x[i] = 0.0
        else:
            x[i] = rest / u_rows[i][i]

    if det == 0:
        return LinearSystemResult(det, None, not impossible)
    return LinearSystemResult(det, tuple(x), True)