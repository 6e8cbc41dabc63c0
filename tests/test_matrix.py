import pytest

from compilertoolkit.matrix import (
    LinearSystemResult,
    Matrix,
    MatrixBuilder,
    MatrixLimitError,
    count_digits,
    determinant,
    format_matrix,
    lu_decomposition,
    solve_linear_system,
)


def _build(rows):
    builder = MatrixBuilder()
    for index, row in enumerate(rows):
        if index:
            builder.add_row()
        for value in row:
            builder.add_column(value)
    return builder.build()


def _matmul(a, b):
    return [
        [sum(a[i][k] * b[k][j] for k in range(len(b))) for j in range(len(b[0]))]
        for i in range(len(a))
    ]


def test_builder_round_trip():
    rows = [[1, 2, 3], [4, 5, 6]]
    matrix = _build(rows)
    assert matrix.rows == [[float(v) for v in row] for row in rows]
    assert (matrix.row_count, matrix.column_count) == (2, 3)


def test_builder_pads_short_rows_with_zeros():
    matrix = _build([[1, 2, 3], [4]])
    assert matrix.rows == [[1.0, 2.0, 3.0], [4.0, 0.0, 0.0]]


def test_builder_resets_after_build():
    builder = MatrixBuilder()
    builder.add_column(7)
    first = builder.build()
    builder.add_column(9)
    second = builder.build()
    assert first.rows == [[7.0]]
    assert second.rows == [[9.0]]


def test_builder_accepts_ten_columns():
    matrix = _build([list(range(10))])
    assert matrix.column_count == 10


def test_builder_rejects_eleventh_column_and_resets():
    builder = MatrixBuilder()
    for value in range(10):
        builder.add_column(value)
    with pytest.raises(MatrixLimitError):
        builder.add_column(10)
    builder.add_column(3)
    assert builder.build().rows == [[3.0]]


def test_builder_rejects_eleventh_row():
    builder = MatrixBuilder()
    builder.add_column(1)
    for _ in range(9):
        builder.add_row()
        builder.add_column(1)
    builder.add_row()
    with pytest.raises(MatrixLimitError):
        builder.add_column(1)


def test_matrix_rejects_ragged_rows():
    with pytest.raises(ValueError):
        Matrix([[1, 2], [3]])


def test_is_square():
    assert Matrix([[1, 2], [3, 4]]).is_square()
    assert not Matrix([[1, 2, 3], [4, 5, 6]]).is_square()


@pytest.mark.parametrize("number", [0, 5, 9, 10, 99, 100, 12345, -1, -42, -1000])
def test_count_digits_matches_decimal_text(number):
    assert count_digits(number) == len(str(number))


def test_count_digits_truncates_fraction():
    assert count_digits(123.9) == count_digits(123)


def test_format_single_value():
    assert format_matrix(Matrix([[1]]), 2) == "\n+-    -+\n| 1.00 |\n+-    -+"


@pytest.mark.parametrize("precision", [0, 2, 6])
def test_format_lines_are_aligned(precision):
    matrix = Matrix([[1, -10, 3], [100, 2, -7]])
    lines = format_matrix(matrix, precision).split("\n")[1:]
    assert len(lines) == matrix.row_count + 2
    assert len({len(line) for line in lines}) == 1
    assert lines[0] == lines[-1]
    assert lines[1].split() == ["|"] + [f"{v:.{precision}f}" for v in matrix.rows[0]] + ["|"]


def test_lu_reconstructs_matrix():
    matrix = Matrix([[4, 3, 2], [6, 3, 1], [2, 5, 7]])
    lower, upper = lu_decomposition(matrix)
    product = _matmul(lower.rows, upper.rows)
    for got, want in zip(product, matrix.rows):
        assert got == pytest.approx(want)
    n = matrix.row_count
    for i in range(n):
        assert lower.rows[i][i] == 1.0
        for j in range(i + 1, n):
            assert lower.rows[i][j] == 0.0
            assert upper.rows[j][i] == 0.0


def test_determinant_of_identity():
    identity = Matrix([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    assert determinant(identity) == 1.0


def test_determinant_of_triangular_is_diagonal_product():
    diag = [2.0, -3.0, 5.0]
    matrix = Matrix([[diag[0], 7, 1], [0, diag[1], 4], [0, 0, diag[2]]])
    assert determinant(matrix) == pytest.approx(diag[0] * diag[1] * diag[2])


def test_determinant_scales_with_row():
    base = Matrix([[4, 3, 2], [6, 3, 1], [2, 5, 7]])
    scaled = Matrix([[4, 3, 2], [6 * 3, 3 * 3, 1 * 3], [2, 5, 7]])
    assert determinant(scaled) == pytest.approx(3 * determinant(base))


def test_determinant_of_repeated_rows_is_zero():
    assert determinant(Matrix([[1, 2], [1, 2]])) == 0


def test_determinant_requires_square():
    with pytest.raises(ValueError):
        determinant(Matrix([[1, 2, 3], [4, 5, 6]]))


def test_solve_unique_solution_satisfies_system():
    matrix = Matrix([[2, 1, -1, 8], [-3, -1, 2, -11], [-2, 1, 2, -3]])
    result = solve_linear_system(matrix)
    assert isinstance(result, LinearSystemResult)
    assert result.has_solution and not result.infinitely_many
    assert result.solution is not None
    for row in matrix.rows:
        assert sum(a * x for a, x in zip(row[:3], result.solution)) == pytest.approx(row[3])
    square = Matrix([row[:3] for row in matrix.rows])
    assert result.determinant == pytest.approx(determinant(square))


def test_solve_inconsistent_system():
    result = solve_linear_system(Matrix([[1, 1, 2], [1, 1, 3]]))
    assert result.solution is None
    assert not result.has_solution
    assert not result.infinitely_many


def test_solve_undetermined_system():
    result = solve_linear_system(Matrix([[1, 1, 2], [2, 2, 4]]))
    assert result.solution is None
    assert result.infinitely_many


def test_solve_requires_augmented_shape():
    with pytest.raises(ValueError):
        solve_linear_system(Matrix([[1, 2], [3, 4]]))