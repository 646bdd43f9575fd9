"""Test Gauss-Jordan elimination, inversion and identity minus."""
from fractions import Fraction
import pytest
from ebi_arithmetic import EbiFraction, FractionMatrix, SingularMatrixError
from ebi_arithmetic import gauss_jordan, gauss_jordan_reduced, identity_minus, invert


def matrix(rows, exact=True):
    return FractionMatrix.from_rows([[EbiFraction(v, exact=exact) for v in row] for row in rows])


F = Fraction


def test_gauss_jordan_does_not_normalise(mode):
    m = gauss_jordan(matrix([[2, 4], [1, 3]], mode))
    assert (m == matrix([[2, 0], [0, 1]], mode))


def test_gauss_jordan_skips_zero_pivot(mode):
    m = gauss_jordan(matrix([[0, 1], [0, 2]], mode))
    assert (m == matrix([[0, 0], [0, 2]], mode))


def test_gauss_jordan_reduced_solves_system(mode):
    # 2x + y = 5, x + 3y = 10
    m = gauss_jordan_reduced(matrix([[2, 1, 5], [1, 3, 10]], mode))
    assert (m == matrix([[1, 0, 1], [0, 1, 3]], mode))


def test_gauss_jordan_reduced_zero_row(mode):
    with pytest.raises(SingularMatrixError, match="no reduced row-echelon form"):
        gauss_jordan_reduced(matrix([[1, 2], [0, 0]], mode))


def test_gauss_jordan_reduced_identical_rows(mode):
    with pytest.raises(SingularMatrixError):
        gauss_jordan_reduced(matrix([[1, 2, 3], [1, 2, 3], [0, 1, 1]], mode))


def test_invert_4x4():
    m = matrix([[1, 0, 0, 0], [0, 1, 0, F(-3, 5)], [0, F(-3, 4), 1, 0], [0, 0, 0, 1]])
    expected = matrix([[1, 0, 0, 0], [0, 1, 0, F(3, 5)], [0, F(3, 4), 1, F(9, 20)], [0, 0, 0, 1]])
    assert (invert(m) == expected)


def test_invert_4x4_approx():
    m = matrix([[1, 0, 0, 0], [0, 1, 0, -0.6], [0, -0.75, 1, 0], [0, 0, 0, 1]], False)
    expected = matrix([[1, 0, 0, 0], [0, 1, 0, 0.6], [0, 0.75, 1, 0.45], [0, 0, 0, 1]], False)
    assert (invert(m) == expected)


def test_invert_twice_restores_matrix(mode):
    m = matrix([[2, 1, 0], [1, 2, 1], [0, 1, 2]], mode)
    twice = invert(invert(m.clone()))
    assert (twice == m)


def test_invert_small_sizes(mode):
    empty = FractionMatrix.new(0, 0)
    assert (invert(empty).shape() == (0, 0))
    assert (invert(matrix([[4]], mode)) == matrix([[F(1, 4)]], mode))
    assert (invert(matrix([[1, 2], [3, 4]], mode)) == matrix([[-2, 1], [F(3, 2), F(-1, 2)]], mode))


def test_invert_singular(mode):
    with pytest.raises(SingularMatrixError):
        invert(matrix([[0]], mode))
    with pytest.raises(SingularMatrixError):
        invert(matrix([[1, 2], [2, 4]], mode))
    with pytest.raises(SingularMatrixError):
        invert(matrix([[1, 2, 3], [2, 4, 6], [1, 1, 1]], mode))


def test_invert_not_square(mode):
    with pytest.raises(ValueError, match="square"):
        invert(matrix([[1, 2, 3]], mode))


def test_invert_large_entries_promotes():
    big = 2**70
    m = matrix([[big, 1, 0], [0, 1, 0], [0, 0, 1]])
    inverse = invert(m.clone())
    assert (inverse.get(0, 0).exact() == F(1, big))
    assert (inverse.get(0, 1).exact() == F(-1, big))
    assert (invert(inverse) == m)


def test_identity_minus_non_square():
    m = identity_minus(matrix([[F(8, 3), F(3, 8)]]))
    assert (m == matrix([[F(-5, 3), F(-3, 8)]]))


def test_identity_minus_with_specials():
    m = FractionMatrix.from_rows([[EbiFraction.infinity(True), EbiFraction.neg_infinity(True)],
                                  [EbiFraction(8, 3, exact=True), EbiFraction(3, 8, exact=True)]])
    identity_minus(m)
    assert m.get(0, 0).is_negative_infinite()
    assert m.get(0, 1).is_positive_infinite()
    assert (m.get(1, 0) == EbiFraction(-8, 3, exact=True))
    assert (m.get(1, 1) == EbiFraction(5, 8, exact=True))


def test_identity_minus_negative_diagonal(mode):
    m = identity_minus(matrix([[F(-1, 2), 1], [0, 1]], mode))
    assert (m == matrix([[F(3, 2), -1], [0, 0]], mode))


def test_invert_singular_leaves_matrix_unchanged(mode):
    m = matrix([[1, 2, 3], [2, 4, 6], [1, 1, 1]], mode)
    with pytest.raises(SingularMatrixError):
        invert(m)
    assert (m.shape() == (3, 3))
    assert (m == matrix([[1, 2, 3], [2, 4, 6], [1, 1, 1]], mode))


def test_invert_replaces_cells_in_place(mode):
    m = matrix([[2, 1, 0], [1, 2, 1], [0, 1, 2]], mode)
    result = invert(m)
    assert (result is m)
    assert (m == matrix([[F(3, 4), F(-1, 2), F(1, 4)], [F(-1, 2), 1, F(-1, 2)], [F(1, 4), F(-1, 2), F(3, 4)]], mode))
