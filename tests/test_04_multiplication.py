"""Test matrix products, including overflow of 64-bit storage."""
import pytest
from ebi_arithmetic import EbiFraction, FractionMatrix, IncompatibleArithmeticError
from ebi_arithmetic import multiply, multiply_vector, vector_multiply
from ebi_arithmetic.names import NARROW_MAX


def matrix(rows, exact=True):
    return FractionMatrix.from_rows([[EbiFraction(v, exact=exact) for v in row] for row in rows])


def vector(values, exact=True):
    return [EbiFraction(v, exact=exact) for v in values]


def test_multiply(mode):
    a = matrix([[1, 2, 3], [4, 5, 6]], mode)
    b = matrix([[7, 8], [9, 10], [11, 12]], mode)
    assert (a @ b == matrix([[58, 64], [139, 154]], mode))


def test_multiply_shape_mismatch():
    a = matrix([[1, 2, 3], [4, 5, 6]])
    with pytest.raises(ValueError, match="cannot multiply matrix of size 2x3 with a matrix of size 2x3"):
        multiply(a, a)


def test_multiply_mixed_kinds_raises():
    with pytest.raises(IncompatibleArithmeticError):
        multiply(matrix([[1]], True), matrix([[1]], False))


def test_narrow_product_stays_narrow():
    product = matrix([[1, 2], [3, 4]]) @ matrix([[5, 6], [7, 8]])
    assert product.is_narrow()
    assert (product == matrix([[19, 22], [43, 50]]))


@pytest.mark.parametrize("first,second,expected", [
    ([[NARROW_MAX, 2, 3], [4, 5, 6]], [[NARROW_MAX, 8], [9, 10], [11, 12]],
     [[340282366920938463426481119284349108276, 147573952589676412976], [73786976294838206571, 154]]),
    ([[NARROW_MAX, 2, 3], [4, 5, 6]], [[1, 8], [9, 10], [11, 12]],
     [[18446744073709551666, 147573952589676412976], [115, 154]]),
    ([[-NARROW_MAX, 2, 3], [4, 5, 6]], [[1, 8], [9, 10], [11, 12]],
     [[-18446744073709551564, -147573952589676412864], [115, 154]]),
    ([[-NARROW_MAX, 2, 3], [4, 5, 6]], [[NARROW_MAX, 8], [9, 10], [11, 12]],
     [[-340282366920938463426481119284349108174, -147573952589676412864], [73786976294838206571, 154]]),
])
def test_overflow_salvage(first, second, expected):
    a = matrix(first)
    b = matrix(second)
    assert a.is_narrow() and b.is_narrow()
    product = a @ b
    assert (product == matrix(expected))


def test_overflow_salvage_matches_wide_product():
    a = matrix([[NARROW_MAX, NARROW_MAX], [1, 2]])
    b = matrix([[NARROW_MAX, 3], [7, NARROW_MAX]])
    narrow_product = a @ b
    a_wide, b_wide = a.clone(), b.clone()
    a_wide.promote()
    b_wide.promote()
    wide_product = a_wide @ b_wide
    assert not wide_product.is_narrow()
    assert (narrow_product == wide_product)


def test_mixed_width_product_is_wide():
    a = matrix([[2**70, 1]])
    b = matrix([[1], [1]])
    product = a @ b
    assert not product.is_narrow()
    assert (product.get(0, 0).exact() == 2**70 + 1)


def test_fraction_product_exact():
    a = FractionMatrix.from_rows([[EbiFraction(1, 3, exact=True), EbiFraction(1, 2, exact=True)]])
    b = FractionMatrix.from_rows([[EbiFraction(3, exact=True)], [EbiFraction(1, 4, exact=True)]])
    assert (multiply(a, b).get(0, 0) == EbiFraction(9, 8, exact=True))


def test_matrix_vector(mode):
    m = matrix([[6, 2, 4], [-1, 4, 3], [-2, 9, 3]], mode)
    assert (m @ vector([4, -2, 1], mode) == vector([24, -9, -23], mode))


def test_small_vector_products(mode):
    m = matrix([[0, 1], [0, 1]], mode)
    v = vector([1, 0], mode)
    assert (multiply_vector(m, v) == vector([0, 0], mode))
    assert (vector_multiply(v, m) == vector([0, 1], mode))


def test_vector_shape_mismatch():
    with pytest.raises(ValueError):
        multiply_vector(matrix([[1, 2]]), vector([1]))
    with pytest.raises(ValueError):
        vector_multiply(vector([1]), matrix([[1, 2], [3, 4]]))
