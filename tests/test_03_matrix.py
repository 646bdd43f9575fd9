"""Test matrix construction, storage promotion and reduction."""
from fractions import Fraction
import pytest
import numpy as np
from ebi_arithmetic import EbiFraction, FractionMatrix, ExactFractionMatrix, ApproxFractionMatrix
from ebi_arithmetic import IncompatibleArithmeticError, CellType
from ebi_arithmetic.names import NARROW_MAX


def fractions(rows, exact=True):
    return [[EbiFraction(v, exact=exact) for v in row] for row in rows]


def test_from_rows_picks_kind():
    assert isinstance(FractionMatrix.from_rows(fractions([[1, 2]], True)), ExactFractionMatrix)
    assert isinstance(FractionMatrix.from_rows(fractions([[1, 2]], False)), ApproxFractionMatrix)


def test_from_rows_rejects_ragged_rows(mode):
    with pytest.raises(ValueError):
        FractionMatrix.from_rows([[1, 2], [3]])


def test_from_rows_rejects_mixed_kinds():
    with pytest.raises(IncompatibleArithmeticError):
        FractionMatrix.from_rows([[EbiFraction(1, exact=True), EbiFraction(2.0, exact=False)]])
    with pytest.raises(IncompatibleArithmeticError):
        FractionMatrix.from_rows([[EbiFraction.incompatible()]])


def test_empty_matrix_uses_global_mode(mode):
    m = FractionMatrix.from_rows([])
    assert (m.is_exact() == mode)
    assert (m.shape() == (0, 0))


def test_new_is_zero(mode):
    m = FractionMatrix.new(2, 3)
    assert (m.shape() == (2, 3))
    assert all(m.is_zero_at(r, c) for r in range(2) for c in range(3))
    with pytest.raises(ValueError):
        FractionMatrix.new(-1, 2)


def test_get_set_and_increase(mode):
    m = FractionMatrix.new(2, 2)
    m.set(0, 1, EbiFraction(1, 3))
    m.increase(0, 1, EbiFraction(1, 6))
    assert (m.get(0, 1) == EbiFraction(1, 2))
    m.decrease(1, 0, 2)
    assert m.is_negative_at(1, 0)
    m.set_one(1, 1)
    assert m.is_one_at(1, 1)
    assert m.is_positive_at(0, 1)
    m.set_row_zero(0)
    assert m.is_zero_at(0, 1)
    m[1, 1] = EbiFraction(5)
    assert (m[1, 1] == EbiFraction(5))


def test_set_rejects_other_kind():
    m = FractionMatrix.new(1, 1, exact=True)
    with pytest.raises(IncompatibleArithmeticError):
        m.set(0, 0, EbiFraction(0.5, exact=False))


def test_index_out_of_range(mode):
    m = FractionMatrix.new(2, 2)
    with pytest.raises(IndexError):
        m.get(2, 0)


def test_to_vec_round_trip_with_specials():
    rows = [[EbiFraction(1, 3, exact=True), EbiFraction.nan(True)],
            [EbiFraction.infinity(True), EbiFraction.neg_infinity(True)],
            [EbiFraction(-7, 2, exact=True), EbiFraction(0, exact=True)]]
    m = FractionMatrix.from_rows(rows)
    back = m.to_vec()
    assert back[0][1].is_nan()
    assert back[1][0].is_positive_infinite()
    assert back[1][1].is_negative_infinite()
    assert (back[0][0] == rows[0][0])
    assert (back[2][0] == rows[2][0])
    assert FractionMatrix.from_rows(back).eq(m)


def test_starts_narrow_and_promotes_on_overflow():
    m = FractionMatrix.from_rows(fractions([[NARROW_MAX, 1]]))
    assert m.is_narrow()
    m.increase(0, 0, EbiFraction(1, exact=True))
    assert not m.is_narrow()
    assert (m.get(0, 0).exact() == NARROW_MAX + 1)
    assert (m.get(0, 1).exact() == 1)


def test_set_large_value_promotes():
    m = FractionMatrix.new(1, 2, exact=True)
    m.set(0, 0, EbiFraction(2**80, 3, exact=True))
    assert not m.is_narrow()
    assert (m.get(0, 0).exact() == Fraction(2**80, 3))


def test_reduce_demotes_and_canonicalises():
    m = FractionMatrix.from_rows(fractions([[NARROW_MAX, 3]]))
    m.increase(0, 0, EbiFraction(1, exact=True))
    assert not m.is_narrow()
    m.decrease(0, 0, EbiFraction(NARROW_MAX, exact=True))
    m.reduce()
    assert m.is_narrow()
    assert (m.get(0, 0).exact() == 1)


def test_reduce_is_idempotent():
    m = FractionMatrix.new(2, 2, exact=True)
    m.set(0, 0, EbiFraction(1, 2, exact=True))
    m.increase(0, 0, EbiFraction(1, 6, exact=True))
    m.increase(0, 1, EbiFraction(0, exact=True))
    m.set(1, 1, EbiFraction.infinity(True))
    m.reduce()
    once = m.clone()
    m.reduce()
    assert m.inner_eq(once)
    assert (m.storage.get(0, 0)[1:] == (2, 3))
    assert (m.storage.get(0, 1)[1:] == (0, 1))


def test_reduce_in_parallel_chunks():
    m = FractionMatrix.new(3, 3, exact=True)
    m.promote()
    for r in range(3):
        for c in range(3):
            m.set_cell(r, c, (CellType.PLUS, 2 * (r + 1), 4 * (r + 1)))
    m.reduce(processes=1, parallel_threshold=1)
    assert m.is_narrow()
    assert all(m.storage.get(r, c)[1:] == (1, 2) for r in range(3) for c in range(3))


def test_eq_is_numeric_and_inner_eq_is_representation():
    a = FractionMatrix.new(1, 1, exact=True)
    a.set(0, 0, EbiFraction(1, 2, exact=True))
    a.increase(0, 0, EbiFraction(1, 2, exact=True))
    b = FractionMatrix.from_rows(fractions([[1]]))
    assert not a.inner_eq(b)
    assert (a == b)
    assert a.inner_eq(b)


def test_eq_exact_vs_approx_is_false():
    assert not FractionMatrix.from_rows(fractions([[1]], True)).eq(FractionMatrix.from_rows(fractions([[1]], False)))


def test_approx_eq_within_epsilon():
    a = FractionMatrix.from_rows(fractions([[0.1 + 0.2]], False))
    b = FractionMatrix.from_rows(fractions([[0.3]], False))
    assert (a == b)


def test_common_denominator():
    m = FractionMatrix.from_rows([[EbiFraction(1, 4, exact=True), EbiFraction(5, 6, exact=True)]])
    assert (m.common_denominator() == 12)
    m.set(0, 0, EbiFraction.nan(True))
    assert (m.common_denominator() is None)
    assert (FractionMatrix.new(1, 1, exact=False).common_denominator() is None)


def test_common_denominator_in_chunks():
    m = FractionMatrix.from_rows([[EbiFraction(1, d, exact=True) for d in range(1, 9)]])
    assert (m.common_denominator(processes=1, parallel_threshold=1) == 840)


def test_push_and_pop_columns(mode):
    m = FractionMatrix.from_rows([[1, 2], [3, 4]])
    m.push_columns(2)
    assert (m.shape() == (2, 4))
    assert m.is_zero_at(1, 3)
    m.set_one(0, 3)
    m.pop_front_columns(2)
    assert (m.shape() == (2, 2))
    assert m.is_one_at(0, 1)
    m.push_rows(1)
    assert (m.shape() == (3, 2))
    assert m.is_zero_at(2, 0)
    with pytest.raises(ValueError):
        m.pop_front_columns(3)


def test_push_and_pop_columns_wide():
    m = FractionMatrix.from_rows(fractions([[2**70, 2], [3, 4]]))
    assert not m.is_narrow()
    m.push_columns(1)
    m.set(1, 2, EbiFraction(7, exact=True))
    m.pop_front_columns(1)
    assert (m.to_vec() == fractions([[2, 0], [4, 7]]))


def test_str():
    m = FractionMatrix.from_rows(fractions([[1, Fraction(1, 2)], [3, 4]]))
    assert (str(m) == "{{1, 1/2},\n {3, 4}}")


def test_approx_matrix_from_array():
    m = ApproxFractionMatrix.from_array(np.eye(2))
    assert m.is_one_at(1, 1)
    assert (m.get(0, 1) == EbiFraction(0.0, exact=False))


def test_negative_indices_raise(mode):
    m = FractionMatrix.from_rows(fractions([[1, 2], [3, 4]], mode))
    with pytest.raises(IndexError):
        m.increase(-1, 0, 5)
    with pytest.raises(IndexError):
        m.decrease(0, -1, 5)
    with pytest.raises(IndexError):
        m.increase(2, 0, 5)
    with pytest.raises(IndexError):
        m.set_row_zero(-1)
    with pytest.raises(IndexError):
        m.set_row_zero(2)
    assert (m == FractionMatrix.from_rows(fractions([[1, 2], [3, 4]], mode)))
