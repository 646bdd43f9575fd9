"""
Gauss-Jordan elimination, reduced row-echelon form, matrix inversion and I - M.

The algorithms are written against the FractionMatrix interface and work
for exact and approximate matrices alike. Zero tests use the matrix's own
notion of zero: exact zero for exact matrices, |x| < EPSILON for approximate
ones. All operations change the matrix in place.
"""

import logging

from ..exactness import SingularMatrixError
from ..names import MSG_NO_RREF, MSG_NOT_INVERTIBLE, MSG_NOT_SQUARE
from .fraction_matrix import FractionMatrix


class GaussJordan:
    """
    Row reduction and inversion of fraction matrices.

    Use GaussJordan.instance() or the module-level shortcuts gauss_jordan,
    gauss_jordan_reduced, invert and identity_minus.
    """

    _instance = None

    @classmethod
    def instance(cls) -> 'GaussJordan':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def gauss_jordan(self, matrix: FractionMatrix) -> FractionMatrix:
        """
        Bring the matrix into row-echelon form with zeros above and below every
        nonzero diagonal element. Diagonal elements are not normalised.

        Rows whose diagonal element is zero are skipped as pivots.
        """
        rows = matrix.number_of_rows()
        diagonal = min(rows, matrix.number_of_columns())

        # forward pass
        for a in range(min(rows - 1, diagonal)):
            if matrix.is_zero_at(a, a):
                continue
            pivot = matrix.get(a, a)
            for b in range(a + 1, rows):
                if not matrix.is_zero_at(b, a):
                    matrix.eliminate(b, a, matrix.get(b, a) / pivot, a)

        # backward pass
        for i in reversed(range(diagonal)):
            if matrix.is_zero_at(i, i):
                continue
            pivot = matrix.get(i, i)
            for j in reversed(range(i)):
                if not matrix.is_zero_at(j, i):
                    matrix.eliminate(j, i, matrix.get(j, i) / pivot, i)
        return matrix

    def gauss_jordan_reduced(self, matrix: FractionMatrix) -> FractionMatrix:
        """
        Reduced row-echelon form: gauss_jordan followed by dividing every row
        by its diagonal element, so that the diagonal becomes exactly one.

        Raises:
            SingularMatrixError: if a diagonal element is zero after elimination
        """
        self.gauss_jordan(matrix)
        for i in range(matrix.number_of_rows()):
            if i >= matrix.number_of_columns() or matrix.is_zero_at(i, i):
                raise SingularMatrixError(MSG_NO_RREF)
            matrix.divide_row(i, matrix.get(i, i), i + 1)
            matrix.set_one(i, i)
        return matrix

    def invert(self, matrix: FractionMatrix) -> FractionMatrix:
        """
        Replace a square matrix by its inverse.

        Raises:
            ValueError: if the matrix is not square
            SingularMatrixError: if the matrix is not invertible
        """
        n = matrix.number_of_rows()
        if n != matrix.number_of_columns():
            raise ValueError(MSG_NOT_SQUARE)
        if n == 0:
            return matrix
        if n == 1:
            if matrix.is_zero_at(0, 0):
                raise SingularMatrixError(MSG_NOT_INVERTIBLE)
            matrix.set(0, 0, matrix.get(0, 0).recip())
            return matrix
        if n == 2:
            return self._invert_2x2(matrix)

        logging.debug(f"Inverting {n}x{n} matrix by Gauss-Jordan elimination.")
        # work on a copy, a singular matrix is left unchanged
        augmented = matrix.clone()
        augmented.push_columns(n)
        for i in range(n):
            augmented.set_one(i, n + i)
        self.gauss_jordan_reduced(augmented)
        augmented.pop_front_columns(n)
        matrix.assign(augmented)
        return matrix

    def _invert_2x2(self, matrix: FractionMatrix) -> FractionMatrix:
        a, b = matrix.get(0, 0), matrix.get(0, 1)
        c, d = matrix.get(1, 0), matrix.get(1, 1)
        determinant = a * d - b * c
        if determinant.is_zero():
            raise SingularMatrixError(MSG_NOT_INVERTIBLE)
        factor = determinant.recip()
        matrix.set(0, 0, d * factor)
        matrix.set(0, 1, -b * factor)
        matrix.set(1, 0, -c * factor)
        matrix.set(1, 1, a * factor)
        return matrix

    def identity_minus(self, matrix: FractionMatrix) -> FractionMatrix:
        """
        Replace M by I - M: cells on the diagonal (row == column) become 1 - x,
        all other cells are negated. The matrix does not need to be square.
        """
        for row in range(matrix.number_of_rows()):
            for column in range(matrix.number_of_columns()):
                if row == column:
                    matrix.one_minus_at(row, column)
                else:
                    matrix.negate_at(row, column)
        return matrix


def gauss_jordan(matrix: FractionMatrix) -> FractionMatrix:
    return GaussJordan.instance().gauss_jordan(matrix)


def gauss_jordan_reduced(matrix: FractionMatrix) -> FractionMatrix:
    return GaussJordan.instance().gauss_jordan_reduced(matrix)


def invert(matrix: FractionMatrix) -> FractionMatrix:
    return GaussJordan.instance().invert(matrix)


def identity_minus(matrix: FractionMatrix) -> FractionMatrix:
    return GaussJordan.instance().identity_minus(matrix)
