"""
Matrix products of fraction matrices and vectors.

Exact products of two narrow matrices use checked arithmetic: as long as
every intermediate value fits into 64 bits the product stays narrow. On the
first overflow, the result computed so far is promoted to wide storage and
the remaining cells are completed with arbitrary-precision integers. Products
involving a wide operand are computed in wide storage directly. Approximate
products use numpy.
"""

import logging
from typing import List, Sequence

import numpy as np

from ..exactness import IncompatibleArithmeticError
from ..fraction import EbiFraction
from ..names import NARROW_MAX
from . import cell as cells
from .approx_matrix import ApproxFractionMatrix
from .cell import NarrowOverflow
from .exact_matrix import ExactFractionMatrix
from .fraction_matrix import FractionMatrix
from .storage import WideStorage


class MatrixOperations:
    """Products of matrices and vectors"""

    _instance = None

    @classmethod
    def instance(cls) -> 'MatrixOperations':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @staticmethod
    def check_kinds(*matrices: FractionMatrix) -> bool:
        """Return whether the matrices are exact, raise if exact and approximate matrices are mixed"""
        kinds = {m.is_exact() for m in matrices}
        if len(kinds) > 1:
            raise IncompatibleArithmeticError()
        return kinds.pop()

    def multiply(self, a: FractionMatrix, b: FractionMatrix) -> FractionMatrix:
        """
        Matrix product a * b of an n x m and an m x p matrix.

        Raises:
            ValueError: if the number of columns of a differs from the number of rows of b
            IncompatibleArithmeticError: if one matrix is exact and the other approximate
        """
        if a.number_of_columns() != b.number_of_rows():
            raise ValueError(f"cannot multiply matrix of size {a.number_of_rows()}x{a.number_of_columns()} "
                             f"with a matrix of size {b.number_of_rows()}x{b.number_of_columns()}")
        if not self.check_kinds(a, b):
            with np.errstate(invalid='ignore', over='ignore'):
                return ApproxFractionMatrix(0, 0, a.values @ b.values)
        if a.is_narrow() and b.is_narrow():
            return self._multiply_narrow(a, b)
        return self._multiply_wide(a, b)

    def _multiply_narrow(self, a: ExactFractionMatrix, b: ExactFractionMatrix) -> ExactFractionMatrix:
        rows, inner, columns = a.number_of_rows(), a.number_of_columns(), b.number_of_columns()
        left = a.to_rows_of_cells()
        right = b.to_rows_of_cells()
        result = ExactFractionMatrix(rows, columns)
        limit = NARROW_MAX
        for row in range(rows):
            for column in range(columns):
                if limit is not None:
                    try:
                        value = cells.ZERO
                        for k in range(inner):
                            value = cells.add(value, cells.mul(left[row][k], right[k][column], limit), limit)
                        result.set_cell(row, column, value)
                        continue
                    except NarrowOverflow:
                        logging.debug(f"Overflow in cell ({row}, {column}) of a {rows}x{columns} product, "
                                      f"continuing in wide storage.")
                        result.promote()
                        limit = None
                value = cells.ZERO
                for k in range(inner):
                    value = cells.add(value, cells.mul(left[row][k], right[k][column]))
                result.set_cell(row, column, cells.reduce(value))
        return result

    def _multiply_wide(self, a: ExactFractionMatrix, b: ExactFractionMatrix) -> ExactFractionMatrix:
        rows, inner, columns = a.number_of_rows(), a.number_of_columns(), b.number_of_columns()
        left = a.to_rows_of_cells()
        right = b.to_rows_of_cells()
        result = ExactFractionMatrix(0, 0, WideStorage(rows, columns))
        for row in range(rows):
            for column in range(columns):
                value = cells.ZERO
                for k in range(inner):
                    value = cells.add(value, cells.mul(left[row][k], right[k][column]))
                result.set_cell(row, column, cells.reduce(value))
        return result

    def multiply_vector(self, matrix: FractionMatrix, vector: Sequence) -> List[EbiFraction]:
        """Product matrix * vector of an n x m matrix and a vector of length m"""
        if matrix.number_of_columns() != len(vector):
            raise ValueError(f"cannot multiply matrix of size {matrix.number_of_rows()}x{matrix.number_of_columns()} "
                             f"with a vector of size {len(vector)}")
        vector = [matrix._own_kind(v) for v in vector]
        result = []
        for row in range(matrix.number_of_rows()):
            total = EbiFraction.zero(matrix.is_exact())
            for column, value in enumerate(vector):
                total = total + matrix.get(row, column) * value
            result.append(total)
        return result

    def vector_multiply(self, vector: Sequence, matrix: FractionMatrix) -> List[EbiFraction]:
        """Product vector * matrix of a vector of length n and an n x m matrix"""
        if len(vector) != matrix.number_of_rows():
            raise ValueError(f"cannot multiply a vector of size {len(vector)} "
                             f"with a matrix of size {matrix.number_of_rows()}x{matrix.number_of_columns()}")
        vector = [matrix._own_kind(v) for v in vector]
        result = []
        for column in range(matrix.number_of_columns()):
            total = EbiFraction.zero(matrix.is_exact())
            for row, value in enumerate(vector):
                total = total + matrix.get(row, column) * value
            result.append(total)
        return result


def multiply(a: FractionMatrix, b: FractionMatrix) -> FractionMatrix:
    return MatrixOperations.instance().multiply(a, b)


def multiply_vector(matrix: FractionMatrix, vector: Sequence) -> List[EbiFraction]:
    return MatrixOperations.instance().multiply_vector(matrix, vector)


def vector_multiply(vector: Sequence, matrix: FractionMatrix) -> List[EbiFraction]:
    return MatrixOperations.instance().vector_multiply(vector, matrix)
