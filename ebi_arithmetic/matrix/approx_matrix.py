"""
ApproxFractionMatrix - matrix of approximate fractions backed by a numpy float64 array.

Zero and sign tests use the EPSILON tolerance, equality of matrices compares
cells within EPSILON. reduce() does nothing.
"""

from typing import Optional

import numpy as np

from ..exactness import IncompatibleArithmeticError
from ..fraction import EbiFraction
from ..names import EPSILON
from .fraction_matrix import FractionMatrix


class ApproxFractionMatrix(FractionMatrix):

    def __init__(self, number_of_rows: int, number_of_columns: int, values: Optional[np.ndarray] = None):
        if values is None:
            values = np.zeros((number_of_rows, number_of_columns), dtype=np.float64)
        self._values = values

    @classmethod
    def from_array(cls, values) -> 'ApproxFractionMatrix':
        values = np.array(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"expected a 2-dimensional array, got {values.ndim} dimensions")
        return cls(values.shape[0], values.shape[1], values)

    @property
    def values(self) -> np.ndarray:
        return self._values

    def number_of_rows(self) -> int:
        return self._values.shape[0]

    def number_of_columns(self) -> int:
        return self._values.shape[1]

    def is_exact(self) -> bool:
        return False

    def get(self, row: int, column: int) -> EbiFraction:
        self._check_index(row, column)
        return EbiFraction(float(self._values[row, column]), exact=False)

    def set(self, row: int, column: int, value) -> None:
        self._check_index(row, column)
        self._values[row, column] = self._own_kind(value).approx()

    def increase(self, row: int, column: int, value) -> None:
        self._check_index(row, column)
        self._values[row, column] += self._own_kind(value).approx()

    def decrease(self, row: int, column: int, value) -> None:
        self._check_index(row, column)
        self._values[row, column] -= self._own_kind(value).approx()

    def set_row_zero(self, row: int) -> None:
        self._check_row(row)
        self._values[row, :] = 0.0

    def is_zero_at(self, row: int, column: int) -> bool:
        return abs(self._values[row, column]) < EPSILON

    def is_one_at(self, row: int, column: int) -> bool:
        return abs(self._values[row, column] - 1.0) < EPSILON

    def is_positive_at(self, row: int, column: int) -> bool:
        return self._values[row, column] > EPSILON

    def is_negative_at(self, row: int, column: int) -> bool:
        return self._values[row, column] < -EPSILON

    def eliminate(self, target_row: int, pivot_row: int, factor: EbiFraction, from_column: int = 0) -> None:
        factor = self._own_kind(factor).approx()
        self._values[target_row, from_column:] -= self._values[pivot_row, from_column:] * factor

    def divide_row(self, row: int, divisor: EbiFraction, from_column: int = 0) -> None:
        divisor = self._own_kind(divisor).approx()
        with np.errstate(divide='ignore', invalid='ignore'):
            self._values[row, from_column:] /= divisor

    def negate_at(self, row: int, column: int) -> None:
        self._values[row, column] = -self._values[row, column]

    def one_minus_at(self, row: int, column: int) -> None:
        self._values[row, column] = 1.0 - self._values[row, column]

    def push_columns(self, number_of_columns: int) -> None:
        if number_of_columns < 0:
            raise ValueError(f"negative column count: {number_of_columns}")
        self._values = np.hstack((self._values, np.zeros((self.number_of_rows(), number_of_columns))))

    def push_rows(self, number_of_rows: int) -> None:
        if number_of_rows < 0:
            raise ValueError(f"negative row count: {number_of_rows}")
        self._values = np.vstack((self._values, np.zeros((number_of_rows, self.number_of_columns()))))

    def pop_front_columns(self, number_of_columns: int) -> None:
        if not 0 <= number_of_columns <= self.number_of_columns():
            raise ValueError(f"cannot remove {number_of_columns} columns from a matrix with {self.number_of_columns()}")
        self._values = self._values[:, number_of_columns:].copy()

    def reduce(self) -> None:
        pass

    def common_denominator(self) -> Optional[int]:
        return None

    def inner_eq(self, other: FractionMatrix) -> bool:
        if not isinstance(other, ApproxFractionMatrix) or self.shape() != other.shape():
            return False
        a, b = self._values, other._values
        with np.errstate(invalid='ignore'):
            return bool(np.all((a == b) | (np.abs(a - b) <= EPSILON)))

    def clone(self) -> 'ApproxFractionMatrix':
        return ApproxFractionMatrix(0, 0, self._values.copy())

    def assign(self, other: FractionMatrix) -> None:
        if not isinstance(other, ApproxFractionMatrix):
            raise IncompatibleArithmeticError()
        self._values = other._values
