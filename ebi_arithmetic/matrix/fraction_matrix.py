"""
FractionMatrix - interface of dense matrices of exact or approximate fractions.

Matrices are created with the factories FractionMatrix.from_rows and
FractionMatrix.new, which pick the exact (ExactFractionMatrix) or approximate
(ApproxFractionMatrix) implementation. All cells of a matrix have the same
kind; writing a value of the other kind raises IncompatibleArithmeticError.

Row and column indices are 0-based. A matrix can grow on the right
(push_columns) and at the bottom (push_rows) and shrink on the left
(pop_front_columns), which is what matrix inversion needs to work on an
augmented [A | I] matrix in place.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..exactness import IncompatibleArithmeticError, resolve_exact
from ..fraction import EbiFraction


class FractionMatrix(ABC):
    """Dense row-major matrix of EbiFraction values"""

    # Factories
    @staticmethod
    def new(number_of_rows: int, number_of_columns: int, exact: Optional[bool] = None) -> 'FractionMatrix':
        """Zero matrix of the given size in the requested (or global) mode"""
        if number_of_rows < 0:
            raise ValueError(f"negative row count: {number_of_rows}")
        if number_of_columns < 0:
            raise ValueError(f"negative column count: {number_of_columns}")
        if resolve_exact(exact):
            from .exact_matrix import ExactFractionMatrix
            return ExactFractionMatrix(number_of_rows, number_of_columns)
        from .approx_matrix import ApproxFractionMatrix
        return ApproxFractionMatrix(number_of_rows, number_of_columns)

    @staticmethod
    def from_rows(rows: Sequence[Sequence], exact: Optional[bool] = None) -> 'FractionMatrix':
        """
        Build a matrix from a rectangular list of rows.

        Cells may be EbiFractions or plain numbers; plain numbers are converted
        in the requested (or global) mode. All cells must have the same kind.

        Raises:
            ValueError: if the rows have different lengths
            IncompatibleArithmeticError: if exact and approximate cells are mixed
        """
        rows = [list(row) for row in rows]
        number_of_columns = len(rows[0]) if rows else 0
        for row in rows:
            if len(row) != number_of_columns:
                raise ValueError(f"rows have different lengths: {len(row)} and {number_of_columns}")
        values = [[v if isinstance(v, EbiFraction) else EbiFraction(v, exact=exact) for v in row] for row in rows]

        flat = [v for row in values for v in row]
        if flat:
            kind_exact = flat[0].is_exact()
            for v in flat:
                if v.is_incompatible() or v.is_exact() != kind_exact:
                    raise IncompatibleArithmeticError()
            if exact is not None and bool(exact) != kind_exact:
                raise IncompatibleArithmeticError()
        else:
            kind_exact = resolve_exact(exact)

        matrix = FractionMatrix.new(len(rows), number_of_columns, kind_exact)
        for r, row in enumerate(values):
            for c, value in enumerate(row):
                matrix.set(r, c, value)
        return matrix

    # Shape
    @abstractmethod
    def number_of_rows(self) -> int:
        pass

    @abstractmethod
    def number_of_columns(self) -> int:
        pass

    def shape(self):
        return (self.number_of_rows(), self.number_of_columns())

    def _check_index(self, row: int, column: int):
        if not (0 <= row < self.number_of_rows() and 0 <= column < self.number_of_columns()):
            raise IndexError(f"cell ({row}, {column}) outside of a {self.number_of_rows()}x{self.number_of_columns()} matrix")

    def _check_row(self, row: int):
        if not 0 <= row < self.number_of_rows():
            raise IndexError(f"row {row} outside of a {self.number_of_rows()}x{self.number_of_columns()} matrix")

    # Kind
    @abstractmethod
    def is_exact(self) -> bool:
        pass

    def _own_kind(self, value) -> EbiFraction:
        """Convert plain numbers to this matrix's kind, reject fractions of the other kind"""
        if not isinstance(value, EbiFraction):
            return EbiFraction(value, exact=self.is_exact())
        if value.is_incompatible() or value.is_exact() != self.is_exact():
            raise IncompatibleArithmeticError()
        return value

    # Cells
    @abstractmethod
    def get(self, row: int, column: int) -> EbiFraction:
        pass

    @abstractmethod
    def set(self, row: int, column: int, value) -> None:
        pass

    def set_zero(self, row: int, column: int) -> None:
        self.set(row, column, EbiFraction.zero(self.is_exact()))

    def set_one(self, row: int, column: int) -> None:
        self.set(row, column, EbiFraction.one(self.is_exact()))

    def set_row_zero(self, row: int) -> None:
        self._check_row(row)
        for column in range(self.number_of_columns()):
            self.set_zero(row, column)

    def increase(self, row: int, column: int, value) -> None:
        """Add value to the cell"""
        self.set(row, column, self.get(row, column) + self._own_kind(value))

    def decrease(self, row: int, column: int, value) -> None:
        """Subtract value from the cell"""
        self.set(row, column, self.get(row, column) - self._own_kind(value))

    @abstractmethod
    def is_zero_at(self, row: int, column: int) -> bool:
        pass

    @abstractmethod
    def is_one_at(self, row: int, column: int) -> bool:
        pass

    @abstractmethod
    def is_positive_at(self, row: int, column: int) -> bool:
        pass

    @abstractmethod
    def is_negative_at(self, row: int, column: int) -> bool:
        pass

    def __getitem__(self, index) -> EbiFraction:
        row, column = index
        return self.get(row, column)

    def __setitem__(self, index, value) -> None:
        row, column = index
        self.set(row, column, value)

    # Row operations used by Gaussian elimination
    @abstractmethod
    def eliminate(self, target_row: int, pivot_row: int, factor: EbiFraction, from_column: int = 0) -> None:
        """target_row[c] -= pivot_row[c] * factor for every column c >= from_column"""

    @abstractmethod
    def divide_row(self, row: int, divisor: EbiFraction, from_column: int = 0) -> None:
        """row[c] /= divisor for every column c >= from_column"""

    @abstractmethod
    def negate_at(self, row: int, column: int) -> None:
        pass

    @abstractmethod
    def one_minus_at(self, row: int, column: int) -> None:
        """Replace the cell x by 1 - x"""

    # Shape changes
    @abstractmethod
    def push_columns(self, number_of_columns: int) -> None:
        """Append zero columns on the right"""

    @abstractmethod
    def push_rows(self, number_of_rows: int) -> None:
        """Append zero rows at the bottom"""

    @abstractmethod
    def pop_front_columns(self, number_of_columns: int) -> None:
        """Remove columns from the left"""

    # Whole-matrix operations
    @abstractmethod
    def reduce(self) -> None:
        """Bring every cell into lowest terms (no-op for approximate matrices)"""

    @abstractmethod
    def inner_eq(self, other: 'FractionMatrix') -> bool:
        """Representation equality, cell by cell, without reducing"""

    @abstractmethod
    def common_denominator(self) -> Optional[int]:
        """Least common multiple of all denominators, None if not applicable"""

    @abstractmethod
    def clone(self) -> 'FractionMatrix':
        pass

    @abstractmethod
    def assign(self, other: 'FractionMatrix') -> None:
        """Take over the shape and cells of a matrix of the same kind"""

    def eq(self, other: 'FractionMatrix') -> bool:
        """Numeric equality. Reduces both matrices first."""
        if not isinstance(other, FractionMatrix) or self.is_exact() != other.is_exact():
            return False
        if self.shape() != other.shape():
            return False
        self.reduce()
        other.reduce()
        return self.inner_eq(other)

    def __eq__(self, other):
        if not isinstance(other, FractionMatrix):
            return NotImplemented
        return self.eq(other)

    __hash__ = None

    def to_vec(self) -> List[List[EbiFraction]]:
        """Rows of the matrix as lists of fractions"""
        return [[self.get(r, c) for c in range(self.number_of_columns())] for r in range(self.number_of_rows())]

    def __matmul__(self, other):
        from .matrix_operations import MatrixOperations
        if isinstance(other, FractionMatrix):
            return MatrixOperations.instance().multiply(self, other)
        if isinstance(other, (list, tuple)):
            return MatrixOperations.instance().multiply_vector(self, other)
        return NotImplemented

    def __rmatmul__(self, other):
        from .matrix_operations import MatrixOperations
        if isinstance(other, (list, tuple)):
            return MatrixOperations.instance().vector_multiply(other, self)
        return NotImplemented

    __mul__ = __matmul__

    def __str__(self) -> str:
        rows = [", ".join(str(v) for v in row) for row in self.to_vec()]
        return "{{" + "},\n {".join(rows) + "}}"

    def __repr__(self) -> str:
        kind = 'exact' if self.is_exact() else 'approximate'
        return f"<{type(self).__name__} {self.number_of_rows()}x{self.number_of_columns()} {kind}>"
