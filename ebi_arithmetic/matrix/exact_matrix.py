"""
ExactFractionMatrix - exact matrix with overflow-safe cell storage.

Cells start in NarrowStorage (uint64 numerators and denominators). Any
operation whose result does not fit is retried after converting the whole
matrix to WideStorage, so callers never see an overflow. reduce() converts
back to narrow storage once every cell fits again.
"""

import logging
from typing import Optional

from ..exactness import IncompatibleArithmeticError
from ..fraction import EbiFraction
from ..names import NARROW_MAX, PARALLEL_THRESHOLD
from ..pool import available_processes, chunk_count, chunk_ranges, map_chunks
from . import cell as cells
from .cell import Cell, NarrowOverflow
from .fraction_matrix import FractionMatrix
from .storage import NarrowStorage, RationalStorage, WideStorage, lcm_chunk, reduce_chunk


class ExactFractionMatrix(FractionMatrix):
    """Matrix of exact fractions, including the special values NaN, +inf and -inf"""

    def __init__(self, number_of_rows: int, number_of_columns: int, storage: Optional[RationalStorage] = None):
        if storage is None:
            storage = NarrowStorage(number_of_rows, number_of_columns)
        self._storage = storage

    def number_of_rows(self) -> int:
        return self._storage.number_of_rows()

    def number_of_columns(self) -> int:
        return self._storage.number_of_columns()

    def is_exact(self) -> bool:
        return True

    def is_narrow(self) -> bool:
        return self._storage.is_narrow()

    @property
    def storage(self) -> RationalStorage:
        return self._storage

    # Storage width
    def promote(self) -> None:
        """Switch to wide storage, keeping all cells"""
        if self._storage.is_narrow():
            logging.debug(f"Promoting {self.number_of_rows()}x{self.number_of_columns()} matrix to wide storage.")
            self._storage = self._storage.to_wide()

    def demote(self) -> bool:
        """Switch to narrow storage if every cell fits, return whether the matrix is narrow"""
        if not self._storage.is_narrow() and self._storage.fits_narrow():
            logging.debug(f"Demoting {self.number_of_rows()}x{self.number_of_columns()} matrix to narrow storage.")
            self._storage = self._storage.to_narrow()
        return self._storage.is_narrow()

    def compute(self, operation, *operands: Cell) -> Cell:
        """
        Apply a cell operation within the limit of the current storage.

        If the result would not fit into narrow storage, the matrix is promoted
        and the operation is repeated without a limit. Results beyond the narrow
        range are kept in lowest terms.
        """
        limit = self._storage.limit
        if limit is not None:
            try:
                return operation(*operands, limit=limit)
            except NarrowOverflow:
                self.promote()
        result = operation(*operands)
        if not cells.fits(result, NARROW_MAX):
            result = cells.reduce(result)
        return result

    def get_cell(self, row: int, column: int) -> Cell:
        return self._storage.get(row, column)

    def set_cell(self, row: int, column: int, value: Cell) -> None:
        limit = self._storage.limit
        if limit is not None and not cells.fits(value, limit):
            reduced = cells.reduce(value)
            if cells.fits(reduced, limit):
                value = reduced
            else:
                self.promote()
        self._storage.set(row, column, value)

    # Cells
    def get(self, row: int, column: int) -> EbiFraction:
        self._check_index(row, column)
        return cells.to_fraction(self._storage.get(row, column))

    def set(self, row: int, column: int, value) -> None:
        self._check_index(row, column)
        self.set_cell(row, column, cells.from_exact(self._own_kind(value).exact()))

    def set_zero(self, row: int, column: int) -> None:
        self._check_index(row, column)
        self._storage.set(row, column, cells.ZERO)

    def set_one(self, row: int, column: int) -> None:
        self._check_index(row, column)
        self._storage.set(row, column, cells.ONE)

    def increase(self, row: int, column: int, value) -> None:
        self._check_index(row, column)
        operand = cells.from_exact(self._own_kind(value).exact())
        self.set_cell(row, column, self.compute(cells.add, self._storage.get(row, column), operand))

    def decrease(self, row: int, column: int, value) -> None:
        self._check_index(row, column)
        operand = cells.from_exact(self._own_kind(value).exact())
        self.set_cell(row, column, self.compute(cells.sub, self._storage.get(row, column), operand))

    def is_zero_at(self, row: int, column: int) -> bool:
        cell = self._storage.get(row, column)
        return cells.is_finite(cell) and cell[1] == 0

    def is_one_at(self, row: int, column: int) -> bool:
        kind, num, den = self._storage.get(row, column)
        return kind == cells.CellType.PLUS and num == den

    def is_positive_at(self, row: int, column: int) -> bool:
        cell = self._storage.get(row, column)
        return cell[0] != cells.CellType.NAN and cells.sign(cell) > 0

    def is_negative_at(self, row: int, column: int) -> bool:
        cell = self._storage.get(row, column)
        return cell[0] != cells.CellType.NAN and cells.sign(cell) < 0

    # Row operations
    def eliminate(self, target_row: int, pivot_row: int, factor: EbiFraction, from_column: int = 0) -> None:
        factor_cell = cells.from_exact(self._own_kind(factor).exact())

        def subtract_scaled(target: Cell, pivot: Cell, limit: Optional[int] = None) -> Cell:
            return cells.sub(target, cells.mul(pivot, factor_cell, limit), limit)

        for column in range(from_column, self.number_of_columns()):
            pivot = self._storage.get(pivot_row, column)
            if cells.is_finite(pivot) and pivot[1] == 0:
                continue
            target = self._storage.get(target_row, column)
            self.set_cell(target_row, column, self.compute(subtract_scaled, target, pivot))

    def divide_row(self, row: int, divisor: EbiFraction, from_column: int = 0) -> None:
        divisor_cell = cells.from_exact(self._own_kind(divisor).exact())
        for column in range(from_column, self.number_of_columns()):
            value = self._storage.get(row, column)
            self.set_cell(row, column, self.compute(cells.div, value, divisor_cell))

    def negate_at(self, row: int, column: int) -> None:
        self._storage.set(row, column, cells.neg(self._storage.get(row, column)))

    def one_minus_at(self, row: int, column: int) -> None:
        self.set_cell(row, column, self.compute(cells.one_minus, self._storage.get(row, column)))

    # Shape changes
    def push_columns(self, number_of_columns: int) -> None:
        if number_of_columns < 0:
            raise ValueError(f"negative column count: {number_of_columns}")
        self._storage.push_columns(number_of_columns)

    def push_rows(self, number_of_rows: int) -> None:
        if number_of_rows < 0:
            raise ValueError(f"negative row count: {number_of_rows}")
        self._storage.push_rows(number_of_rows)

    def pop_front_columns(self, number_of_columns: int) -> None:
        if not 0 <= number_of_columns <= self.number_of_columns():
            raise ValueError(f"cannot remove {number_of_columns} columns from a matrix with {self.number_of_columns()}")
        self._storage.pop_front_columns(number_of_columns)

    # Whole-matrix operations
    def reduce(self, processes: Optional[int] = None, parallel_threshold: int = PARALLEL_THRESHOLD) -> None:
        """
        Bring every finite cell into lowest terms and use narrow storage if possible.

        Zero becomes 0/1 and n/n becomes 1/1, NaN and infinite cells are left
        alone. Wide matrices with at least `parallel_threshold` cells are
        reduced in chunks on a process pool. Reducing twice changes nothing.

        Args:
            processes: Number of worker processes (default: physical cores)
            parallel_threshold: Minimum number of cells for parallel reduction
        """
        storage = self._storage
        size = self.number_of_rows() * self.number_of_columns()
        if isinstance(storage, WideStorage) and size >= parallel_threshold:
            if processes is None:
                processes = available_processes()
            ranges = chunk_ranges(size, chunk_count(processes))
            logging.debug(f"Reducing {size} cells in {len(ranges)} chunks.")
            chunks = [(storage.types[r.start:r.stop], storage.numerators[r.start:r.stop],
                       storage.denominators[r.start:r.stop]) for r in ranges]
            for r, (types, numerators, denominators) in zip(ranges, map_chunks(reduce_chunk, chunks, processes)):
                storage.types[r.start:r.stop] = types
                storage.numerators[r.start:r.stop] = numerators
                storage.denominators[r.start:r.stop] = denominators
        else:
            storage.reduce()
        self.demote()

    def common_denominator(self, processes: Optional[int] = None,
                           parallel_threshold: int = PARALLEL_THRESHOLD) -> Optional[int]:
        """Least common multiple of all cell denominators, None if a cell is NaN or infinite"""
        if self._storage.has_special():
            return None
        denominators = self._storage.finite_denominators()
        if len(denominators) < parallel_threshold:
            return lcm_chunk(denominators)
        if processes is None:
            processes = available_processes()
        chunks = [denominators[r.start:r.stop] for r in chunk_ranges(len(denominators), chunk_count(processes))]
        return lcm_chunk(map_chunks(lcm_chunk, chunks, processes))

    def inner_eq(self, other: FractionMatrix) -> bool:
        if not isinstance(other, ExactFractionMatrix) or self.shape() != other.shape():
            return False
        for row in range(self.number_of_rows()):
            for column in range(self.number_of_columns()):
                if self._storage.get(row, column) != other._storage.get(row, column):
                    return False
        return True

    def clone(self) -> 'ExactFractionMatrix':
        return ExactFractionMatrix(0, 0, self._storage.copy())

    def assign(self, other: FractionMatrix) -> None:
        if not isinstance(other, ExactFractionMatrix):
            raise IncompatibleArithmeticError()
        self._storage = other._storage

    def to_rows_of_cells(self):
        return [self._storage.row(r) for r in range(self.number_of_rows())]

