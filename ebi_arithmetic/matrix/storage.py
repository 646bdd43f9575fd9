"""
Cell storage for exact matrices.

Two interchangeable layouts hold the same logical cells:

    NarrowStorage  numpy arrays of cell types (uint8), numerators and
                   denominators (uint64), shaped (rows, columns)

    WideStorage    flat row-major Python lists, index = row * columns + column,
                   with arbitrary-precision numerators and denominators

Narrow storage never holds a numerator or denominator above NARROW_MAX; the
owning matrix converts to wide storage before writing such a cell.
"""

from abc import ABC, abstractmethod
from functools import reduce as fold
import math
from typing import List, Optional, Sequence

import numpy as np

from ..names import NARROW_MAX
from . import cell as cells
from .cell import Cell, CellType


class RationalStorage(ABC):
    """Interface shared by narrow and wide cell storage"""

    #: Largest numerator or denominator the storage can hold, None if unbounded
    limit: Optional[int] = None

    @abstractmethod
    def number_of_rows(self) -> int:
        pass

    @abstractmethod
    def number_of_columns(self) -> int:
        pass

    @abstractmethod
    def get(self, row: int, column: int) -> Cell:
        pass

    @abstractmethod
    def set(self, row: int, column: int, value: Cell) -> None:
        pass

    @abstractmethod
    def push_columns(self, number_of_columns: int) -> None:
        """Append zero columns on the right"""

    @abstractmethod
    def push_rows(self, number_of_rows: int) -> None:
        """Append zero rows at the bottom"""

    @abstractmethod
    def pop_front_columns(self, number_of_columns: int) -> None:
        """Remove columns from the left"""

    @abstractmethod
    def reduce(self) -> None:
        """Divide every finite cell by gcd(numerator, denominator)"""

    @abstractmethod
    def finite_denominators(self) -> List[int]:
        """Denominators of all finite cells"""

    @abstractmethod
    def has_special(self) -> bool:
        """Whether any cell is NaN or infinite"""

    @abstractmethod
    def copy(self) -> 'RationalStorage':
        pass

    def is_narrow(self) -> bool:
        return self.limit is not None

    def row(self, row: int) -> List[Cell]:
        return [self.get(row, c) for c in range(self.number_of_columns())]


class NarrowStorage(RationalStorage):

    limit = NARROW_MAX

    def __init__(self, rows: int, columns: int):
        self.types = np.zeros((rows, columns), dtype=np.uint8)
        self.numerators = np.zeros((rows, columns), dtype=np.uint64)
        self.denominators = np.ones((rows, columns), dtype=np.uint64)

    @classmethod
    def from_arrays(cls, types: np.ndarray, numerators: np.ndarray, denominators: np.ndarray) -> 'NarrowStorage':
        storage = cls(0, 0)
        storage.types = types
        storage.numerators = numerators
        storage.denominators = denominators
        return storage

    def number_of_rows(self) -> int:
        return self.types.shape[0]

    def number_of_columns(self) -> int:
        return self.types.shape[1]

    def get(self, row: int, column: int) -> Cell:
        return (CellType(int(self.types[row, column])), int(self.numerators[row, column]),
                int(self.denominators[row, column]))

    def set(self, row: int, column: int, value: Cell) -> None:
        self.types[row, column] = int(value[0])
        self.numerators[row, column] = value[1]
        self.denominators[row, column] = value[2]

    def push_columns(self, number_of_columns: int) -> None:
        rows = self.number_of_rows()
        self.types = np.hstack((self.types, np.zeros((rows, number_of_columns), dtype=np.uint8)))
        self.numerators = np.hstack((self.numerators, np.zeros((rows, number_of_columns), dtype=np.uint64)))
        self.denominators = np.hstack((self.denominators, np.ones((rows, number_of_columns), dtype=np.uint64)))

    def push_rows(self, number_of_rows: int) -> None:
        columns = self.number_of_columns()
        self.types = np.vstack((self.types, np.zeros((number_of_rows, columns), dtype=np.uint8)))
        self.numerators = np.vstack((self.numerators, np.zeros((number_of_rows, columns), dtype=np.uint64)))
        self.denominators = np.vstack((self.denominators, np.ones((number_of_rows, columns), dtype=np.uint64)))

    def pop_front_columns(self, number_of_columns: int) -> None:
        self.types = self.types[:, number_of_columns:].copy()
        self.numerators = self.numerators[:, number_of_columns:].copy()
        self.denominators = self.denominators[:, number_of_columns:].copy()

    def reduce(self) -> None:
        finite = self.types <= int(CellType.MINUS)
        zero = finite & (self.numerators == 0)
        divisor = np.gcd(self.numerators, self.denominators)
        divisor[~finite | zero] = 1
        self.numerators //= divisor
        self.denominators //= divisor
        self.denominators[zero] = 1
        self.types[zero] = int(CellType.PLUS)

    def finite_denominators(self) -> List[int]:
        return self.denominators[self.types <= int(CellType.MINUS)].tolist()

    def has_special(self) -> bool:
        return bool(np.any(self.types > int(CellType.MINUS)))

    def copy(self) -> 'NarrowStorage':
        return NarrowStorage.from_arrays(self.types.copy(), self.numerators.copy(), self.denominators.copy())

    def to_wide(self) -> 'WideStorage':
        rows, columns = self.types.shape
        return WideStorage.from_lists(rows, columns, [CellType(t) for t in self.types.ravel().tolist()],
                                      self.numerators.ravel().tolist(), self.denominators.ravel().tolist())


class WideStorage(RationalStorage):

    limit = None

    def __init__(self, rows: int, columns: int):
        values = rows * columns
        self._rows = rows
        self._columns = columns
        self.types = [CellType.PLUS] * values
        self.numerators = [0] * values
        self.denominators = [1] * values

    @classmethod
    def from_lists(cls, rows: int, columns: int, types: Sequence[CellType], numerators: Sequence[int],
                   denominators: Sequence[int]) -> 'WideStorage':
        storage = cls(0, 0)
        storage._rows = rows
        storage._columns = columns
        storage.types = list(types)
        storage.numerators = list(numerators)
        storage.denominators = list(denominators)
        return storage

    def number_of_rows(self) -> int:
        return self._rows

    def number_of_columns(self) -> int:
        return self._columns

    def get(self, row: int, column: int) -> Cell:
        index = row * self._columns + column
        return (self.types[index], self.numerators[index], self.denominators[index])

    def set(self, row: int, column: int, value: Cell) -> None:
        index = row * self._columns + column
        self.types[index] = CellType(value[0])
        self.numerators[index] = value[1]
        self.denominators[index] = value[2]

    def _rebuild(self, rows: int, columns: int, source) -> None:
        """Refill the lists with `source(row, column)` for the new shape"""
        types, numerators, denominators = [], [], []
        for r in range(rows):
            for c in range(columns):
                t, n, d = source(r, c)
                types.append(t)
                numerators.append(n)
                denominators.append(d)
        self._rows, self._columns = rows, columns
        self.types, self.numerators, self.denominators = types, numerators, denominators

    def push_columns(self, number_of_columns: int) -> None:
        old_columns = self._columns
        old = self.copy()
        self._rebuild(self._rows, old_columns + number_of_columns,
                      lambda r, c: old.get(r, c) if c < old_columns else cells.ZERO)

    def push_rows(self, number_of_rows: int) -> None:
        values = number_of_rows * self._columns
        self.types.extend([CellType.PLUS] * values)
        self.numerators.extend([0] * values)
        self.denominators.extend([1] * values)
        self._rows += number_of_rows

    def pop_front_columns(self, number_of_columns: int) -> None:
        old = self.copy()
        self._rebuild(self._rows, self._columns - number_of_columns,
                      lambda r, c: old.get(r, c + number_of_columns))

    def reduce(self) -> None:
        self.reduce_range(0, len(self.types))

    def reduce_range(self, start: int, stop: int) -> None:
        types, numerators, denominators = reduce_chunk(
            (self.types[start:stop], self.numerators[start:stop], self.denominators[start:stop]))
        self.types[start:stop] = types
        self.numerators[start:stop] = numerators
        self.denominators[start:stop] = denominators

    def finite_denominators(self) -> List[int]:
        return [d for t, d in zip(self.types, self.denominators) if t <= CellType.MINUS]

    def has_special(self) -> bool:
        return any(t > CellType.MINUS for t in self.types)

    def copy(self) -> 'WideStorage':
        return WideStorage.from_lists(self._rows, self._columns, self.types, self.numerators, self.denominators)

    def fits_narrow(self) -> bool:
        return all(n <= NARROW_MAX for n in self.numerators) and all(d <= NARROW_MAX for d in self.denominators)

    def to_narrow(self) -> NarrowStorage:
        shape = (self._rows, self._columns)
        return NarrowStorage.from_arrays(
            np.array([int(t) for t in self.types], dtype=np.uint8).reshape(shape),
            np.array(self.numerators, dtype=np.uint64).reshape(shape),
            np.array(self.denominators, dtype=np.uint64).reshape(shape))


def reduce_chunk(chunk):
    """Reduce a (types, numerators, denominators) slice of wide storage, picklable for worker processes"""
    types, numerators, denominators = chunk
    reduced = [cells.reduce(c) for c in zip(types, numerators, denominators)]
    return ([c[0] for c in reduced], [c[1] for c in reduced], [c[2] for c in reduced])


def lcm_chunk(denominators: List[int]) -> int:
    return fold(math.lcm, denominators, 1)
