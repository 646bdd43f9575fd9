"""
Raw cell arithmetic for exact matrices.

A cell is a triple (type, numerator, denominator) of a CellType tag and two
non-negative Python ints. The sign lives in the tag, so the same triple can be
stored in unsigned 64-bit arrays. Cell arithmetic does not reduce its results
(numerators and denominators grow) except when a result exceeds the given
limit: then the result is divided by its gcd, and if it still does not fit a
NarrowOverflow is raised so that the caller can switch to wide storage.

Special cells (NaN, +inf, -inf) carry numerator 0 and denominator 1.
"""

from enum import IntEnum
from fractions import Fraction
from math import gcd
from typing import Optional, Tuple

from ..fraction import EbiFraction
from ..names import NAN, NEG_INF, POS_INF


class CellType(IntEnum):
    PLUS = 0
    MINUS = 1
    NAN = 2
    INFINITE = 3
    NEG_INFINITE = 4


class NarrowOverflow(Exception):
    """A cell value does not fit into narrow storage"""


Cell = Tuple[CellType, int, int]

ZERO: Cell = (CellType.PLUS, 0, 1)
ONE: Cell = (CellType.PLUS, 1, 1)
NAN_CELL: Cell = (CellType.NAN, 0, 1)
INF_CELL: Cell = (CellType.INFINITE, 0, 1)
NEG_INF_CELL: Cell = (CellType.NEG_INFINITE, 0, 1)

_SPECIAL_CELLS = {NAN: NAN_CELL, POS_INF: INF_CELL, NEG_INF: NEG_INF_CELL}
_SPECIAL_VALUES = {CellType.NAN: NAN, CellType.INFINITE: POS_INF, CellType.NEG_INFINITE: NEG_INF}


def is_finite(cell: Cell) -> bool:
    return cell[0] <= CellType.MINUS


def sign(cell: Cell) -> int:
    """Sign of a non-NaN cell"""
    kind, num, _ = cell
    if kind == CellType.INFINITE:
        return 1
    if kind == CellType.NEG_INFINITE:
        return -1
    if num == 0:
        return 0
    return 1 if kind == CellType.PLUS else -1


def from_exact(value) -> Cell:
    """Cell of an exact payload (Fraction or special value)"""
    if isinstance(value, str):
        return _SPECIAL_CELLS[value]
    if value < 0:
        return (CellType.MINUS, -value.numerator, value.denominator)
    return (CellType.PLUS, value.numerator, value.denominator)


def to_exact(cell: Cell):
    kind, num, den = cell
    if kind == CellType.PLUS:
        return Fraction(num, den)
    if kind == CellType.MINUS:
        return Fraction(-num, den)
    return _SPECIAL_VALUES[kind]


def to_fraction(cell: Cell) -> EbiFraction:
    return EbiFraction(to_exact(cell), exact=True) if is_finite(cell) else _special_fraction(cell[0])


def _special_fraction(kind: CellType) -> EbiFraction:
    if kind == CellType.NAN:
        return EbiFraction.nan(True)
    if kind == CellType.INFINITE:
        return EbiFraction.infinity(True)
    return EbiFraction.neg_infinity(True)


def _infinite(s: int) -> Cell:
    return INF_CELL if s > 0 else NEG_INF_CELL


def _finite(s: int, num: int, den: int, limit: Optional[int]) -> Cell:
    """Build a finite cell from a sign and magnitudes, checking the limit"""
    if limit is not None and (num > limit or den > limit):
        g = gcd(num, den)
        num //= g
        den //= g
        if num > limit or den > limit:
            raise NarrowOverflow()
    if num == 0:
        return (CellType.PLUS, 0, den)
    return (CellType.PLUS if s >= 0 else CellType.MINUS, num, den)


def reduce(cell: Cell) -> Cell:
    kind, num, den = cell
    if kind > CellType.MINUS:
        return cell
    if num == 0:
        return ZERO
    g = gcd(num, den)
    return (kind, num // g, den // g)


def fits(cell: Cell, limit: int) -> bool:
    return cell[1] <= limit and cell[2] <= limit


def neg(cell: Cell) -> Cell:
    kind, num, den = cell
    if kind == CellType.PLUS:
        return (CellType.MINUS, num, den) if num != 0 else cell
    if kind == CellType.MINUS:
        return (CellType.PLUS, num, den)
    if kind == CellType.INFINITE:
        return NEG_INF_CELL
    if kind == CellType.NEG_INFINITE:
        return INF_CELL
    return cell


def add(a: Cell, b: Cell, limit: Optional[int] = None) -> Cell:
    if a[0] == CellType.NAN or b[0] == CellType.NAN:
        return NAN_CELL
    if not is_finite(a):
        if not is_finite(b) and a[0] != b[0]:
            return NAN_CELL
        return a
    if not is_finite(b):
        return b
    left = a[1] if a[0] == CellType.PLUS else -a[1]
    right = b[1] if b[0] == CellType.PLUS else -b[1]
    if a[2] == b[2]:
        num, den = left + right, a[2]
    else:
        num, den = left * b[2] + right * a[2], a[2] * b[2]
    return _finite(1 if num >= 0 else -1, abs(num), den, limit)


def sub(a: Cell, b: Cell, limit: Optional[int] = None) -> Cell:
    return add(a, neg(b), limit)


def mul(a: Cell, b: Cell, limit: Optional[int] = None) -> Cell:
    if a[0] == CellType.NAN or b[0] == CellType.NAN:
        return NAN_CELL
    s = sign(a) * sign(b)
    if not is_finite(a) or not is_finite(b):
        return _infinite(s) if s != 0 else NAN_CELL
    return _finite(s, a[1] * b[1], a[2] * b[2], limit)


def div(a: Cell, b: Cell, limit: Optional[int] = None) -> Cell:
    if a[0] == CellType.NAN or b[0] == CellType.NAN:
        return NAN_CELL
    if not is_finite(a):
        if not is_finite(b):
            return NAN_CELL
        return a if sign(b) == 0 else _infinite(sign(a) * sign(b))
    if not is_finite(b):
        return ZERO
    if b[1] == 0:
        return NAN_CELL if a[1] == 0 else _infinite(sign(a))
    return _finite(sign(a) * sign(b), a[1] * b[2], a[2] * b[1], limit)


def one_minus(cell: Cell, limit: Optional[int] = None) -> Cell:
    """1 - cell without going through a general subtraction

    For x = n/d >= 0: n >= d gives -(n-d)/d, otherwise (d-n)/d. For x < 0 the
    result is (d+n)/d. Special cells are negated.
    """
    kind, num, den = cell
    if kind == CellType.PLUS:
        if num >= den:
            return _finite(-1, num - den, den, limit)
        return _finite(1, den - num, den, limit)
    if kind == CellType.MINUS:
        return _finite(1, den + num, den, limit)
    return neg(cell)


def equal(a: Cell, b: Cell) -> bool:
    """Value equality of two cells, NaN equals NaN"""
    if not is_finite(a) or not is_finite(b):
        return a[0] == b[0]
    return to_exact(a) == to_exact(b)
