#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
#
#
"""Fractions that are either exact rationals or approximate floats

An :class:`EbiFraction` has one of three kinds:

    exact          a :class:`fractions.Fraction`, or one of the special exact values
                   NaN, +inf and -inf

    approx         a Python float (IEEE double)

    incompatible   the result of combining an exact with an approximate operand

Arithmetic between two exact operands stays exact, arithmetic between two
approximate operands stays approximate. Any other combination produces the
incompatible value, which absorbs every further operation. Mixing modes thus
never raises where it happens; the error surfaces where a concrete value is
extracted (see :meth:`EbiFraction.exact`, :meth:`EbiFraction.approx` and
:meth:`EbiFraction.__float__`).

The kind of a freshly constructed value is taken from the process-wide
exactness mode (:mod:`ebi_arithmetic.exactness`) unless ``exact=`` is passed.
"""

from fractions import Fraction
import math
import struct
from typing import Iterable, Optional

import numpy as np
import sympy

from .exactness import IncompatibleArithmeticError, MaybeExact, resolve_exact
from .names import APPROX, EPSILON, EXACT, INCOMPATIBLE, MSG_INCOMPATIBLE, NAN, NEG_INF, POS_INF
from .parsing import format_float, parse_approx_text, parse_exact_text

SPECIALS = (NAN, POS_INF, NEG_INF)


# Exact values are Fractions or one of the strings in SPECIALS.
def _is_special(value) -> bool:
    return isinstance(value, str)


def _exact_sign(value) -> int:
    if value == POS_INF:
        return 1
    if value == NEG_INF:
        return -1
    return (value > 0) - (value < 0)


def _signed_infinity(sign: int):
    return POS_INF if sign > 0 else NEG_INF


def exact_neg(a):
    if a == NAN:
        return NAN
    if a == POS_INF:
        return NEG_INF
    if a == NEG_INF:
        return POS_INF
    return -a


def exact_add(a, b):
    if a == NAN or b == NAN:
        return NAN
    if _is_special(a):
        if _is_special(b) and a != b:
            return NAN
        return a
    if _is_special(b):
        return b
    return a + b


def exact_sub(a, b):
    return exact_add(a, exact_neg(b))


def exact_mul(a, b):
    if a == NAN or b == NAN:
        return NAN
    if _is_special(a) or _is_special(b):
        sign = _exact_sign(a) * _exact_sign(b)
        if sign == 0:
            return NAN
        return _signed_infinity(sign)
    return a * b


def exact_div(a, b):
    if a == NAN or b == NAN:
        return NAN
    if _is_special(a):
        if _is_special(b):
            return NAN
        if b == 0:
            return a
        return _signed_infinity(_exact_sign(a) * _exact_sign(b))
    if _is_special(b):
        return Fraction(0)
    if b == 0:
        if a == 0:
            return NAN
        return _signed_infinity(_exact_sign(a))
    return a / b


def approx_div(a: float, b: float) -> float:
    """IEEE division, x/0 gives +-inf and 0/0 gives nan instead of raising"""
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(a) / np.float64(b))


def exact_to_float(value) -> float:
    if value == NAN:
        return math.nan
    if value == POS_INF:
        return math.inf
    if value == NEG_INF:
        return -math.inf
    return float(value)


def float_to_exact(value: float):
    """Convert a float to the exact value of its binary representation (or a special value)"""
    if math.isnan(value):
        return NAN
    if math.isinf(value):
        return POS_INF if value > 0 else NEG_INF
    return Fraction(value)


def _exact_rank(value):
    # NaN < -inf < finite < +inf
    if value == NAN:
        return (0, 0)
    if value == NEG_INF:
        return (1, 0)
    if value == POS_INF:
        return (3, 0)
    return (2, value)


def _approx_equal(a: float, b: float) -> bool:
    return a == b or (a - EPSILON <= b <= a + EPSILON)


class EbiFraction(MaybeExact):
    """A fraction that is exact, approximate, or the incompatible sentinel
    
    Construction:
        EbiFraction(3)                  integer
        EbiFraction(1, 3)               numerator and denominator
        EbiFraction('2/5')              text, see ebi_arithmetic.parsing
        EbiFraction(0.25)               float (exact mode: the exact binary value)
        EbiFraction(Fraction(1, 3))     fractions.Fraction, sympy.Rational, numpy scalars
        EbiFraction(x, 2)               EbiFraction operands keep their kind

    All forms take an optional keyword exact= that overrides the global mode.
    Without it, EbiFraction operands decide the kind and must agree.
    A zero denominator yields the special values +inf, -inf or NaN.
    """

    __slots__ = ('_kind', '_value')

    def __init__(self, value=0, denominator=None, *, exact: Optional[bool] = None):
        if isinstance(value, EbiFraction) and denominator is None and exact is None:
            self._kind = value._kind
            self._value = value._value
            return
        if exact is None:
            kinds = {v._kind for v in (value, denominator) if isinstance(v, EbiFraction)}
            if INCOMPATIBLE in kinds or len(kinds) > 1:
                raise IncompatibleArithmeticError()
            if kinds:
                exact = kinds.pop() == EXACT
        exact = resolve_exact(exact)
        payload = _convert(value, exact)
        if denominator is not None:
            payload = _divide_payload(payload, _convert(denominator, exact), exact)
        self._kind = EXACT if exact else APPROX
        self._value = payload

    @classmethod
    def _make(cls, kind: str, value) -> 'EbiFraction':
        result = object.__new__(cls)
        result._kind = kind
        result._value = value
        return result

    # Constants
    @classmethod
    def zero(cls, exact: Optional[bool] = None) -> 'EbiFraction':
        return cls(0, exact=exact)

    @classmethod
    def one(cls, exact: Optional[bool] = None) -> 'EbiFraction':
        return cls(1, exact=exact)

    @classmethod
    def infinity(cls, exact: Optional[bool] = None) -> 'EbiFraction':
        if resolve_exact(exact):
            return cls._make(EXACT, POS_INF)
        return cls._make(APPROX, math.inf)

    @classmethod
    def neg_infinity(cls, exact: Optional[bool] = None) -> 'EbiFraction':
        if resolve_exact(exact):
            return cls._make(EXACT, NEG_INF)
        return cls._make(APPROX, -math.inf)

    @classmethod
    def nan(cls, exact: Optional[bool] = None) -> 'EbiFraction':
        if resolve_exact(exact):
            return cls._make(EXACT, NAN)
        return cls._make(APPROX, math.nan)

    @classmethod
    def incompatible(cls) -> 'EbiFraction':
        return cls._make(INCOMPATIBLE, None)

    @classmethod
    def parse(cls, text: str, exact: Optional[bool] = None) -> 'EbiFraction':
        """Parse a fraction from text, raise ValueError if the text is not a fraction"""
        return cls(str(text), exact=exact)

    @classmethod
    def sum(cls, values: Iterable, exact: Optional[bool] = None) -> 'EbiFraction':
        """Add up values. An empty iterable gives zero in the requested (or global) mode."""
        total = None
        for value in values:
            if total is None:
                total = value if isinstance(value, EbiFraction) else EbiFraction(value)
            else:
                total = total + value
        if total is None:
            return cls.zero(exact)
        return total

    # Kind
    def kind(self) -> str:
        return self._kind

    def is_exact(self) -> bool:
        return self._kind == EXACT

    def is_approx(self) -> bool:
        return self._kind == APPROX

    def is_incompatible(self) -> bool:
        return self._kind == INCOMPATIBLE

    def _exact_value(self):
        return self._value

    def _approx_value(self):
        return self._value

    def same_kind(self, value) -> 'EbiFraction':
        """Construct value with the kind of this fraction"""
        if self._kind == INCOMPATIBLE:
            return self
        return EbiFraction(value, exact=self._kind == EXACT)

    # Arithmetic
    def _combine(self, other, exact_op, approx_op) -> 'EbiFraction':
        if self._kind == EXACT and other._kind == EXACT:
            return EbiFraction._make(EXACT, exact_op(self._value, other._value))
        if self._kind == APPROX and other._kind == APPROX:
            return EbiFraction._make(APPROX, approx_op(self._value, other._value))
        return EbiFraction._make(INCOMPATIBLE, None)

    def __add__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._combine(other, exact_add, lambda a, b: a + b)

    def __radd__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return other._combine(self, exact_add, lambda a, b: a + b)

    def __sub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._combine(other, exact_sub, lambda a, b: a - b)

    def __rsub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return other._combine(self, exact_sub, lambda a, b: a - b)

    def __mul__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._combine(other, exact_mul, lambda a, b: a * b)

    def __rmul__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return other._combine(self, exact_mul, lambda a, b: a * b)

    def __truediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._combine(other, exact_div, approx_div)

    def __rtruediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return other._combine(self, exact_div, approx_div)

    def __neg__(self) -> 'EbiFraction':
        if self._kind == EXACT:
            return EbiFraction._make(EXACT, exact_neg(self._value))
        if self._kind == APPROX:
            return EbiFraction._make(APPROX, -self._value)
        return self

    def __pos__(self) -> 'EbiFraction':
        return self

    def __abs__(self) -> 'EbiFraction':
        if self._kind == EXACT:
            if self._value == NEG_INF:
                return EbiFraction._make(EXACT, POS_INF)
            if _is_special(self._value):
                return self
            return EbiFraction._make(EXACT, abs(self._value))
        if self._kind == APPROX:
            return EbiFraction._make(APPROX, abs(self._value))
        return self

    def abs(self) -> 'EbiFraction':
        return abs(self)

    def recip(self) -> 'EbiFraction':
        """Return 1/self"""
        return self.same_kind(1) / self

    def one_minus(self) -> 'EbiFraction':
        """Return 1 - self"""
        return self.same_kind(1) - self

    def floor(self) -> 'EbiFraction':
        if self._kind == EXACT and not _is_special(self._value):
            return EbiFraction._make(EXACT, Fraction(math.floor(self._value)))
        if self._kind == APPROX:
            return EbiFraction._make(APPROX, float(np.floor(self._value)))
        return self

    def ceil(self) -> 'EbiFraction':
        if self._kind == EXACT and not _is_special(self._value):
            return EbiFraction._make(EXACT, Fraction(math.ceil(self._value)))
        if self._kind == APPROX:
            return EbiFraction._make(APPROX, float(np.ceil(self._value)))
        return self

    __floor__ = floor
    __ceil__ = ceil

    def approx_sqrt(self, precision_decimals: int) -> 'EbiFraction':
        """Square root, exact where the root is an integer and otherwise refined
        with the Babylonian method until the error is at most 10**-precision_decimals.
        Approximate values use math.sqrt. Negative values raise ValueError.
        """
        if self._kind == INCOMPATIBLE:
            return self
        if self.is_negative():
            raise ValueError("cannot calculate the square root of negative values")
        if self._kind == APPROX:
            return EbiFraction._make(APPROX, math.sqrt(self._value))
        if _is_special(self._value):
            return self
        return EbiFraction._make(EXACT, _babylonian_sqrt(self._value, precision_decimals))

    def sqrt_abs(self, precision_decimals: int) -> 'EbiFraction':
        return abs(self).approx_sqrt(precision_decimals)

    # Predicates
    def is_zero(self) -> bool:
        if self._kind == EXACT:
            return not _is_special(self._value) and self._value == 0
        if self._kind == APPROX:
            return abs(self._value) < EPSILON
        return False

    def is_one(self) -> bool:
        if self._kind == EXACT:
            return not _is_special(self._value) and self._value == 1
        if self._kind == APPROX:
            return abs(self._value - 1.0) < EPSILON
        return False

    def is_positive(self) -> bool:
        if self._kind == EXACT:
            return self._value != NAN and _exact_sign(self._value) > 0
        if self._kind == APPROX:
            return self._value > EPSILON
        return False

    def is_negative(self) -> bool:
        if self._kind == EXACT:
            return self._value != NAN and _exact_sign(self._value) < 0
        if self._kind == APPROX:
            return self._value < -EPSILON
        return False

    def is_not_negative(self) -> bool:
        if self.is_nan() or self._kind == INCOMPATIBLE:
            return False
        return not self.is_negative()

    def is_not_positive(self) -> bool:
        if self.is_nan() or self._kind == INCOMPATIBLE:
            return False
        return not self.is_positive()

    def is_nan(self) -> bool:
        if self._kind == EXACT:
            return self._value == NAN
        if self._kind == APPROX:
            return math.isnan(self._value)
        return False

    def is_positive_infinite(self) -> bool:
        if self._kind == EXACT:
            return self._value == POS_INF
        return self._kind == APPROX and self._value == math.inf

    def is_negative_infinite(self) -> bool:
        if self._kind == EXACT:
            return self._value == NEG_INF
        return self._kind == APPROX and self._value == -math.inf

    def is_infinite(self) -> bool:
        return self.is_positive_infinite() or self.is_negative_infinite()

    def is_finite(self) -> bool:
        if self._kind == EXACT:
            return not _is_special(self._value)
        if self._kind == APPROX:
            return math.isfinite(self._value)
        return False

    def is_normal(self) -> bool:
        """Finite and not zero"""
        return self.is_finite() and not self.is_zero()

    # Comparison
    def __eq__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        if self._kind != other._kind:
            return False
        if self._kind == EXACT:
            return self._value == other._value
        if self._kind == APPROX:
            return _approx_equal(self._value, other._value)
        return True

    def _compare(self, other) -> int:
        if self._kind == INCOMPATIBLE or other._kind == INCOMPATIBLE:
            return (self._kind != INCOMPATIBLE) - (other._kind != INCOMPATIBLE)
        if self._kind != other._kind:
            raise IncompatibleArithmeticError("cannot compare exact and approximate arithmetic")
        if self._kind == EXACT:
            left, right = _exact_rank(self._value), _exact_rank(other._value)
        else:
            a, b = self._value, other._value
            if math.isnan(a) or math.isnan(b):
                return (not math.isnan(a)) - (not math.isnan(b))
            if _approx_equal(a, b):
                return 0
            left, right = a, b
        return (left > right) - (left < right)

    def __lt__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._compare(other) < 0

    def __le__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._compare(other) <= 0

    def __gt__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._compare(other) > 0

    def __ge__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return other
        return self._compare(other) >= 0

    def __hash__(self):
        if self._kind == EXACT:
            if _is_special(self._value):
                return hash((EXACT, self._value))
            return hash(self._value)
        if self._kind == APPROX:
            return hash(struct.unpack('<q', struct.pack('<d', self._value))[0])
        return hash(INCOMPATIBLE)

    # Conversion
    def __float__(self) -> float:
        if self._kind == EXACT:
            return exact_to_float(self._value)
        if self._kind == APPROX:
            return self._value
        raise IncompatibleArithmeticError()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        if self._kind == EXACT:
            if _is_special(self._value):
                return self._value
            return str(self._value)
        if self._kind == APPROX:
            return format_float(self._value)
        return MSG_INCOMPATIBLE

    def __repr__(self) -> str:
        if self._kind == EXACT:
            return f"EbiFraction('{self}', exact=True)"
        if self._kind == APPROX:
            return f"EbiFraction({self._value!r}, exact=False)"
        return "EbiFraction.incompatible()"


def _convert(value, exact: bool):
    """Turn a Python, numpy or sympy number, an EbiFraction (or text) into an exact or approximate payload"""
    if isinstance(value, EbiFraction):
        if value._kind == INCOMPATIBLE:
            raise IncompatibleArithmeticError()
        if exact and value._kind == APPROX:
            return float_to_exact(value._value)
        if not exact and value._kind == EXACT:
            return exact_to_float(value._value)
        return value._value
    if isinstance(value, str):
        return parse_exact_text(value) if exact else parse_approx_text(value)
    if isinstance(value, (int, np.integer)):
        return Fraction(int(value)) if exact else float(value)
    if isinstance(value, Fraction):
        return value if exact else float(value)
    if isinstance(value, (float, np.floating)):
        return float_to_exact(float(value)) if exact else float(value)
    if isinstance(value, sympy.Basic):
        if value.is_Rational:
            fraction = Fraction(int(value.p), int(value.q))
            return fraction if exact else float(fraction)
        value = float(value)
        return float_to_exact(value) if exact else value
    raise TypeError(f"cannot convert {type(value).__name__} to a fraction")


def _divide_payload(numerator, denominator, exact: bool):
    if exact:
        return exact_div(numerator, denominator)
    return approx_div(numerator, denominator)


def _coerce(value):
    if isinstance(value, EbiFraction):
        return value
    if isinstance(value, (int, float, Fraction, np.integer, np.floating, sympy.Rational)):
        return EbiFraction(value)
    return NotImplemented


def _babylonian_sqrt(value: Fraction, precision_decimals: int) -> Fraction:
    if value == 0:
        return Fraction(0)
    if value.denominator == 1:
        root = math.isqrt(value.numerator)
        if root * root == value.numerator:
            return Fraction(root)
    epsilon = Fraction(1, 10**precision_decimals)

    def seed(v: Fraction) -> Fraction:
        bits = math.ceil(v).bit_length()
        return Fraction(1 << (bits // 2))

    x = seed(value) if value >= 1 else 1 / seed(1 / value)
    while abs((value - x * x) / (2 * x)) > epsilon:
        x = (x + value / x) / 2
    return x
