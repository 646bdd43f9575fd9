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
"""Numeric helpers that work alike for Python numbers, numpy scalars and fractions

The helpers are generic functions (functools.singledispatch): int covers all
integer widths, float covers float32 and float64, numpy scalars are converted
to their Python counterparts. Float predicates use the EPSILON tolerance.
"""

from fractions import Fraction
from functools import singledispatch
import math

import numpy as np

from .fraction import EbiFraction, approx_div
from .names import EPSILON


def _register_numpy(generic):
    """Route numpy scalars to the int and float implementations"""
    generic.register(np.integer, lambda value: generic(int(value)))
    generic.register(np.floating, lambda value: generic(float(value)))
    return generic


@singledispatch
def is_zero(value) -> bool:
    raise TypeError(f"unsupported type {type(value).__name__}")


@is_zero.register(int)
@is_zero.register(Fraction)
def _(value) -> bool:
    return value == 0


@is_zero.register(float)
def _(value) -> bool:
    return abs(value) < EPSILON


@is_zero.register(EbiFraction)
def _(value) -> bool:
    return value.is_zero()


@singledispatch
def is_one(value) -> bool:
    raise TypeError(f"unsupported type {type(value).__name__}")


@is_one.register(int)
@is_one.register(Fraction)
def _(value) -> bool:
    return value == 1


@is_one.register(float)
def _(value) -> bool:
    return abs(value - 1.0) < EPSILON


@is_one.register(EbiFraction)
def _(value) -> bool:
    return value.is_one()


@singledispatch
def is_positive(value) -> bool:
    raise TypeError(f"unsupported type {type(value).__name__}")


@is_positive.register(int)
@is_positive.register(Fraction)
def _(value) -> bool:
    return value > 0


@is_positive.register(float)
def _(value) -> bool:
    return value > EPSILON


@is_positive.register(EbiFraction)
def _(value) -> bool:
    return value.is_positive()


@singledispatch
def is_negative(value) -> bool:
    raise TypeError(f"unsupported type {type(value).__name__}")


@is_negative.register(int)
@is_negative.register(Fraction)
def _(value) -> bool:
    return value < 0


@is_negative.register(float)
def _(value) -> bool:
    return value < -EPSILON


@is_negative.register(EbiFraction)
def _(value) -> bool:
    return value.is_negative()


@singledispatch
def is_nan(value) -> bool:
    raise TypeError(f"unsupported type {type(value).__name__}")


@is_nan.register(int)
@is_nan.register(Fraction)
def _(value) -> bool:
    return False


@is_nan.register(float)
def _(value) -> bool:
    return math.isnan(value)


@is_nan.register(EbiFraction)
def _(value) -> bool:
    return value.is_nan()


@singledispatch
def is_infinite(value) -> bool:
    raise TypeError(f"unsupported type {type(value).__name__}")


@is_infinite.register(int)
@is_infinite.register(Fraction)
def _(value) -> bool:
    return False


@is_infinite.register(float)
def _(value) -> bool:
    return math.isinf(value)


@is_infinite.register(EbiFraction)
def _(value) -> bool:
    return value.is_infinite()


@singledispatch
def floor(value):
    raise TypeError(f"unsupported type {type(value).__name__}")


@floor.register(int)
def _(value):
    return value


@floor.register(Fraction)
def _(value):
    return Fraction(math.floor(value))


@floor.register(float)
def _(value):
    return float(np.floor(value))


@floor.register(EbiFraction)
def _(value):
    return value.floor()


@singledispatch
def ceil(value):
    raise TypeError(f"unsupported type {type(value).__name__}")


@ceil.register(int)
def _(value):
    return value


@ceil.register(Fraction)
def _(value):
    return Fraction(math.ceil(value))


@ceil.register(float)
def _(value):
    return float(np.ceil(value))


@ceil.register(EbiFraction)
def _(value):
    return value.ceil()


def absolute(value):
    """abs() for all supported types, unsigned integers are returned unchanged"""
    return abs(value)


@singledispatch
def recip(value):
    raise TypeError(f"unsupported type {type(value).__name__}")


@recip.register(int)
@recip.register(Fraction)
def _(value):
    """Integers become fractions, 1/0 raises ZeroDivisionError"""
    return Fraction(1, 1) / value


@recip.register(float)
def _(value):
    return approx_div(1.0, value)


@recip.register(EbiFraction)
def _(value):
    return value.recip()


@singledispatch
def one_minus(value):
    return 1 - value


@one_minus.register(EbiFraction)
def _(value):
    return value.one_minus()


for _generic in (is_zero, is_one, is_positive, is_negative, is_nan, is_infinite, floor, ceil, recip, one_minus):
    _register_numpy(_generic)
