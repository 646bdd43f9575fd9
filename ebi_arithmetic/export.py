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
"""Write fractions and matrices in human-readable form"""

from fractions import Fraction
import io
import math
from typing import TextIO

from .fraction import EbiFraction
from .names import EXPORT_DIGITS, MSG_INCOMPATIBLE


def to_decimal_string(value, digits: int = EXPORT_DIGITS) -> str:
    """Fixed-point text of value with the given number of digits after the point
    
    Exact values are rounded half away from zero without passing through a float.
    """
    if not isinstance(value, EbiFraction):
        value = EbiFraction(value)
    if value.is_incompatible():
        return MSG_INCOMPATIBLE
    if not value.is_finite():
        return str(value)
    if value.is_approx():
        return f"{value.approx():.{digits}f}"
    exact = value.exact()
    scaled = abs(exact) * 10**digits
    rounded = math.floor(scaled + Fraction(1, 2))
    sign = '-' if exact < 0 and rounded != 0 else ''
    integral, fractional = divmod(rounded, 10**digits)
    if digits == 0:
        return f"{sign}{integral}"
    return f"{sign}{integral}.{fractional:0{digits}d}"


def export(value, stream: TextIO, digits: int = EXPORT_DIGITS) -> None:
    """Write value to stream
    
    Exact fractions are written as the fraction followed by a decimal
    approximation line, approximate fractions as the approximation only.
    Matrices and other objects are written with str().
    """
    if isinstance(value, EbiFraction):
        if value.is_exact():
            stream.write(f"{value}\n")
            stream.write(f"Approximately {to_decimal_string(value, digits)}\n")
        elif value.is_approx():
            stream.write(f"Approximately {value}\n")
        else:
            stream.write(f"{MSG_INCOMPATIBLE}\n")
    else:
        stream.write(f"{value}\n")


def export_to_string(value, digits: int = EXPORT_DIGITS) -> str:
    buffer = io.StringIO()
    export(value, buffer, digits)
    return buffer.getvalue()
