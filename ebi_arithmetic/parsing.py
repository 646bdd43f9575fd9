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
"""Parse fractions from text

Accepted forms (optionally signed, surrounding whitespace ignored):

    7           integer

    1.25        decimal, also '.2' and '1.00'

    2/5         numerator and denominator

    NaN, inf, -inf

Approximate parsing additionally accepts everything float() accepts, such
as '1e-3'. Exact parsing reads decimals without rounding ('0.1' is 1/10).
"""

from fractions import Fraction
import math
import re
from typing import Optional

from .names import NAN, NEG_INF, POS_INF

_SPECIAL_WORDS = {
    'nan': NAN,
    '+nan': NAN,
    '-nan': NAN,
    'inf': POS_INF,
    '+inf': POS_INF,
    'infinity': POS_INF,
    '+infinity': POS_INF,
    '-inf': NEG_INF,
    '-infinity': NEG_INF,
}

# integer, decimal or integer/integer, no exponents or digit separators
_EXACT_PATTERN = re.compile(r'[+-]?(?:\d+/\d+|\d+(?:\.\d+)?|\.\d+)')


def parse_exact_text(text: str):
    """Return a Fraction (or special value) for text, raise ValueError otherwise"""
    stripped = text.strip()
    special = _SPECIAL_WORDS.get(stripped.lower())
    if special is not None:
        return special
    if not _EXACT_PATTERN.fullmatch(stripped):
        raise ValueError(f"{text!r} is not a fraction")
    try:
        return Fraction(stripped)
    except (ValueError, ZeroDivisionError):
        raise ValueError(f"{text!r} is not a fraction") from None


def parse_approx_text(text: str) -> float:
    """Return a float for text, raise ValueError otherwise"""
    try:
        return float(text)
    except ValueError:
        pass
    try:
        return float(Fraction(text.strip()))
    except (ValueError, ZeroDivisionError):
        raise ValueError(f"{text!r} is not a fraction") from None


def parse_fraction(text: str, exact: Optional[bool] = None):
    """Parse text into an EbiFraction in the requested (or global) mode"""
    from .fraction import EbiFraction
    if not isinstance(text, str):
        raise TypeError(f"expected text, got {type(text).__name__}")
    return EbiFraction(text, exact=exact)


def is_fraction_text(text: str) -> bool:
    """Check whether text parses as an exact fraction"""
    try:
        parse_exact_text(text)
    except ValueError:
        return False
    return True


class UnparsedFraction:
    """Text that is parsed into a fraction only when it is needed

    The text is validated on parse(), so a malformed value raises ValueError
    at the point of use.
    """

    def __init__(self, text: str):
        self.text = text

    def parse(self, exact: Optional[bool] = None):
        return parse_fraction(self.text, exact=exact)

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"UnparsedFraction({self.text!r})"

    def __eq__(self, other):
        if isinstance(other, UnparsedFraction):
            return self.text == other.text
        return NotImplemented

    def __hash__(self):
        return hash(self.text)


def format_float(value: float) -> str:
    """Text for a float that parse_approx_text reads back unchanged"""
    if math.isnan(value):
        return NAN
    if math.isinf(value):
        return POS_INF if value > 0 else NEG_INF
    return repr(value)
