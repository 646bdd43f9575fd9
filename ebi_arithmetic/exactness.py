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
"""Process-wide exactness mode and the errors raised on mode mismatches

Every constructor of the package (fractions built from integers, text, pairs
or floats, and matrices built with ``new``) asks this module whether values
should be exact rationals or approximate floats. Arithmetic itself never
consults the flag: the kind of a result follows from the kinds of its
operands.

The flag is initialised once from the environment variable
``EBI_ARITHMETIC_EXACT`` and can be changed afterwards with
:func:`set_exact_globally` or temporarily with :func:`exact_arithmetic`.
Changing the flag while other threads construct values is not synchronized.
"""

from contextlib import contextmanager
import logging
import os
from typing import Optional

from .names import EXACT_ENV, FALSE_WORDS, MSG_INCOMPATIBLE, MSG_NOT_APPROX, MSG_NOT_EXACT

__all__ = [
    "IncompatibleArithmeticError", "SingularMatrixError", "set_exact_globally", "is_exact_globally", "resolve_exact",
    "exact_arithmetic", "MaybeExact"
]


class IncompatibleArithmeticError(ArithmeticError):
    """Raised when exact and approximate values meet where no sentinel can be returned"""

    def __init__(self, message: str = MSG_INCOMPATIBLE):
        super().__init__(message)


class SingularMatrixError(ArithmeticError):
    """Raised when a matrix has no inverse or no reduced row-echelon form"""


def _read_environment() -> bool:
    value = os.environ.get(EXACT_ENV)
    if value is None:
        return True
    exact = value.strip().lower() not in FALSE_WORDS
    logging.debug(f"{EXACT_ENV}={value!r}: using {'exact' if exact else 'approximate'} arithmetic.")
    return exact


_exact = _read_environment()


def set_exact_globally(exact: bool) -> None:
    """Set whether newly constructed values are exact (True) or approximate (False)"""
    global _exact
    _exact = bool(exact)


def is_exact_globally() -> bool:
    """Return the current process-wide exactness mode"""
    return _exact


def resolve_exact(exact: Optional[bool]) -> bool:
    """Return the explicit per-call choice, or the global mode when none is given"""
    if exact is None:
        return _exact
    return bool(exact)


@contextmanager
def exact_arithmetic(exact: bool = True):
    """Environment in which constructors use the given exactness mode
    
    Example:
        with exact_arithmetic(False):
            x = EbiFraction(1, 3)   # approximate
    """
    previous = is_exact_globally()
    set_exact_globally(exact)
    try:
        yield
    finally:
        set_exact_globally(previous)


class MaybeExact:
    """Mixin for values that are either exact or approximate
    
    Subclasses implement is_exact, _exact_value and _approx_value. The
    accessors exact and approx raise IncompatibleArithmeticError when the
    value is of the other kind.
    """

    def is_exact(self) -> bool:
        raise NotImplementedError

    def is_approx(self) -> bool:
        raise NotImplementedError

    def exact(self):
        """Return the exact payload, raise if the value is not exact"""
        if not self.is_exact():
            raise IncompatibleArithmeticError(MSG_NOT_EXACT)
        return self._exact_value()

    def approx(self):
        """Return the approximate payload, raise if the value is not approximate"""
        if not self.is_approx():
            raise IncompatibleArithmeticError(MSG_NOT_APPROX)
        return self._approx_value()

    def _exact_value(self):
        raise NotImplementedError

    def _approx_value(self):
        raise NotImplementedError
