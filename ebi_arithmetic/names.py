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
"""Static values used in the ebi_arithmetic package

    Tolerances

        EPSILON = 1e-13

    Limits of narrow matrix storage

        NARROW_MAX = 2**64 - 1

    Display

        EXPORT_DIGITS = 4

    Parallel reduction

        PARALLEL_THRESHOLD = 250000

        PARALLEL_CHUNKS_PER_PROCESS = 4

    Fraction kinds

        EXACT = 'exact'

        APPROX = 'approx'

        INCOMPATIBLE = 'incompatible'

    Exact special values

        NAN = 'NaN'

        POS_INF = 'inf'

        NEG_INF = '-inf'

    Configuration

        EXACT_ENV = 'EBI_ARITHMETIC_EXACT'
"""

EPSILON = 1e-13
NARROW_MAX = 2**64 - 1
EXPORT_DIGITS = 4
PARALLEL_THRESHOLD = 250000
PARALLEL_CHUNKS_PER_PROCESS = 4

EXACT = 'exact'
APPROX = 'approx'
INCOMPATIBLE = 'incompatible'

NAN = 'NaN'
POS_INF = 'inf'
NEG_INF = '-inf'

EXACT_ENV = 'EBI_ARITHMETIC_EXACT'
FALSE_WORDS = ('0', 'false', 'no', 'off', 'approx', 'approximate')

MSG_INCOMPATIBLE = 'cannot combine exact and approximate arithmetic'
MSG_NOT_EXACT = 'cannot extract an exact value from an approximate fraction'
MSG_NOT_APPROX = 'cannot extract an approximate value from an exact fraction'
MSG_NO_RREF = 'matrix has no reduced row-echelon form'
MSG_NOT_INVERTIBLE = 'matrix is not invertible'
MSG_NOT_SQUARE = 'can only take the inverse of a square matrix'
MSG_EMPTY_LIST = 'cannot take an element of an empty list'
MSG_ZERO_SUM = 'sum of fractions is zero'
