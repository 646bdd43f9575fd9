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
"""Draw indices at random with probabilities proportional to fraction weights

For exact weights the draw is exact: the normalised cumulative probabilities
are multiples of 1/D, where D is the least common multiple of their
denominators, and the comparison value is drawn uniformly from
{1/D, 2/D, ..., D/D} by rejection sampling on random bits. Index i is then
chosen with probability exactly w[i] / sum(w). Approximate weights use a
uniform float.

When many draws are taken from the same weights, build a
FractionRandomCache once with choose_randomly_create_cache and draw with
choose_randomly_cached.
"""

from bisect import bisect_left
from fractions import Fraction
from functools import reduce
from itertools import accumulate
import logging
import math
import threading
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .exactness import IncompatibleArithmeticError
from .fraction import EbiFraction
from .names import MSG_EMPTY_LIST, MSG_ZERO_SUM

__all__ = [
    "FractionRandomCache", "choose_randomly", "choose_randomly_create_cache", "choose_randomly_cached", "select_index",
    "random_fraction"
]

RandomSource = Union[None, int, np.random.Generator]

_local = threading.local()


class FractionRandomCache(NamedTuple):
    """Cumulative probabilities of a list of weights, ready for repeated draws
    
    exact:        whether the weights were exact
    cumulative:   normalised cumulative probabilities (Fractions or floats), the last one is 1
    denominator:  common denominator D of the cumulative probabilities (exact weights only)
    """
    exact: bool
    cumulative: Tuple
    denominator: Optional[int]


def generator(rng: RandomSource = None) -> np.random.Generator:
    """Return rng if it is a numpy Generator, a seeded Generator for a seed, or a per-thread Generator for None"""
    if isinstance(rng, np.random.Generator):
        return rng
    if rng is not None:
        return np.random.default_rng(rng)
    if not hasattr(_local, 'rng'):
        _local.rng = np.random.default_rng()
    return _local.rng


def _check_weights(weights: Sequence) -> Tuple[bool, list]:
    if len(weights) == 0:
        raise ValueError(MSG_EMPTY_LIST)
    weights = [w if isinstance(w, EbiFraction) else EbiFraction(w) for w in weights]
    exact = weights[0].is_exact()
    for w in weights:
        if w.is_incompatible() or w.is_exact() != exact:
            raise IncompatibleArithmeticError()
        if not w.is_finite():
            raise ValueError(f"weight {w} is not finite")
        if w.is_negative():
            raise ValueError(f"weight {w} is negative")
    return exact, weights


def choose_randomly_create_cache(weights: Sequence) -> FractionRandomCache:
    """
    Normalise the weights and compute their cumulative probabilities.

    Raises:
        ValueError: if the list is empty, a weight is negative or not finite, or the weights sum to zero
        IncompatibleArithmeticError: if exact and approximate weights are mixed
    """
    exact, weights = _check_weights(weights)
    if exact:
        values = [w.exact() for w in weights]
        total = sum(values, Fraction(0))
        if total == 0:
            raise ValueError(MSG_ZERO_SUM)
        cumulative = tuple(accumulate(v / total for v in values))
        denominator = reduce(math.lcm, (c.denominator for c in cumulative), 1)
        logging.debug(f"Cached {len(cumulative)} exact weights with common denominator {denominator}.")
        return FractionRandomCache(True, cumulative, denominator)
    values = [w.approx() for w in weights]
    total = math.fsum(values)
    if EbiFraction(total, exact=False).is_zero():
        raise ValueError(MSG_ZERO_SUM)
    cumulative = tuple(accumulate(v / total for v in values))
    logging.debug(f"Cached {len(cumulative)} approximate weights.")
    return FractionRandomCache(False, cumulative, None)


def random_fraction(denominator: int, rng: RandomSource = None) -> Fraction:
    """Uniformly random value from {1/D, 2/D, ..., D/D} for D = denominator"""
    rng = generator(rng)
    bits = denominator.bit_length()
    n_bytes = (bits + 7) // 8
    mask = (1 << bits) - 1
    while True:
        k = int.from_bytes(rng.bytes(n_bytes), 'little') & mask
        if k < denominator:
            return Fraction(k + 1, denominator)


def select_index(cumulative: Sequence, value) -> int:
    """First index whose cumulative probability is at least value

    Values above the last cumulative probability (float rounding) select the last index.
    """
    return min(bisect_left(cumulative, value), len(cumulative) - 1)


def choose_randomly_cached(cache: FractionRandomCache, rng: RandomSource = None) -> int:
    """Draw an index using precomputed cumulative probabilities"""
    if cache.exact:
        value = random_fraction(cache.denominator, rng)
    else:
        # uniform in (0, 1] so that leading zero weights are never chosen
        value = 1.0 - generator(rng).random()
    return select_index(cache.cumulative, value)


def choose_randomly(weights: Sequence, rng: RandomSource = None) -> int:
    """
    Draw index i with probability weights[i] / sum(weights).

    Args:
        weights: EbiFractions (or plain numbers) of one kind
        rng: numpy Generator, seed, or None for a per-thread generator

    Returns:
        The drawn index

    Raises:
        ValueError: if the list is empty, a weight is negative or not finite, or the weights sum to zero
        IncompatibleArithmeticError: if exact and approximate weights are mixed
    """
    return choose_randomly_cached(choose_randomly_create_cache(weights), rng)
