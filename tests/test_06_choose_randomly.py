"""Test weighted random choice of indices."""
from fractions import Fraction
import pytest
import numpy as np
from ebi_arithmetic import EbiFraction, IncompatibleArithmeticError
from ebi_arithmetic import choose_randomly, choose_randomly_cached, choose_randomly_create_cache
from ebi_arithmetic import random_fraction, select_index


def test_select_index():
    cumulative = [Fraction(1, 4), Fraction(1, 2), Fraction(1)]
    assert (select_index(cumulative, Fraction(1, 3)) == 1)
    assert (select_index(cumulative, Fraction(1, 4)) == 0)
    assert (select_index(cumulative, Fraction(1)) == 2)
    assert (select_index([0.5, 0.9999999999999999], 1.0) == 1)


def test_empty_list():
    with pytest.raises(ValueError, match="empty"):
        choose_randomly([])


def test_zero_sum(mode):
    with pytest.raises(ValueError, match="zero"):
        choose_randomly([EbiFraction(0), EbiFraction(0)])


def test_mixed_kinds():
    with pytest.raises(IncompatibleArithmeticError):
        choose_randomly([EbiFraction(1, exact=True), EbiFraction(1.0, exact=False)])


def test_invalid_weights(mode):
    with pytest.raises(ValueError, match="negative"):
        choose_randomly([EbiFraction(1), EbiFraction(-1)])
    with pytest.raises(ValueError, match="not finite"):
        choose_randomly([EbiFraction(1), EbiFraction.infinity()])


def test_index_in_range(mode, rng):
    weights = [EbiFraction(1, 3), EbiFraction(1, 5), EbiFraction(7, 2)]
    for _ in range(200):
        assert 0 <= choose_randomly(weights, rng) < len(weights)


def test_single_weight(mode, rng):
    assert (choose_randomly([EbiFraction(3, 7)], rng) == 0)


def test_cache_exact():
    cache = choose_randomly_create_cache([EbiFraction(1, 4, exact=True), EbiFraction(1, 4, exact=True),
                                          EbiFraction(1, 6, exact=True)])
    assert cache.exact
    assert (cache.cumulative == (Fraction(3, 8), Fraction(3, 4), Fraction(1)))
    assert (cache.denominator == 8)
    with pytest.raises(AttributeError):
        cache.denominator = 3


def test_cache_approx():
    cache = choose_randomly_create_cache([EbiFraction(1.0, exact=False), EbiFraction(3.0, exact=False)])
    assert not cache.exact
    assert (cache.cumulative == (0.25, 1.0))
    assert (cache.denominator is None)


def test_plain_numbers_follow_global_mode(mode):
    assert (choose_randomly_create_cache([1, 2]).exact == mode)


def test_zero_weights_never_chosen(mode, rng):
    weights = [EbiFraction(0), EbiFraction(1), EbiFraction(0), EbiFraction(2), EbiFraction(0)]
    cache = choose_randomly_create_cache(weights)
    drawn = {choose_randomly_cached(cache, rng) for _ in range(500)}
    assert (drawn == {1, 3})


def test_random_fraction_range(rng):
    for denominator in (1, 2, 3, 7, 256, 257, 10**30 + 7):
        for _ in range(50):
            value = random_fraction(denominator, rng)
            assert 0 < value <= 1
            assert (value * denominator).denominator == 1


@pytest.mark.timeout(60)
def test_random_fraction_uniform(rng):
    counts = np.zeros(6, dtype=int)
    for _ in range(6000):
        counts[int(random_fraction(6, rng) * 6) - 1] += 1
    assert np.all(np.abs(counts - 1000) < 150)


@pytest.mark.timeout(60)
def test_frequencies_follow_weights(mode, rng):
    weights = [EbiFraction(1, 6), EbiFraction(1, 3), EbiFraction(1, 2)]
    cache = choose_randomly_create_cache(weights)
    counts = np.zeros(3, dtype=int)
    n = 12000
    for _ in range(n):
        counts[choose_randomly_cached(cache, rng)] += 1
    expected = np.array([1 / 6, 1 / 3, 1 / 2]) * n
    assert np.all(np.abs(counts - expected) < 0.05 * n)


def test_seeded_draws_are_reproducible(mode):
    weights = [EbiFraction(2, 9), EbiFraction(1, 9), EbiFraction(2, 3)]
    first = [choose_randomly(weights, 42) for _ in range(3)]
    a = np.random.default_rng(7)
    b = np.random.default_rng(7)
    assert ([choose_randomly(weights, a) for _ in range(50)] == [choose_randomly(weights, b) for _ in range(50)])
    assert (first == [choose_randomly(weights, 42) for _ in range(3)])


def test_tiny_float_weight_keeps_its_probability():
    cache = choose_randomly_create_cache([EbiFraction(1e-7, exact=True), EbiFraction(1, exact=True)])
    assert cache.exact
    assert (cache.cumulative[0] > 0)
    assert (cache.cumulative[0] == Fraction(1e-7) / (Fraction(1e-7) + 1))
