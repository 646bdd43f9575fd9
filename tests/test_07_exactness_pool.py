"""Test the global exactness mode and the chunked process pool."""
from math import lcm
import pytest
from ebi_arithmetic import EbiFraction, exact_arithmetic, is_exact_globally, resolve_exact, set_exact_globally
from ebi_arithmetic import exactness
from ebi_arithmetic.matrix.storage import lcm_chunk
from ebi_arithmetic.names import EXACT_ENV
from ebi_arithmetic.pool import available_processes, chunk_count, chunk_ranges, map_chunks


def test_set_and_resolve():
    set_exact_globally(False)
    assert not is_exact_globally()
    assert not resolve_exact(None)
    assert resolve_exact(True)
    set_exact_globally(True)
    assert resolve_exact(None)


def test_context_restores_mode_after_error(exact_mode):
    with pytest.raises(ZeroDivisionError):
        with exact_arithmetic(False):
            assert EbiFraction(1, 2).is_approx()
            raise ZeroDivisionError()
    assert is_exact_globally()


@pytest.mark.parametrize("value,expected", [
    (None, True),
    ("1", True),
    ("true", True),
    ("0", False),
    ("False", False),
    (" approx ", False),
])
def test_environment_variable(monkeypatch, value, expected):
    if value is None:
        monkeypatch.delenv(EXACT_ENV, raising=False)
    else:
        monkeypatch.setenv(EXACT_ENV, value)
    assert (exactness._read_environment() == expected)


def test_arithmetic_ignores_global_mode(exact_mode):
    x = EbiFraction(1, 3)
    set_exact_globally(False)
    assert (x + x).is_exact()


def test_chunk_ranges():
    assert (chunk_ranges(10, 3) == [range(0, 4), range(4, 7), range(7, 10)])
    assert (chunk_ranges(2, 8) == [range(0, 1), range(1, 2)])
    assert (chunk_ranges(0, 4) == [])
    assert (sum(len(r) for r in chunk_ranges(1001, 16)) == 1001)


def test_chunk_count():
    assert (chunk_count(3) == 12)
    assert (chunk_count(0) == 4)
    assert available_processes() >= 1


def test_map_chunks_serial():
    assert (map_chunks(lcm_chunk, [[2, 3], [4, 5]], processes=1) == [6, 20])


@pytest.mark.timeout(120)
def test_map_chunks_in_pool():
    chunks = [list(range(1, 10)), list(range(10, 20)), [7, 11]]
    assert (map_chunks(lcm_chunk, chunks, processes=2) == [lcm(*c) for c in chunks])
