import numpy as np
import pytest
from ebi_arithmetic import is_exact_globally, set_exact_globally


@pytest.fixture(autouse=True)
def restore_exactness():
    """Restore the process-wide exactness mode after every test."""
    previous = is_exact_globally()
    yield
    set_exact_globally(previous)


@pytest.fixture
def exact_mode():
    """Construct exact values by default."""
    set_exact_globally(True)
    return True


@pytest.fixture
def approx_mode():
    """Construct approximate values by default."""
    set_exact_globally(False)
    return False


@pytest.fixture(params=[True, False], ids=["exact", "approx"])
def mode(request: pytest.FixtureRequest) -> bool:
    """Run a test in both exact and approximate mode."""
    set_exact_globally(request.param)
    return request.param


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(20240527)
