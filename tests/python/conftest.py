"""
Pytest configuration and shared fixtures for flatvec tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import flatvec
from flatvec import Array, hooks
from flatvec._config import get_config


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore the default construction hook, dtype and epsilon around each test."""
    config = get_config()
    config.reset()
    hooks.uninstall()
    yield config
    hooks.uninstall()
    config.reset()


@pytest.fixture(params=['list', 'ctypes', 'numpy'])
def backend(request):
    """Run a test once per built-in container backend."""
    with hooks.using(request.param):
        yield request.param


@pytest.fixture
def floats():
    """Six float64 values in a ctypes Array."""
    return Array.from_list([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], dtype='float64')


@pytest.fixture
def points_xyz():
    """Three packed (x, y, z) points."""
    return [1.0, 2.0, 3.0,
            4.0, 5.0, 6.0,
            7.0, 8.0, 9.0]


@pytest.fixture
def identity3():
    """Column-major 3x3 identity."""
    return [1, 0, 0,
            0, 1, 0,
            0, 0, 1]


@pytest.fixture
def random_values():
    """Reproducible random float64 values."""
    rng = np.random.default_rng(42)
    return rng.standard_normal(64).tolist()


# =============================================================================
# Helper Functions
# =============================================================================

def as_list(container):
    """Elements of any Readable container as a plain list."""
    if hasattr(container, 'tolist'):
        return container.tolist()
    return [container[i] for i in flatvec.index_range(container)]


def assert_array_equal(a1, a2, rtol=1e-7, atol=1e-12):
    """Assert two containers are approximately equal."""
    np.testing.assert_allclose(np.asarray(as_list(a1), dtype=float),
                               np.asarray(as_list(a2), dtype=float),
                               rtol=rtol, atol=atol)
