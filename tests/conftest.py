"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest


def gaussian_kernel(x, y, sigma=1.0):
    """Squared-exponential kernel on points given as coordinate arrays."""
    diff = np.asarray(x, dtype=np.float64) - np.asarray(y, dtype=np.float64)
    return float(np.exp(-np.dot(diff, diff) / (2.0 * sigma ** 2)))


def gaussian_gram(points, sigma=1.0):
    """Dense Gram matrix of gaussian_kernel over the given points."""
    pts = np.asarray(points, dtype=np.float64)
    sq = np.sum((pts[:, None, :] - pts[None, :, :]) ** 2, axis=-1)
    return np.exp(-sq / (2.0 * sigma ** 2))


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def spd_matrix(rng):
    """Well-conditioned 30 x 30 symmetric positive definite matrix."""
    n = 30
    B = rng.standard_normal((n, n))
    return B @ B.T + n * np.eye(n)


@pytest.fixture
def low_rank_factor(rng):
    """B (40 x 4); A = B B' has rank 4."""
    return rng.standard_normal((40, 4))


@pytest.fixture
def points_1d():
    """50 points on [0, 1] as (1,) coordinate arrays."""
    return [np.array([t]) for t in np.linspace(0.0, 1.0, 50)]


@pytest.fixture
def gaussian():
    """The gaussian_kernel helper, as a fixture."""
    return gaussian_kernel


@pytest.fixture
def gram():
    """The gaussian_gram helper, as a fixture."""
    return gaussian_gram
