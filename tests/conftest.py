"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def weighted_data(rng):
    """
    Weighted regression dataset, rows layout.

    Noise-free outputs, so every decomposition recovers beta_true.
    """
    n, p = 50, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true
    w = rng.uniform(0.5, 2.0, size=n)
    return X, y, w, beta_true


@pytest.fixture
def noisy_weighted_data(rng):
    """Weighted regression dataset with noise, rows layout."""
    n, p = 80, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([2.0, 0.5, -1.0])
    y = X @ beta_true + rng.standard_normal(n) * 0.3
    w = rng.uniform(0.1, 3.0, size=n)
    return X, y, w


@pytest.fixture
def linear_sequence():
    """y = x over 1..10 with unit weights."""
    x = np.arange(1.0, 11.0)
    return x, x.copy(), np.ones(10)


@pytest.fixture
def spd_system(rng):
    """Well-conditioned symmetric positive definite system A x = b."""
    p = 5
    M = rng.standard_normal((20, p))
    A = M.T @ M
    b = rng.standard_normal(p)
    return A, b
