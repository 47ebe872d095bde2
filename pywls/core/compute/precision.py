"""
Numerical precision constants and utilities.

Machine epsilon, the rank tolerance shared by every decomposition, and
the condition number estimate reported in fit diagnostics.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any


# cond(X'WX) above this is reported as a warning on the result.
# cond(X'WX) = cond(sqrt(W)X)^2, so 1e12 means roughly 6 lost digits in beta.
CONDITION_WARNING_THRESHOLD: float = 1e12


def machine_epsilon(dtype: np.dtype | type = np.float64) -> float:
    """Machine epsilon for a given dtype."""
    return float(np.finfo(dtype).eps)


def rank_tolerance(
    magnitudes: NDArray[np.floating[Any]],
    size: int,
    dtype: np.dtype | type = np.float64,
) -> float:
    """
    Threshold below which a pivot / singular value counts as zero.

    Uses the LAPACK convention tol = size * eps * max(magnitudes).

    Args:
        magnitudes: Non-negative pivots, diagonal entries or singular values
        size: Matrix dimension
        dtype: Working precision
    """
    if magnitudes.size == 0:
        return 0.0
    return float(size * machine_epsilon(dtype) * np.max(magnitudes))


def numerical_rank(
    magnitudes: NDArray[np.floating[Any]],
    size: int,
    dtype: np.dtype | type = np.float64,
) -> int:
    """Count magnitudes above rank_tolerance(). All-zero input has rank 0."""
    if magnitudes.size == 0 or np.max(magnitudes) == 0:
        return 0
    tol = rank_tolerance(magnitudes, size, dtype)
    return int(np.sum(magnitudes > tol))


def condition_number(A: NDArray[np.floating[Any]]) -> float:
    """
    Condition number of a matrix using SVD.

    Returns:
        Ratio of largest to smallest singular value; inf if singular
    """
    s = np.linalg.svd(A, compute_uv=False)
    if s.size == 0 or s[-1] == 0:
        return np.inf
    return float(s[0] / s[-1])
