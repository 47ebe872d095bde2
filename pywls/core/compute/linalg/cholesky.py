"""
Cholesky decomposition solver.

The default solver for the weighted normal equations: X'WX is symmetric
positive semi-definite, and positive definite whenever the weighted
design has full column rank.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import cho_factor, cho_solve, LinAlgError

from pywls.core.exceptions import NotPositiveDefiniteError
from pywls.core.compute.precision import numerical_rank


def cholesky_solve(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b via A = L L'.

    Args:
        A: Symmetric positive definite matrix (p x p)
        b: Right-hand side (p,)

    Returns:
        Solution x (p,)

    Raises:
        NotPositiveDefiniteError: If the factorization breaks down or
            produces numerically zero pivots
    """
    p = A.shape[0]
    try:
        c, lower = cho_factor(A, lower=True, check_finite=False)
    except LinAlgError as e:
        min_eig = float(np.linalg.eigvalsh(A)[0])
        raise NotPositiveDefiniteError(
            f"Cholesky decomposition failed: X'WX is not positive definite "
            f"(min eigenvalue {min_eig:.3e}). Check for collinear features "
            f"or zero weights.",
            matrix_name="X'WX",
            min_eigenvalue=min_eig,
        ) from e

    pivots = np.abs(np.diag(c)) ** 2
    if numerical_rank(pivots, p) < p:
        raise NotPositiveDefiniteError(
            "Cholesky decomposition produced numerically zero pivots: "
            "X'WX is singular.",
            matrix_name="X'WX",
            min_eigenvalue=float(np.min(pivots)),
        )

    return cho_solve((c, lower), b, check_finite=False)
