"""
Symmetric eigendecomposition solver.

X'WX is symmetric, so eigh (LAPACK syevd) applies and returns real
eigenvalues with orthonormal eigenvectors.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pywls.core.exceptions import SingularMatrixError
from pywls.core.compute.precision import numerical_rank


def eigen_solve(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b via A = V Λ V', x = V Λ⁻¹ V'b.

    Only the lower triangle of A is read.

    Raises:
        SingularMatrixError: If any eigenvalue is numerically zero
    """
    p = A.shape[0]
    eigvals, V = np.linalg.eigh(A)
    magnitudes = np.abs(eigvals)
    rank = numerical_rank(magnitudes, p)
    if rank < p:
        smallest = float(np.min(magnitudes))
        cond = float(np.max(magnitudes) / smallest) if smallest > 0 else np.inf
        raise SingularMatrixError(
            f"Eigendecomposition found a singular X'WX: rank={rank}, expected={p}.",
            matrix_name="X'WX",
            condition_number=cond,
            rank=rank,
            expected_rank=p,
            method='eigen',
        )
    return V @ ((V.T @ b) / eigvals)
