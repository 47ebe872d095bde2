"""
Singular value decomposition solver.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pywls.core.exceptions import SingularMatrixError
from pywls.core.compute.precision import numerical_rank


def svd_solve(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b via A = U S V', x = V S⁻¹ U'b.

    A rank-deficient A is refused rather than solved in the minimum-norm
    sense, so every decomposition fails on the same systems.

    Raises:
        SingularMatrixError: If any singular value is numerically zero
    """
    p = A.shape[1]
    U, s, Vt = np.linalg.svd(A, full_matrices=False)
    rank = numerical_rank(s, max(A.shape))
    if rank < p:
        cond = float(s[0] / s[-1]) if s[-1] > 0 else np.inf
        raise SingularMatrixError(
            f"SVD found a singular X'WX: rank={rank}, expected={p}.",
            matrix_name="X'WX",
            condition_number=cond,
            rank=rank,
            expected_rank=p,
            method='svd',
        )
    return Vt.T @ ((U.T @ b) / s)
