"""
LU decomposition solver (partial pivoting, LAPACK getrf/getrs).
"""

import warnings
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import lu_factor, lu_solve as _lu_solve, LinAlgWarning

from pywls.core.exceptions import SingularMatrixError
from pywls.core.compute.precision import numerical_rank


def lu_solve(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b via P A = L U.

    Raises:
        SingularMatrixError: If U has numerically zero pivots
    """
    p = A.shape[0]
    with warnings.catch_warnings():
        # singularity is reported through the pivot check below
        warnings.simplefilter('ignore', LinAlgWarning)
        lu, piv = lu_factor(A, check_finite=False)

    pivots = np.abs(np.diag(lu))
    rank = numerical_rank(pivots, p)
    if rank < p:
        raise SingularMatrixError(
            f"LU decomposition found a singular X'WX: rank={rank}, expected={p}.",
            matrix_name="X'WX",
            rank=rank,
            expected_rank=p,
            method='lu',
        )

    return _lu_solve((lu, piv), b, check_finite=False)
