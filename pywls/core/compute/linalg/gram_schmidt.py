"""
Modified Gram-Schmidt orthogonalization solver.

LAPACK has no Gram-Schmidt routine, so the factorization is written out
column by column. The modified variant re-orthogonalizes against the
updated columns, which keeps Q far closer to orthogonal than the
classical one.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pywls.core.compute.linalg.qr import QRResult, check_qr_rank
from pywls.core.compute.precision import rank_tolerance


def gram_schmidt(A: NDArray[np.floating[Any]]) -> QRResult:
    """
    Factor A = QR with modified Gram-Schmidt.

    Columns whose residual norm falls below the rank tolerance are left
    as zero columns of Q and do not count toward the rank.

    Args:
        A: Matrix to decompose (n x p), n >= p

    Returns:
        QRResult with Q (n x p), R (p x p) and numerical rank
    """
    n, p = A.shape
    V = np.array(A, dtype=np.float64, copy=True)
    Q = np.zeros((n, p), dtype=np.float64)
    R = np.zeros((p, p), dtype=np.float64)

    tol = rank_tolerance(np.linalg.norm(V, axis=0), max(n, p))
    rank = 0

    for j in range(p):
        R[j, j] = np.linalg.norm(V[:, j])
        if R[j, j] <= tol:
            R[j, j] = 0.0
            continue
        rank += 1
        Q[:, j] = V[:, j] / R[j, j]
        for k in range(j + 1, p):
            R[j, k] = Q[:, j] @ V[:, k]
            V[:, k] -= R[j, k] * Q[:, j]

    return QRResult(Q=Q, R=R, rank=rank)


def gram_schmidt_solve(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b via Gram-Schmidt QR.

    Raises:
        SingularMatrixError: If A is numerically rank-deficient
    """
    p = A.shape[1]
    qr_result = gram_schmidt(A)
    check_qr_rank(qr_result, p, 'gram_schmidt')
    return solve_triangular(qr_result.R, qr_result.Q.T @ b, lower=False)
