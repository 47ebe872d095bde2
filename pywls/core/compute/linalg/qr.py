"""
QR decomposition solver.

Factors the square normal-equation matrix as A = QR and back-substitutes
R x = Q'b. Shares the rank determination from the R diagonal with the
Gram-Schmidt solver.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pywls.core.exceptions import SingularMatrixError
from pywls.core.compute.precision import numerical_rank


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthogonal matrix (n x k, k = min(n, p))
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int


def qr_factor(A: NDArray[np.floating[Any]]) -> QRResult:
    """
    Reduced QR decomposition using LAPACK (via NumPy).

    Args:
        A: Matrix to decompose (n x p)

    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(A, mode='reduced')
    rank = numerical_rank(np.abs(np.diag(R)), max(A.shape))
    return QRResult(Q=Q, R=R, rank=rank)


def check_qr_rank(qr_result: QRResult, p: int, method: str) -> None:
    """Raise SingularMatrixError if a QR-type factorization lost rank."""
    if qr_result.rank < p:
        raise SingularMatrixError(
            f"{method} decomposition found a singular X'WX: "
            f"rank={qr_result.rank}, expected={p}.",
            matrix_name="X'WX",
            rank=qr_result.rank,
            expected_rank=p,
            method=method,
        )


def qr_solve(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A x = b via A = QR, x = R⁻¹ Q'b.

    Raises:
        SingularMatrixError: If A is numerically rank-deficient
    """
    p = A.shape[1]
    qr_result = qr_factor(A)
    check_qr_rank(qr_result, p, 'qr')

    Qtb = qr_result.Q.T @ b
    return solve_triangular(qr_result.R[:p, :p], Qtb[:p], lower=False)
