"""
Linear algebra kernels for pywls.

Each decomposition module exposes a ``*_solve(A, b)`` function with the
LinearSystemSolver signature. solve_system() dispatches on the
decomposition name, so new factorizations are added by registering them
in DECOMPOSITIONS without touching the fitting code.

All functions follow these conventions:
    - NumPy/SciPy (LAPACK under the hood), float64
    - Singular or indefinite systems raise a SolverError subclass
    - No fallback to a different decomposition on failure

Submodules:
    cholesky: Cholesky decomposition (default)
    lu: LU with partial pivoting
    qr: Householder QR
    svd: Singular value decomposition
    eigen: Symmetric eigendecomposition
    gram_schmidt: Modified Gram-Schmidt QR
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pywls.core.protocols import LinearSystemSolver
from pywls.core.compute.linalg.cholesky import cholesky_solve
from pywls.core.compute.linalg.lu import lu_solve
from pywls.core.compute.linalg.qr import QRResult, qr_factor, qr_solve
from pywls.core.compute.linalg.svd import svd_solve
from pywls.core.compute.linalg.eigen import eigen_solve
from pywls.core.compute.linalg.gram_schmidt import gram_schmidt, gram_schmidt_solve


DECOMPOSITIONS: dict[str, LinearSystemSolver] = {
    'cholesky': cholesky_solve,
    'lu': lu_solve,
    'qr': qr_solve,
    'svd': svd_solve,
    'eigen': eigen_solve,
    'gram_schmidt': gram_schmidt_solve,
}


def solve_system(
    A: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    method: str = 'cholesky',
) -> NDArray[np.floating[Any]]:
    """
    Solve the square system A x = b with the named decomposition.

    Args:
        A: System matrix (p x p)
        b: Right-hand side (p,)
        method: Key of DECOMPOSITIONS

    Returns:
        Solution vector (p,)

    Raises:
        ValueError: If method is not a registered decomposition
        SolverError: If the decomposition cannot solve the system
    """
    try:
        solver = DECOMPOSITIONS[method]
    except KeyError:
        raise ValueError(
            f"Unknown decomposition: {method!r}. "
            f"Available: {sorted(DECOMPOSITIONS)}"
        ) from None
    return solver(A, b)


__all__ = [
    "DECOMPOSITIONS",
    "solve_system",
    "cholesky_solve",
    "lu_solve",
    "QRResult",
    "qr_factor",
    "qr_solve",
    "svd_solve",
    "eigen_solve",
    "gram_schmidt",
    "gram_schmidt_solve",
]
