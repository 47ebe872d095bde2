"""
Core protocols for pywls.

These define structural interfaces that pluggable pieces must satisfy.
We use Protocol (structural typing) rather than ABC (nominal typing) so
third-party solvers and backends plug in without subclassing.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Stateless: implementations hold no per-call state
    - Type-safe: use generics to preserve type information through pipelines
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

import numpy as np
from numpy.typing import NDArray

P = TypeVar('P')  # Parameter payload type
D = TypeVar('D', contravariant=True)  # Design type


@runtime_checkable
class LinearSystemSolver(Protocol):
    """
    Solves a square linear system A x = b through one decomposition.

    Every decomposition in pywls.core.compute.linalg satisfies this shape,
    which lets the fitting algorithm stay ignorant of the factorization.
    Implementations must be stateless and reentrant.
    """

    def __call__(
        self,
        A: NDArray[np.floating[Any]],
        b: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        """
        Args:
            A: Square system matrix (p x p)
            b: Right-hand side (p,)

        Returns:
            Solution vector x (p,)

        Raises:
            SolverError: If the system cannot be solved by this decomposition
        """
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Each backend takes a training design and produces a parameter payload.
    The backend handles all hardware-specific computation (CPU/GPU,
    precision).

    Backends are stateless: configuration is passed at construction
    time or as arguments to solve().

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}' or '{device}_{precision}'; the Result
        backend_name appends the decomposition.
        Examples: 'cpu', 'gpu_fp32', 'gpu_fp64'
        """
        ...

    def solve(self, design: D, method: str) -> 'Result[P]':
        """
        Execute the computation.

        Args:
            design: Training design
            method: Decomposition name

        Returns:
            Result envelope containing parameter payload and metadata

        Raises:
            SolverError: If the normal equations cannot be solved
        """
        ...
