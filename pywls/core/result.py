"""
Generic result container for all pywls computations.

The Result class provides a standardized envelope that backends return.
This enables shared tooling for timing, reproducibility, and diagnostics
while allowing each backend to define its own parameter payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, rank, condition number)
    - timing is optional (don't burden unit tests)
    - provenance records library versions for reproducibility
    - Immutable (frozen=True) for reproducibility
"""

import platform
from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Library and interpreter versions at the time of computation."""
    import numpy as np
    import scipy
    from pywls import __version__

    return {
        'pywls_version': __version__,
        'numpy_version': np.__version__,
        'scipy_version': scipy.__version__,
        'python_version': platform.python_version(),
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for regression computations.

    Type Parameters:
        P: The backend-specific parameter payload type

    Attributes:
        params: Parameter payload (coefficients, diagnostics, etc.)
        info: Structured metadata (method, rank, condition number)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Version metadata, generated automatically if omitted

    Examples:
        >>> Result(
        ...     params=WeightedParams(...),
        ...     info={'method': 'cholesky', 'rank': 3},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_cholesky'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
