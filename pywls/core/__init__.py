"""
Core infrastructure for pywls.

Shared abstractions and utilities used by the normalization and
regression subpackages.

Key components:
    protocols: LinearSystemSolver, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    datasource: Named-array container (arrays, DataFrames, files)
    compute: Hardware detection, timing, linear algebra kernels
"""

from pywls.core.protocols import LinearSystemSolver, Backend
from pywls.core.result import Result
from pywls.core.exceptions import (
    PyWLSError,
    ValidationError,
    NullInputError,
    DimensionError,
    InvalidWeightsError,
    InvalidTrainingSizeError,
    NumericalError,
    NormalizationOverflowError,
    SolverError,
    SingularMatrixError,
    NotPositiveDefiniteError,
)
from pywls.core.datasource import DataSource

__all__ = [
    # Protocols
    "LinearSystemSolver",
    "Backend",
    # Result
    "Result",
    # Data
    "DataSource",
    # Exceptions
    "PyWLSError",
    "ValidationError",
    "NullInputError",
    "DimensionError",
    "InvalidWeightsError",
    "InvalidTrainingSizeError",
    "NumericalError",
    "NormalizationOverflowError",
    "SolverError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
]
