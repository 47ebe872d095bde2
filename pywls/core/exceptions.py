"""
Exception hierarchy for pywls.

All exceptions inherit from PyWLSError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyWLSError(Exception):
    """Base exception for all pywls errors."""
    pass


class ValidationError(PyWLSError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class NullInputError(ValidationError):
    """
    A required input is missing, empty, or contains missing entries.

    Attributes:
        parameter: Name of the offending parameter
    """

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent sample counts.
    """
    pass


class InvalidWeightsError(ValidationError):
    """
    Sample weights are unusable.

    Raised when weights are negative, non-finite, or their length
    does not match the number of samples.

    Attributes:
        n_weights: Number of weights supplied
        n_samples: Number of samples expected
        bad_indices: Indices of offending weights, if applicable
    """

    def __init__(
        self,
        message: str,
        n_weights: int | None = None,
        n_samples: int | None = None,
        bad_indices: tuple[int, ...] = (),
    ):
        super().__init__(message)
        self.n_weights = n_weights
        self.n_samples = n_samples
        self.bad_indices = bad_indices


class InvalidTrainingSizeError(ValidationError):
    """
    Training / held-out partition sizes violate the minimum-sample rule.

    Attributes:
        training_percentage: Requested training percentage
        training_size: Resolved number of training samples
        held_out_size: Resolved number of held-out samples
        min_training_size: Minimum training samples required
    """

    def __init__(
        self,
        message: str,
        training_percentage: float | None = None,
        training_size: int | None = None,
        held_out_size: int | None = None,
        min_training_size: int | None = None,
    ):
        super().__init__(message)
        self.training_percentage = training_percentage
        self.training_size = training_size
        self.held_out_size = held_out_size
        self.min_training_size = min_training_size


class NumericalError(PyWLSError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class NormalizationOverflowError(NumericalError):
    """
    No power-of-ten scaling exponent could be found for an array.

    Raised when the array holds NaN/Inf or its largest absolute value
    is at least 10**99.

    Attributes:
        max_abs: Largest absolute value found in the array
        max_exponent: Largest exponent that was tried
    """

    def __init__(
        self,
        message: str,
        max_abs: float | None = None,
        max_exponent: int | None = None,
    ):
        super().__init__(message)
        self.max_abs = max_abs
        self.max_exponent = max_exponent


class SolverError(NumericalError):
    """
    The chosen decomposition could not solve the normal equations.

    Attributes:
        method: Decomposition that failed
    """

    def __init__(self, message: str, method: str | None = None):
        super().__init__(message)
        self.method = method


class SingularMatrixError(SolverError):
    """
    Matrix is singular or nearly singular.

    Raised when a matrix operation requires invertibility but the matrix
    is singular or numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically p)
        method: Decomposition that detected the singularity
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
        method: str | None = None,
    ):
        super().__init__(message, method=method)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class NotPositiveDefiniteError(SolverError):
    """
    Matrix is not positive definite.

    Raised when Cholesky decomposition is requested but X'WX fails
    this requirement (e.g. collinear features or zero weights).

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Minimum eigenvalue, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None,
        method: str | None = 'cholesky',
    ):
        super().__init__(message, method=method)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue
