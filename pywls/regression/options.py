"""
Regression options.

RegressionOptions collects everything a caller can configure for a fit.
resolve_options() is the single place where options are validated and
keyword overrides are merged in.
"""

from __future__ import annotations

import dataclasses
import warnings
from dataclasses import dataclass
from typing import Any, Literal, get_args

from pywls.core.exceptions import ValidationError
from pywls.core.validation import check_training_percentage
from pywls.normalization.base import Normalization


MatrixLayout = Literal['columns', 'rows']
MatrixDecomposition = Literal['cholesky', 'lu', 'qr', 'svd', 'eigen', 'gram_schmidt']

MATRIX_LAYOUTS: tuple[str, ...] = get_args(MatrixLayout)
MATRIX_DECOMPOSITIONS: tuple[str, ...] = get_args(MatrixDecomposition)
DEFAULT_DECOMPOSITION: MatrixDecomposition = 'cholesky'


@dataclass(frozen=True)
class RegressionOptions:
    """
    Configuration for a weighted regression fit.

    Attributes:
        training_percentage: Share of samples, in (0, 100], used for
            fitting. The rest are held out for prediction. The default
            of 100 leaves nothing to predict and is rejected by fit(),
            so callers always pick a value below 100.
        normalization: Strategy applied to each partition, or None
        matrix_layout: 'columns' if each inner sequence of inputs is one
            feature vector, 'rows' if each inner sequence is one sample
        matrix_decomposition: Decomposition used on X'WX
        use_intercept: Add a constant column of ones. The intercept is
            then coefficients[0] and the separate intercept stays 0.
    """
    training_percentage: float = 100.0
    normalization: Normalization | None = None
    matrix_layout: MatrixLayout = 'columns'
    matrix_decomposition: MatrixDecomposition = DEFAULT_DECOMPOSITION
    use_intercept: bool = False


def resolve_options(
    options: RegressionOptions | None = None,
    **overrides: Any,
) -> RegressionOptions:
    """
    Validate options and merge keyword overrides.

    An unrecognized matrix_decomposition falls back to Cholesky with a
    UserWarning. Every other invalid value raises.

    Args:
        options: Base options, or None for defaults
        **overrides: Field values replacing those in options

    Returns:
        Validated RegressionOptions

    Raises:
        ValidationError: Unknown option names, bad layout or normalization
        InvalidTrainingSizeError: training_percentage outside (0, 100]
    """
    if options is None:
        options = RegressionOptions()
    elif not isinstance(options, RegressionOptions):
        raise ValidationError(
            f"options: expected RegressionOptions, got {type(options).__name__}"
        )

    if overrides:
        known = {f.name for f in dataclasses.fields(RegressionOptions)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValidationError(
                f"Unknown regression option(s): {unknown}. Available: {sorted(known)}"
            )
        options = dataclasses.replace(options, **overrides)

    check_training_percentage(options.training_percentage)

    if options.matrix_layout not in MATRIX_LAYOUTS:
        raise ValidationError(
            f"matrix_layout: must be one of {MATRIX_LAYOUTS}, got {options.matrix_layout!r}"
        )

    if options.normalization is not None and not isinstance(options.normalization, Normalization):
        raise ValidationError(
            f"normalization: expected a Normalization instance or None, "
            f"got {type(options.normalization).__name__}"
        )

    if options.matrix_decomposition not in MATRIX_DECOMPOSITIONS:
        warnings.warn(
            f"Unknown matrix_decomposition {options.matrix_decomposition!r}, "
            f"using {DEFAULT_DECOMPOSITION!r}. Available: {MATRIX_DECOMPOSITIONS}",
            UserWarning,
            stacklevel=3,
        )
        options = dataclasses.replace(options, matrix_decomposition=DEFAULT_DECOMPOSITION)

    return options
