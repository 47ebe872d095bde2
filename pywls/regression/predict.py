"""
Prediction from fitted coefficients.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pywls.regression.design import build_design_matrix


def transform(
    X: NDArray[np.floating[Any]],
    coefficients: NDArray[np.floating[Any]],
    intercept: float = 0.0,
    *,
    use_intercept: bool = False,
) -> NDArray[np.floating[Any]]:
    """
    Predict one value per sample.

    ŷ_j = intercept + Σ_i coefficients[i] * x_ji, where i runs over the
    features and, with use_intercept, the constant-one column that the
    fitted coefficients[0] belongs to.

    Args:
        X: Samples (m x p) or (m,) for a single feature, no intercept column
        coefficients: Fitted coefficients (p,) or (p + 1,) with intercept
        intercept: Separate scalar offset
        use_intercept: Whether coefficients[0] is the intercept term

    Returns:
        Predictions (m,), in sample order
    """
    design_matrix = build_design_matrix(X, use_intercept)
    return intercept + design_matrix @ coefficients
