"""
Weighted linear regression.

Fits weighted ordinary least squares on a leading training partition,
predicts the trailing held-out partition and scores the predictions.

Public API:
    fit(inputs, outputs, weights, options) -> WeightedSolution

The fit() function is the only entry point. It handles:
    - Input validation
    - Train / held-out split and optional normalization
    - Backend and decomposition selection
    - Prediction, metrics and result wrapping

Example:
    >>> from pywls.regression import fit, RegressionOptions
    >>> opts = RegressionOptions(training_percentage=80, use_intercept=True)
    >>> result = fit(X, y, w, opts)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pywls.regression.design import RegressionData, WeightedDesign
from pywls.regression.metrics import RegressionMetrics, compute_metrics
from pywls.regression.options import RegressionOptions
from pywls.regression.predict import transform
from pywls.regression.solution import WeightedSolution, WeightedParams
from pywls.regression.solvers import fit

__all__ = [
    "fit",
    "transform",
    "compute_metrics",
    "RegressionData",
    "RegressionOptions",
    "RegressionMetrics",
    "WeightedDesign",
    "WeightedSolution",
    "WeightedParams",
]
