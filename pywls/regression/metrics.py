"""
Held-out error metrics.

compute_metrics() turns predictions and the actual held-out outputs into
a RegressionMetrics summary. It is called once per fit and knows nothing
about how the predictions were produced.
"""

from dataclasses import dataclass, asdict
from typing import Any
import numpy as np
from numpy.typing import ArrayLike

from pywls.core.validation import (
    check_array,
    check_1d,
    check_not_empty,
    check_consistent_length,
)


@dataclass(frozen=True)
class RegressionMetrics:
    """
    Summary statistics of held-out prediction errors.

    Residuals are actual - predicted.

    Attributes:
        n_predictions: Number of held-out samples
        n_total: Number of samples in the whole dataset
        n_params: Number of fitted coefficients
        degrees_of_freedom: n_total - n_params
        rss: Residual sum of squares
        mse: Mean squared error
        rmse: Root mean squared error
        mae: Mean absolute error
        mean_error: Mean residual (bias)
        r_squared: 1 - rss / tss over the held-out outputs
        adjusted_r_squared: R² penalized for n_params
        predictions_std: Population standard deviation of predictions
        actuals_std: Population standard deviation of actual outputs
    """
    n_predictions: int
    n_total: int
    n_params: int
    degrees_of_freedom: int
    rss: float
    mse: float
    rmse: float
    mae: float
    mean_error: float
    r_squared: float
    adjusted_r_squared: float
    predictions_std: float
    actuals_std: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def compute_metrics(
    predictions: ArrayLike,
    actuals: ArrayLike,
    n_total: int,
    *,
    n_params: int = 1,
) -> RegressionMetrics:
    """
    Compute held-out error metrics.

    Args:
        predictions: Predicted values (m,)
        actuals: Actual held-out outputs (m,)
        n_total: Total number of samples (training + held-out)
        n_params: Number of fitted coefficients, intercept included

    Returns:
        RegressionMetrics

    Raises:
        NullInputError: If there are no predictions
        DimensionError: If predictions and actuals differ in length
    """
    pred = check_array(predictions, 'predictions')
    act = check_array(actuals, 'actuals')
    check_1d(pred, 'predictions')
    check_1d(act, 'actuals')
    check_not_empty(pred, 'predictions')
    check_consistent_length(pred, act, names=('predictions', 'actuals'))

    m = pred.shape[0]
    residuals = act - pred
    rss = float(residuals @ residuals)
    tss = float(np.sum((act - np.mean(act)) ** 2))

    if tss == 0:
        r_squared = 1.0 if rss == 0 else 0.0
    else:
        r_squared = 1.0 - rss / tss

    if m - n_params <= 0 or tss == 0:
        adjusted = r_squared
    else:
        adjusted = 1.0 - (1.0 - r_squared) * (m - 1) / (m - n_params)

    mse = rss / m
    return RegressionMetrics(
        n_predictions=m,
        n_total=int(n_total),
        n_params=int(n_params),
        degrees_of_freedom=int(n_total) - int(n_params),
        rss=rss,
        mse=mse,
        rmse=float(np.sqrt(mse)),
        mae=float(np.mean(np.abs(residuals))),
        mean_error=float(np.mean(residuals)),
        r_squared=r_squared,
        adjusted_r_squared=adjusted,
        predictions_std=float(np.std(pred)),
        actuals_std=float(np.std(act)),
    )
