"""
Regression solution types.

Contains the parameter payload computed by backends and the user-facing
solution wrapper that carries predictions and held-out metrics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pywls.core.result import Result
from pywls.core.exceptions import DimensionError
from pywls.core.validation import check_array, check_finite
from pywls.regression.metrics import RegressionMetrics
from pywls.regression.predict import transform

if TYPE_CHECKING:
    from pywls.regression.design import WeightedDesign
    from pywls.regression.options import RegressionOptions


def _read_only(array: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    array = np.array(array, dtype=np.float64, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class WeightedParams:
    """
    Parameter payload for weighted least squares.

    This is the immutable data computed by backends. With an intercept
    column the intercept term is coefficients[0] and intercept is 0.0.
    """
    coefficients: NDArray[np.floating[Any]]
    intercept: float
    fitted_values: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    weighted_rss: float
    rank: int
    condition_number: float


@dataclass(frozen=True)
class WeightedSolution:
    """
    User-facing regression results.

    Wraps the backend Result together with the held-out predictions and
    their metrics. Every array exposed here is read-only.
    """
    _result: Result[WeightedParams]
    _design: 'WeightedDesign'
    _options: 'RegressionOptions'
    _predictions: NDArray[np.floating[Any]]
    _held_out_outputs: NDArray[np.floating[Any]]
    _metrics: RegressionMetrics
    _n_features: int

    @classmethod
    def build(
        cls,
        result: Result[WeightedParams],
        design: 'WeightedDesign',
        options: 'RegressionOptions',
        predictions: NDArray[np.floating[Any]],
        held_out_outputs: NDArray[np.floating[Any]],
        metrics: RegressionMetrics,
        n_features: int,
    ) -> WeightedSolution:
        return cls(
            _result=result,
            _design=design,
            _options=options,
            _predictions=_read_only(predictions),
            _held_out_outputs=_read_only(held_out_outputs),
            _metrics=metrics,
            _n_features=n_features,
        )

    # === Fitted model ===

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return _read_only(self._result.params.coefficients)

    @property
    def intercept(self) -> float:
        """Separate intercept. Always 0.0; see coefficients[0] with use_intercept."""
        return self._result.params.intercept

    @property
    def use_intercept(self) -> bool:
        return self._design.use_intercept

    # === Held-out results ===

    @property
    def predictions(self) -> NDArray[np.floating[Any]]:
        return self._predictions

    @property
    def held_out_outputs(self) -> NDArray[np.floating[Any]]:
        """Held-out outputs the predictions are scored against (normalized if configured)."""
        return self._held_out_outputs

    @property
    def metrics(self) -> RegressionMetrics:
        return self._metrics

    # === Training diagnostics ===

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return _read_only(self._result.params.fitted_values)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return _read_only(self._result.params.residuals)

    @property
    def weighted_rss(self) -> float:
        return self._result.params.weighted_rss

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def condition_number(self) -> float:
        """Condition number of X'WX."""
        return self._result.params.condition_number

    @property
    def training_size(self) -> int:
        return self._design.n

    @property
    def held_out_size(self) -> int:
        return int(self._predictions.shape[0])

    @property
    def n_features(self) -> int:
        """Number of input features, intercept excluded."""
        return self._n_features

    @property
    def options(self) -> 'RegressionOptions':
        return self._options

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def provenance(self) -> dict[str, str]:
        return self._result.provenance

    def predict(self, inputs: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Apply the fitted model to new inputs.

        Inputs use the same layout as the fit. No normalization is
        applied, so pass values on the scale the model was trained on.

        Raises:
            DimensionError: If the number of features does not match
        """
        X = check_array(inputs, 'inputs')
        if X.ndim == 1:
            if self._n_features != 1:
                raise DimensionError(
                    f"inputs: 1D input is a single feature, model has {self._n_features}"
                )
            X = X.reshape(-1, 1)
        elif X.ndim == 2:
            if self._options.matrix_layout == 'columns':
                X = X.T
        else:
            raise DimensionError(
                f"inputs: expected 1D or 2D array, got {X.ndim}D with shape {X.shape}"
            )

        if X.shape[1] != self._n_features:
            raise DimensionError(
                f"inputs: expected {self._n_features} features, got {X.shape[1]}"
            )
        check_finite(X, 'inputs')

        return transform(
            X,
            self._result.params.coefficients,
            self.intercept,
            use_intercept=self.use_intercept,
        )

    def summary(self) -> str:
        """Generate a text report of the fit and its held-out metrics."""
        norm = self._options.normalization
        m = self._metrics
        n_total = self.training_size + self.held_out_size
        intercept_note = " (+ intercept)" if self.use_intercept else ""
        lines = [
            "Weighted Linear Regression Results",
            "=" * 60,
            f"Samples: {n_total} (training {self.training_size}, held-out {self.held_out_size})",
            f"Features: {self._n_features}{intercept_note}",
            f"Decomposition: {self._options.matrix_decomposition}",
            f"Normalization: {norm.name if norm is not None else 'none'}",
            f"Condition number (X'WX): {self.condition_number:.3e}",
            f"Weighted RSS (training): {self.weighted_rss:.6g}",
            "",
            "Coefficients:",
            "-" * 60,
        ]

        for i, coef in enumerate(self._result.params.coefficients):
            label = "(Intercept)" if self.use_intercept and i == 0 else f"β[{i}]"
            lines.append(f"  {label:<12} {coef:14.6f}")

        lines += [
            "-" * 60,
            "Held-out metrics:",
            f"  RMSE:        {m.rmse:.6g}",
            f"  MAE:         {m.mae:.6g}",
            f"  R-squared:   {m.r_squared:.6f}",
            f"  Adj. R-sq.:  {m.adjusted_r_squared:.6f}",
            "-" * 60,
            f"Backend: {self.backend_name}",
        ]
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"WeightedSolution(n_train={self.training_size}, "
            f"n_held_out={self.held_out_size}, p={self._design.p}, "
            f"method={self._options.matrix_decomposition!r}, "
            f"rmse={self._metrics.rmse:.4g})"
        )
