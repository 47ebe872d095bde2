"""
Regression data and design.

RegressionData is the validated raw dataset: the inputs turned into a
canonical (n x p) matrix whatever layout the caller used, the outputs
and one weight per sample. WeightedDesign is what a backend fits: the
training partition with the optional intercept column in place.

Validation happens once, in RegressionData._build(). Everything
downstream trusts the arrays it receives.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pywls.core.datasource import DataSource
from pywls.core.exceptions import DimensionError, ValidationError
from pywls.core.validation import (
    check_array,
    check_not_null,
    check_not_empty,
    check_finite,
    check_1d,
    check_consistent_length,
    check_weights,
)
from pywls.regression.options import MATRIX_LAYOUTS, MatrixLayout


@dataclass(frozen=True)
class RegressionData:
    """
    Validated inputs, outputs and weights.

    Construction:
        RegressionData.from_arrays(inputs, outputs, weights)                  # column arrays
        RegressionData.from_arrays(inputs, outputs, weights, layout='rows')   # row arrays
        RegressionData.from_datasource(ds, x=['a', 'b'], y='c', weights='w')
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _weights: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _source: DataSource | None = None

    @classmethod
    def from_arrays(
        cls,
        inputs: ArrayLike,
        outputs: ArrayLike,
        weights: ArrayLike | None = None,
        *,
        layout: MatrixLayout = 'columns',
        require_finite: bool = True,
    ) -> RegressionData:
        """
        Build from raw arrays.

        Args:
            inputs: 1D array (a single feature) or 2D array. With
                layout='columns' each inner sequence is one feature vector
                holding a value per sample; with layout='rows' each inner
                sequence is one sample holding a value per feature.
            outputs: One target value per sample
            weights: One non-negative weight per sample. None means
                unit weights, i.e. ordinary least squares.
            layout: 'columns' or 'rows'
            require_finite: Reject NaN / Inf in inputs and outputs. Turned
                off when a normalization strategy screens the values instead.

        Raises:
            NullInputError: Missing or empty inputs / outputs / weights
            DimensionError: Ragged inputs or sample count mismatch
            InvalidWeightsError: Bad weight length or values
            ValidationError: Non-numeric inputs / outputs, or non-finite
                ones when require_finite is set
        """
        if layout not in MATRIX_LAYOUTS:
            raise ValidationError(
                f"layout: must be one of {MATRIX_LAYOUTS}, got {layout!r}"
            )

        check_not_null(inputs, 'inputs')
        check_not_null(outputs, 'outputs')
        if weights is not None:
            check_not_null(weights, 'weights')

        X = check_array(inputs, 'inputs')
        check_not_empty(X, 'inputs')
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        elif X.ndim == 2:
            if layout == 'columns':
                X = X.T
        else:
            raise DimensionError(
                f"inputs: expected 1D or 2D array, got {X.ndim}D with shape {X.shape}"
            )

        y = check_array(outputs, 'outputs')
        w = None if weights is None else check_array(weights, 'weights')

        return cls._build(X, y, w, source=None, require_finite=require_finite)

    @classmethod
    def from_datasource(
        cls,
        source: DataSource,
        *,
        x: str | list[str],
        y: str,
        weights: str | None = None,
    ) -> RegressionData:
        """
        Build from named columns of a DataSource.

        Args:
            source: The DataSource
            x: Feature column name(s)
            y: Output column name
            weights: Weight column name, or None for unit weights
        """
        names = [x] if isinstance(x, str) else list(x)
        if not names:
            raise ValidationError("x: at least one feature column required")

        columns = []
        for name in names:
            col = check_array(source[name], name)
            check_1d(col, name)
            columns.append(col)
        X = np.column_stack(columns)

        y_arr = check_array(source[y], y)
        w = None if weights is None else check_array(source[weights], weights)

        return cls._build(X, y_arr, w, source=source)

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        weights: NDArray | None,
        source: DataSource | None,
        require_finite: bool = True,
    ) -> RegressionData:
        """Internal builder with validation. X is already (n x p)."""
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()
        check_1d(y, 'outputs')
        check_not_empty(y, 'outputs')

        check_consistent_length(X, y, names=('inputs', 'outputs'))
        if require_finite:
            check_finite(X, 'inputs')
            check_finite(y, 'outputs')

        n, p = X.shape
        if weights is None:
            weights = np.ones(n, dtype=np.float64)
        else:
            check_weights(weights, n, 'weights')

        return cls(_X=X, _y=y, _weights=weights, _n=n, _p=p, _source=source)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Feature matrix (n x p), samples along rows."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Outputs (n,)."""
        return self._y

    @property
    def weights(self) -> NDArray[np.floating[Any]]:
        """Sample weights (n,)."""
        return self._weights

    @property
    def n(self) -> int:
        """Number of samples."""
        return self._n

    @property
    def p(self) -> int:
        """Number of features (no intercept)."""
        return self._p

    @property
    def source(self) -> DataSource | None:
        """Original DataSource, if available."""
        return self._source


def build_design_matrix(
    X: NDArray[np.floating[Any]],
    use_intercept: bool,
) -> NDArray[np.floating[Any]]:
    """Prepend a column of ones to X when use_intercept is set."""
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if not use_intercept:
        return X
    return np.column_stack([np.ones(X.shape[0], dtype=np.float64), X])


@dataclass(frozen=True)
class WeightedDesign:
    """
    Training design for weighted least squares.

    Holds the design matrix X (intercept column included when enabled),
    the training outputs y and the training weights w. Immutable after
    construction.
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _weights: NDArray[np.floating[Any]]
    _use_intercept: bool

    @classmethod
    def build(
        cls,
        X: NDArray[np.floating[Any]],
        y: NDArray[np.floating[Any]],
        weights: NDArray[np.floating[Any]],
        *,
        use_intercept: bool = False,
    ) -> WeightedDesign:
        """Build from already validated training arrays."""
        design_matrix = build_design_matrix(X, use_intercept)
        check_consistent_length(
            design_matrix, y, weights, names=('X_train', 'y_train', 'weights_train')
        )
        return cls(
            _X=design_matrix,
            _y=np.asarray(y, dtype=np.float64),
            _weights=np.asarray(weights, dtype=np.float64),
            _use_intercept=use_intercept,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Training outputs (n,)."""
        return self._y

    @property
    def weights(self) -> NDArray[np.floating[Any]]:
        """Training weights (n,)."""
        return self._weights

    @property
    def n(self) -> int:
        """Number of training samples."""
        return self._X.shape[0]

    @property
    def p(self) -> int:
        """Number of columns, intercept included."""
        return self._X.shape[1]

    @property
    def use_intercept(self) -> bool:
        return self._use_intercept

    def XtWX(self) -> NDArray[np.floating[Any]]:
        """Compute X'WX without forming diag(w)."""
        return self._X.T @ (self._weights[:, None] * self._X)

    def XtWy(self) -> NDArray[np.floating[Any]]:
        """Compute X'Wy."""
        return self._X.T @ (self._weights * self._y)
