"""
Solver dispatch for weighted regression.

This module provides the fit() function (public API) and backend selection.
"""

from __future__ import annotations

import math
from typing import Any, Literal
from numpy.typing import ArrayLike

from pywls.core.compute.device import select_device
from pywls.core.validation import check_finite, check_training_sizes
from pywls.normalization.base import Normalization
from pywls.normalization.split import SplitData, split_data
from pywls.regression.design import RegressionData, WeightedDesign
from pywls.regression.metrics import compute_metrics
from pywls.regression.options import RegressionOptions, resolve_options
from pywls.regression.predict import transform
from pywls.regression.solution import WeightedSolution
from pywls.regression.backends.cpu import CPUNormalEquationsBackend


BackendChoice = Literal['auto', 'cpu', 'gpu', 'gpu_fp64']


def fit(
    inputs: ArrayLike | RegressionData,
    outputs: ArrayLike | None = None,
    weights: ArrayLike | None = None,
    options: RegressionOptions | None = None,
    *,
    backend: BackendChoice = 'cpu',
    force: bool = False,
    **option_overrides: Any,
) -> WeightedSolution:
    """
    Fit a weighted linear regression and score it on held-out samples.

    Solves the weighted least squares problem on the leading
    training_percentage of the samples:
        min_β Σ_j w_j (y_j - x_j·β)²
    through the normal equations X'WX β = X'Wy, then predicts the
    trailing held-out samples and computes error metrics on them.

    This is the primary public API. All input validation, splitting,
    normalization, backend selection and result wrapping happens here.
    The call either returns a complete solution or raises; no partial
    model is ever produced.

    Args:
        inputs: Feature data (see RegressionData.from_arrays for layouts),
            or a prebuilt RegressionData (outputs and weights then None).
        outputs: One target per sample.
        weights: One non-negative weight per sample; None for unit weights.
        options: RegressionOptions, or None for defaults.
        backend: Computational backend to use:
            - 'cpu': float64 NumPy/SciPy (default, reference)
            - 'gpu': PyTorch FP32 on CUDA/MPS
            - 'gpu_fp64': PyTorch FP64 on CUDA
            - 'auto': GPU (FP32) if available, else CPU
        force: GPU only; proceed on an ill-conditioned X'WX in FP32.
        **option_overrides: RegressionOptions fields, e.g.
            training_percentage=80, use_intercept=True.

    Returns:
        WeightedSolution with coefficients, predictions and metrics

    Raises:
        NullInputError: Missing or empty inputs / outputs / weights
        DimensionError: Inconsistent sample counts or ragged inputs
        InvalidWeightsError: Negative, non-finite or wrong-length weights
        InvalidTrainingSizeError: Too few training or held-out samples
        NormalizationOverflowError: Normalization found no scale, e.g. for
            NaN / Inf values when normalization is configured
        ValidationError: Non-finite inputs / outputs without normalization
        SolverError: The decomposition could not solve X'WX β = X'Wy

    Example:
        >>> import numpy as np
        >>> from pywls.regression import fit
        >>>
        >>> x = np.arange(1.0, 11.0)
        >>> result = fit(x, x, np.ones(10), training_percentage=80)
        >>> np.allclose(result.predictions, [9.0, 10.0])
        True
    """
    opts = resolve_options(options, **option_overrides)

    # === Input Validation ===
    # This is the boundary - validate here, trust everywhere else
    if isinstance(inputs, RegressionData):
        if outputs is not None or weights is not None:
            raise ValueError(
                "outputs and weights must be None when inputs is a RegressionData"
            )
        data = inputs
    else:
        # a normalization strategy reports NaN / Inf itself
        data = RegressionData.from_arrays(
            inputs,
            outputs,
            weights,
            layout=opts.matrix_layout,
            require_finite=opts.normalization is None,
        )

    training_size = partition_size(data.n, data.p, opts.training_percentage)
    backend_impl = _get_backend(backend)

    # === Split / Normalize ===
    X_train, y_train, X_held_out, y_held_out = prepare_data(
        data, training_size, opts.normalization
    )

    # === Fit ===
    design = WeightedDesign.build(
        X_train,
        y_train,
        data.weights[:training_size],
        use_intercept=opts.use_intercept,
    )
    if backend_impl.name.startswith('gpu'):
        result = backend_impl.solve(design, opts.matrix_decomposition, force=force)
    else:
        result = backend_impl.solve(design, opts.matrix_decomposition)

    # === Transform / Metrics ===
    params = result.params
    predictions = transform(
        X_held_out,
        params.coefficients,
        params.intercept,
        use_intercept=opts.use_intercept,
    )
    metrics = compute_metrics(
        predictions, y_held_out, data.n, n_params=len(params.coefficients)
    )

    return WeightedSolution.build(
        result=result,
        design=design,
        options=opts,
        predictions=predictions,
        held_out_outputs=y_held_out,
        metrics=metrics,
        n_features=data.p,
    )


def partition_size(n_samples: int, n_features: int, training_percentage: float) -> int:
    """
    Number of training samples for a percentage split.

    training_size = floor(n_samples * training_percentage / 100); it must
    be at least max(2, n_features) and leave at least one held-out sample.

    Raises:
        InvalidTrainingSizeError: If either partition is too small
    """
    training_size = math.floor(n_samples * training_percentage / 100)
    check_training_sizes(
        training_size,
        n_samples - training_size,
        max(2, n_features),
        training_percentage,
    )
    return training_size


def prepare_data(
    data: RegressionData,
    training_size: int,
    normalization: Normalization | None,
) -> SplitData:
    """
    Split into training and held-out parts, normalizing if configured.

    Returns:
        (X_train, y_train, X_held_out, y_held_out)
    """
    if normalization is None:
        return split_data(data.X, data.y, training_size)

    parts = normalization.prepare_data(data.X, data.y, training_size)
    names = ('X_train', 'y_train', 'X_held_out', 'y_held_out')
    for part, name in zip(parts, names):
        check_finite(part, f'{normalization.name}({name})')
    return parts


def _get_backend(choice: BackendChoice):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
        RuntimeError: If GPU requested but unavailable
    """
    if choice == 'cpu':
        return CPUNormalEquationsBackend()

    if choice == 'auto':
        device = select_device('auto')
        if device.is_gpu:
            from pywls.regression.backends.gpu import GPUNormalEquationsBackend
            return GPUNormalEquationsBackend(device=device.torch_device)
        return CPUNormalEquationsBackend()

    if choice in ('gpu', 'gpu_fp64'):
        device = select_device('gpu')
        from pywls.regression.backends.gpu import GPUNormalEquationsBackend
        return GPUNormalEquationsBackend(
            use_fp64=choice == 'gpu_fp64', device=device.torch_device
        )

    raise ValueError(f"Unknown backend: {choice!r}")
