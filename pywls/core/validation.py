"""
Input validation utilities for pywls.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pywls.core.exceptions import (
    ValidationError,
    DimensionError,
    NullInputError,
    InvalidWeightsError,
    InvalidTrainingSizeError,
)


def _contains_none(obj: Any) -> bool:
    """Recursively look for None entries in nested sequences."""
    if obj is None:
        return True
    if isinstance(obj, np.ndarray):
        if obj.dtype != object:
            return False
        return any(_contains_none(v) for v in obj.ravel())
    if isinstance(obj, (list, tuple)):
        return any(_contains_none(v) for v in obj)
    return False


def _is_ragged(obj: Any) -> bool:
    """True if a list/tuple of sequences has rows of differing lengths."""
    if not isinstance(obj, (list, tuple)) or not obj:
        return False
    lengths = set()
    for row in obj:
        if isinstance(row, (list, tuple, np.ndarray)):
            lengths.add(len(row))
        else:
            lengths.add(None)
    return len(lengths) > 1


def check_not_null(array: Any, name: str) -> None:
    """
    Verify an input is present and holds no missing (None) entries.

    Args:
        array: Input to check (array-like, possibly nested)
        name: Parameter name for error messages

    Raises:
        NullInputError: If the input is None or contains None entries
    """
    if array is None:
        raise NullInputError(f"{name}: required but got None", parameter=name)
    if _contains_none(array):
        raise NullInputError(f"{name}: contains None entries", parameter=name)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data)
    and ragged nested sequences.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        DimensionError: If nested sequences have inconsistent lengths
        ValidationError: If input cannot be converted to numeric array
    """
    if _is_ragged(array):
        lengths = [len(row) if hasattr(row, '__len__') else 1 for row in array]
        raise DimensionError(
            f"{name}: inner sequences have inconsistent lengths {lengths}"
        )

    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    if result.dtype != np.float64:
        result = result.astype(np.float64)

    return result


def check_not_empty(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array holds at least one value.

    Raises:
        NullInputError: If array is empty
    """
    if array.size == 0:
        raise NullInputError(
            f"{name}: empty array with shape {array.shape}", parameter=name
        )


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Args:
        *arrays: Arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_weights(
    weights: NDArray[np.floating[Any]],
    n_samples: int,
    name: str = 'weights',
) -> None:
    """
    Verify sample weights are usable for weighted least squares.

    Weights must be 1D, one per sample, finite and non-negative.

    Args:
        weights: Weight array
        n_samples: Number of samples the weights must cover
        name: Parameter name for error messages

    Raises:
        InvalidWeightsError: If weights have the wrong shape or length,
            or contain negative / non-finite values
    """
    if weights.ndim != 1:
        raise InvalidWeightsError(
            f"{name}: expected 1D array, got {weights.ndim}D with shape {weights.shape}",
            n_samples=n_samples,
        )

    if weights.shape[0] != n_samples:
        raise InvalidWeightsError(
            f"{name}: length {weights.shape[0]} does not match number of samples {n_samples}",
            n_weights=weights.shape[0],
            n_samples=n_samples,
        )

    bad = np.flatnonzero(~np.isfinite(weights) | (weights < 0))
    if bad.size > 0:
        shown = bad[:10].tolist()
        raise InvalidWeightsError(
            f"{name}: weights must be finite and non-negative; "
            f"{bad.size} invalid value(s) at indices {shown}",
            n_weights=weights.shape[0],
            n_samples=n_samples,
            bad_indices=tuple(int(i) for i in bad),
        )


def check_training_percentage(training_percentage: float) -> None:
    """
    Verify the training percentage lies in (0, 100].

    Raises:
        InvalidTrainingSizeError: If percentage is not a real number, is
            out of range or is not finite
    """
    if isinstance(training_percentage, (bool, np.bool_)) or not isinstance(
        training_percentage, numbers.Real
    ):
        raise InvalidTrainingSizeError(
            f"training_percentage: expected a real number, got "
            f"{type(training_percentage).__name__} {training_percentage!r}"
        )

    pct = float(training_percentage)
    if not np.isfinite(pct) or pct <= 0 or pct > 100:
        raise InvalidTrainingSizeError(
            f"training_percentage: must be in (0, 100], got {training_percentage}",
            training_percentage=pct,
        )


def check_training_sizes(
    training_size: int,
    held_out_size: int,
    min_training_size: int,
    training_percentage: float,
) -> None:
    """
    Verify both partitions hold enough samples to fit and to evaluate.

    Args:
        training_size: Number of training samples
        held_out_size: Number of held-out samples
        min_training_size: Minimum training samples (max(2, n_features))
        training_percentage: Percentage that produced the sizes

    Raises:
        InvalidTrainingSizeError: If training_size < min_training_size
            or held_out_size < 1
    """
    if training_size < min_training_size:
        raise InvalidTrainingSizeError(
            f"training_percentage={training_percentage} gives {training_size} training "
            f"samples, at least {min_training_size} required",
            training_percentage=training_percentage,
            training_size=training_size,
            held_out_size=held_out_size,
            min_training_size=min_training_size,
        )
    if held_out_size < 1:
        raise InvalidTrainingSizeError(
            f"training_percentage={training_percentage} leaves {held_out_size} held-out "
            f"samples, at least 1 required for prediction",
            training_percentage=training_percentage,
            training_size=training_size,
            held_out_size=held_out_size,
            min_training_size=min_training_size,
        )
