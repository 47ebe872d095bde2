"""
Index-based train / held-out split.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

SplitData = tuple[
    NDArray[np.floating[Any]],
    NDArray[np.floating[Any]],
    NDArray[np.floating[Any]],
    NDArray[np.floating[Any]],
]


def split_data(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    training_size: int,
) -> SplitData:
    """
    Cut samples into a leading training block and a trailing held-out block.

    Order is preserved; nothing is shuffled.

    Args:
        X: Samples along the first axis, (n,) or (n, p)
        y: Outputs (n,)
        training_size: Number of leading samples assigned to training

    Returns:
        (X_train, y_train, X_held_out, y_held_out) as copies
    """
    return (
        X[:training_size].copy(),
        y[:training_size].copy(),
        X[training_size:].copy(),
        y[training_size:].copy(),
    )
