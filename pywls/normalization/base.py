"""
Normalization strategy interface.

A strategy rescales flat arrays of numbers and knows how to split and
rescale a whole dataset. Strategies are chosen once, through
RegressionOptions, and must be stateless so a single instance can be
shared between fits.
"""

from abc import ABC, abstractmethod
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pywls.normalization.split import SplitData, split_data


class Normalization(ABC):
    """
    Base class for normalization strategies.

    Subclasses implement normalize(). prepare_data() splits the data
    and normalizes each of the four parts on its own, feature column by
    feature column for the input matrices.
    """

    @property
    def name(self) -> str:
        """Short identifier used in solution summaries."""
        return type(self).__name__

    @abstractmethod
    def normalize(self, values: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Rescale a flat array.

        Args:
            values: 1D array-like of numbers

        Returns:
            New float64 array of the same length and order
        """
        ...

    def prepare_data(
        self,
        X: NDArray[np.floating[Any]],
        y: NDArray[np.floating[Any]],
        training_size: int,
    ) -> SplitData:
        """
        Split into training / held-out parts and normalize each part.

        Each part is scaled with its own statistics, so the training and
        held-out partitions can end up on different scales.

        Args:
            X: Inputs with samples along the first axis, (n,) or (n, p)
            y: Outputs (n,)
            training_size: Number of leading samples used for training

        Returns:
            (X_train, y_train, X_held_out, y_held_out)
        """
        X_train, y_train, X_held_out, y_held_out = split_data(X, y, training_size)
        return (
            self._normalize_columns(X_train),
            self.normalize(y_train),
            self._normalize_columns(X_held_out),
            self.normalize(y_held_out),
        )

    def _normalize_columns(self, X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        if X.ndim == 1:
            return self.normalize(X)
        return np.column_stack([self.normalize(X[:, j]) for j in range(X.shape[1])])

    def __repr__(self) -> str:
        return f"{self.name}()"
