"""
Decimal scaling normalization.

Divides every value by the smallest power of ten 10**e (1 <= e <= 99)
that brings the largest absolute value down to at most 1, so the result
lies in [-1, 1]. The exponent starts at 1: values already inside
[-1, 1] are still divided by ten.

Example:
    >>> DecimalNormalization().normalize([15.0, -320.0, 7.5])
    array([ 0.015 , -0.32  ,  0.0075])
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pywls.core.exceptions import NormalizationOverflowError
from pywls.core.validation import check_array, check_1d, check_not_empty
from pywls.normalization.base import Normalization

MIN_EXPONENT = 1
MAX_EXPONENT = 99

_EXPONENTS = np.arange(MIN_EXPONENT, MAX_EXPONENT + 1)
# parsed from decimal literals; 10.0 ** e can be an ulp away from 1e{e}
_SCALES = np.array([float(f"1e{e}") for e in _EXPONENTS])


class DecimalNormalization(Normalization):
    """Power-of-ten scaling into [-1, 1]. Stateless."""

    def scale_exponent(self, values: ArrayLike) -> int:
        """
        Smallest exponent e in [1, 99] with max(|values|) / 10**e <= 1.

        Args:
            values: 1D array-like of numbers

        Returns:
            The exponent e; multiply normalized values by 10**e to undo

        Raises:
            NormalizationOverflowError: If values contain NaN/Inf or
                max(|values|) >= 10**99
        """
        arr = self._as_values(values)
        max_abs = float(np.max(np.abs(arr)))

        # 10**99 itself is out of range
        fits = (max_abs / _SCALES <= 1) & (max_abs < _SCALES[-1])
        if not np.any(fits):
            raise NormalizationOverflowError(
                f"values: no scaling exponent in [{MIN_EXPONENT}, {MAX_EXPONENT}] "
                f"brings max |value| = {max_abs!r} to at most 1; the array holds "
                f"NaN/Inf or values that are too large",
                max_abs=max_abs,
                max_exponent=MAX_EXPONENT,
            )
        return int(_EXPONENTS[np.argmax(fits)])

    def normalize(self, values: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Divide values by 10**scale_exponent(values).

        Raises:
            NormalizationOverflowError: If no exponent fits
        """
        arr = self._as_values(values)
        return arr / _SCALES[self.scale_exponent(arr) - MIN_EXPONENT]

    @staticmethod
    def _as_values(values: ArrayLike) -> NDArray[np.floating[Any]]:
        arr = check_array(values, 'values')
        check_1d(arr, 'values')
        check_not_empty(arr, 'values')
        return arr
