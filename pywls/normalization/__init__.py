"""
Normalization strategies.

Public API:
    Normalization: strategy base class (normalize, prepare_data)
    DecimalNormalization: power-of-ten scaling into [-1, 1]
    split_data: plain index-based train / held-out split

Example:
    >>> from pywls.normalization import DecimalNormalization
    >>> DecimalNormalization().normalize([1.0, 20.0, -3.0])
    array([ 0.01,  0.2 , -0.03])
"""

from pywls.normalization.base import Normalization
from pywls.normalization.decimal import DecimalNormalization
from pywls.normalization.split import SplitData, split_data

__all__ = [
    "Normalization",
    "DecimalNormalization",
    "SplitData",
    "split_data",
]
