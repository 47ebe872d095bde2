"""
pywls: weighted least squares regression for Python.

Validates raw input / output / weight arrays, splits them into training
and held-out partitions, optionally rescales them, fits weighted
least squares through a selectable matrix decomposition and reports
held-out predictions with error metrics.

Submodules:
    regression: fit() and the solution / metrics types
    normalization: Normalization strategies (DecimalNormalization)
    core: Exceptions, validation, data sources, linear algebra kernels
"""

__version__ = "0.1.0"

from pywls import normalization
from pywls import regression
from pywls.normalization import DecimalNormalization
from pywls.regression import fit, RegressionOptions

__all__ = [
    "__version__",
    "normalization",
    "regression",
    "fit",
    "RegressionOptions",
    "DecimalNormalization",
]
