"""
Shared compute infrastructure for pywls.

This module provides hardware detection, timing utilities, precision
helpers and linear algebra kernels shared by the regression backends.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
    precision: Machine epsilon, rank tolerance, condition numbers
    tolerances: Comparison tolerance tiers per compute path
    linalg: Decomposition solvers (Cholesky, LU, QR, SVD, eigen, Gram-Schmidt)
"""

from pywls.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pywls.core.compute.timing import Timer

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
]
