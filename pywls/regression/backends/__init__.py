"""
Regression backends.

Available backends:
    CPUNormalEquationsBackend: float64 reference implementation (NumPy/SciPy)
    GPUNormalEquationsBackend: PyTorch implementation (CUDA/MPS), imported lazily
"""

from pywls.regression.backends.cpu import CPUNormalEquationsBackend

__all__ = [
    "CPUNormalEquationsBackend",
]
