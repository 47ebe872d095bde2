"""
Tolerance tiers for numerical validation.

Defines precision expectations for different compute paths when the
weighted normal equations are solved:
- CPU FP64 (reference)
- GPU FP64: same as CPU
- GPU FP32: relaxed for single-precision arithmetic

Used by the test suite and the GPU backend's condition check.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str


# Normal equations square the condition number, so even the CPU
# reference is looser than a QR-on-X solve would be.
CPU_FP64 = ToleranceTier(rtol=1e-8, atol=1e-10, name='cpu_fp64')

GPU_FP64 = ToleranceTier(rtol=1e-8, atol=1e-10, name='gpu_fp64')

GPU_FP32 = ToleranceTier(rtol=1e-3, atol=1e-4, name='gpu_fp32')

# cond(X'WX) above this is refused by the FP32 GPU path unless forced.
GPU_FP32_CONDITION_THRESHOLD = 1e6


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend name."""
    if 'gpu' in backend_name:
        return GPU_FP64 if 'fp64' in backend_name else GPU_FP32
    return CPU_FP64
