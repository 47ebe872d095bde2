"""
Hardware detection for backend selection.

torch is imported lazily so the CPU path never pays for it and the
package works without the optional 'gpu' extra installed.
"""

from dataclasses import dataclass
from typing import Literal
import platform

DeviceType = Literal['cpu', 'cuda', 'mps']


@dataclass(frozen=True)
class DeviceInfo:
    """
    A compute device the regression backends can run on.

    Attributes:
        device_type: 'cpu', 'cuda' or 'mps'
        name: Human-readable device name
        supports_fp64: Whether float64 linear algebra is available
    """
    device_type: DeviceType
    name: str
    supports_fp64: bool

    def __str__(self) -> str:
        return f"{self.device_type.upper()} ({self.name})"

    @property
    def is_gpu(self) -> bool:
        """True if this is a GPU device."""
        return self.device_type != 'cpu'

    @property
    def torch_device(self) -> str:
        """Device string understood by torch.device()."""
        return 'cuda' if self.device_type == 'cuda' else self.device_type


def detect_gpu() -> DeviceInfo | None:
    """
    Detect an available GPU, preferring CUDA over MPS.

    Returns:
        DeviceInfo for the GPU, or None if torch is missing or no GPU exists
    """
    try:
        import torch
    except ImportError:
        return None

    if torch.cuda.is_available():
        props = torch.cuda.get_device_properties(torch.cuda.current_device())
        return DeviceInfo(device_type='cuda', name=props.name, supports_fp64=True)

    if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        # MPS has no float64 kernels
        return DeviceInfo(device_type='mps', name='Apple Silicon GPU', supports_fp64=False)

    return None


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo for the host CPU."""
    name = platform.processor() or platform.machine() or "Unknown CPU"
    return DeviceInfo(device_type='cpu', name=name, supports_fp64=True)


def select_device(prefer: Literal['cpu', 'gpu', 'auto'] = 'auto') -> DeviceInfo:
    """
    Select compute device based on preference and availability.

    Args:
        prefer: 'cpu' always uses the CPU, 'gpu' requires a GPU,
            'auto' uses a GPU when one is detected

    Raises:
        RuntimeError: If 'gpu' requested but no GPU available
    """
    if prefer == 'cpu':
        return get_cpu_info()

    gpu = detect_gpu()
    if prefer == 'gpu' and gpu is None:
        raise RuntimeError(
            "GPU requested but no GPU available. "
            "Install the 'gpu' extra with a CUDA or MPS enabled PyTorch build."
        )
    return gpu if gpu is not None else get_cpu_info()
