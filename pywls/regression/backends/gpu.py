"""
GPU backend for weighted least squares using PyTorch.

Performance path for large sample counts: forming X'WX is the O(n p²)
part of a fit and maps well onto a GPU. Validated against the CPU
reference. Supports CUDA (Linux/Windows) and MPS (macOS Apple Silicon).
"""

from typing import Any, Callable
import numpy as np

from pywls.core.result import Result
from pywls.core.exceptions import (
    NumericalError,
    NotPositiveDefiniteError,
    SingularMatrixError,
)
from pywls.core.compute.timing import Timer
from pywls.core.compute.precision import numerical_rank, CONDITION_WARNING_THRESHOLD
from pywls.core.compute.tolerances import GPU_FP32_CONDITION_THRESHOLD
from pywls.regression.design import WeightedDesign
from pywls.regression.solution import WeightedParams


class GPUNormalEquationsBackend:
    """
    GPU backend solving the weighted normal equations with torch.linalg.

    FP32 by default for performance on consumer GPUs. In FP32 an
    ill-conditioned X'WX is refused unless force=True.
    """

    def __init__(self, use_fp64: bool = False, device: str = 'cuda'):
        """
        Initialize GPU backend.

        Args:
            use_fp64: If True, use FP64 (slow on consumer GPUs, not on MPS).
            device: GPU device type ('cuda', 'cuda:0', 'mps')
        """
        import torch

        if device.startswith('cuda'):
            if not torch.cuda.is_available():
                raise RuntimeError(
                    "CUDA not available. Install PyTorch with CUDA support, "
                    "or use backend='cpu'."
                )
        elif device == 'mps':
            if not (hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()):
                raise RuntimeError(
                    "MPS not available. Requires macOS with Apple Silicon "
                    "and PyTorch with MPS support."
                )
            if use_fp64:
                raise RuntimeError(
                    "MPS does not support float64. Use use_fp64=False "
                    "or backend='cpu' for double precision."
                )
        else:
            raise ValueError(
                f"Unknown GPU device: {device!r}. Use 'cuda' or 'mps'."
            )

        self.device = torch.device(device)
        self.dtype = torch.float64 if use_fp64 else torch.float32
        self.use_fp64 = use_fp64

    @property
    def name(self) -> str:
        precision = "fp64" if self.use_fp64 else "fp32"
        return f'gpu_{precision}'

    def solve(
        self,
        design: WeightedDesign,
        method: str = 'cholesky',
        force: bool = False,
    ) -> Result[WeightedParams]:
        """
        Fit β by weighted least squares on the GPU.

        Args:
            design: Training design
            method: Decomposition name
            force: Proceed in FP32 even when X'WX is ill-conditioned

        Raises:
            NumericalError: Ill-conditioned X'WX in FP32 without force
            SolverError: If the decomposition cannot solve the system
        """
        import torch

        timer = Timer(sync_cuda=self.device.type == 'cuda')
        timer.start()

        p = design.p
        np_dtype = np.float64 if self.use_fp64 else np.float32

        with timer.section('data_transfer_to_gpu'):
            X = torch.from_numpy(design.X).to(device=self.device, dtype=self.dtype)
            y = torch.from_numpy(design.y).to(device=self.device, dtype=self.dtype)
            w = torch.from_numpy(design.weights).to(device=self.device, dtype=self.dtype)

        with timer.section('normal_equations'):
            A = X.T @ (w.unsqueeze(1) * X)
            b = X.T @ (w * y)

        # cond() is missing on some MPS builds; the p x p matrix is cheap to move
        with timer.section('condition_check'):
            sv = torch.linalg.svdvals(A.cpu())
            sv_max, sv_min = float(sv[0].item()), float(sv[-1].item())
            cond = sv_max / sv_min if sv_min > 0 else float('inf')

        if not self.use_fp64 and cond > GPU_FP32_CONDITION_THRESHOLD and not force:
            timer.stop()
            raise NumericalError(
                f"X'WX is ill-conditioned (condition number: {cond:.2e}) for "
                f"single precision.\n"
                f"Options:\n"
                f"  - Use backend='cpu' (float64 reference)\n"
                f"  - Use backend='gpu_fp64' on CUDA\n"
                f"  - Pass force=True to proceed anyway"
            )

        if method not in _TORCH_SOLVERS:
            raise ValueError(
                f"Unknown decomposition: {method!r}. Available: {sorted(_TORCH_SOLVERS)}"
            )

        with timer.section('solve'):
            coef_gpu = _TORCH_SOLVERS[method](A, b, np_dtype)

        with timer.section('fitted_residuals'):
            fitted_gpu = X @ coef_gpu
            residuals_gpu = y - fitted_gpu
            weighted_rss = float((w * residuals_gpu * residuals_gpu).sum().item())

        with timer.section('data_transfer_to_cpu'):
            coefficients = coef_gpu.cpu().numpy().astype(np.float64)
            fitted_values = fitted_gpu.cpu().numpy().astype(np.float64)
            residuals = residuals_gpu.cpu().numpy().astype(np.float64)

        timer.stop()

        warnings_list: list[str] = []
        if cond > CONDITION_WARNING_THRESHOLD:
            warnings_list.append(
                f"X'WX is ill-conditioned (condition number {cond:.2e}); "
                f"coefficients may be inaccurate."
            )
        n_zero = int(np.sum(design.weights == 0))
        if n_zero:
            warnings_list.append(
                f"{n_zero} training sample(s) have zero weight and do not influence the fit."
            )

        params = WeightedParams(
            coefficients=coefficients,
            intercept=0.0,
            fitted_values=fitted_values,
            residuals=residuals,
            weighted_rss=weighted_rss,
            rank=p,
            condition_number=cond,
        )

        return Result(
            params=params,
            info={
                'method': method,
                'rank': p,
                'condition_number': cond,
                'n_zero_weights': n_zero,
                'device': str(self.device),
                'dtype': str(self.dtype),
            },
            timing=timer.result(),
            backend_name=f'{self.name}_{method}',
            warnings=tuple(warnings_list),
        )


# === torch decomposition kernels ===
# Each takes (A, b, np_dtype) and returns x on A's device. The rank checks
# mirror pywls.core.compute.linalg so both backends refuse the same systems.


def _check_rank(magnitudes: Any, p: int, np_dtype: type, method: str) -> None:
    mags = magnitudes.detach().abs().cpu().numpy().astype(np.float64)
    rank = numerical_rank(mags, p, np_dtype)
    if rank < p:
        raise SingularMatrixError(
            f"{method} decomposition found a singular X'WX: rank={rank}, expected={p}.",
            matrix_name="X'WX",
            rank=rank,
            expected_rank=p,
            method=method,
        )


def _torch_cholesky(A: Any, b: Any, np_dtype: type) -> Any:
    import torch

    L, info = torch.linalg.cholesky_ex(A)
    if int(info.item()) > 0:
        raise NotPositiveDefiniteError(
            "Cholesky decomposition failed: X'WX is not positive definite. "
            "Check for collinear features or zero weights.",
            matrix_name="X'WX",
        )
    pivots = torch.diagonal(L) ** 2
    mags = pivots.detach().cpu().numpy().astype(np.float64)
    if numerical_rank(mags, A.shape[0], np_dtype) < A.shape[0]:
        raise NotPositiveDefiniteError(
            "Cholesky decomposition produced numerically zero pivots: X'WX is singular.",
            matrix_name="X'WX",
            min_eigenvalue=float(mags.min()),
        )
    return torch.cholesky_solve(b.unsqueeze(1), L).squeeze(1)


def _torch_lu(A: Any, b: Any, np_dtype: type) -> Any:
    import torch

    LU, pivots, _ = torch.linalg.lu_factor_ex(A)
    _check_rank(torch.diagonal(LU), A.shape[0], np_dtype, 'lu')
    return torch.linalg.lu_solve(LU, pivots, b.unsqueeze(1)).squeeze(1)


def _torch_qr(A: Any, b: Any, np_dtype: type) -> Any:
    import torch

    Q, R = torch.linalg.qr(A, mode='reduced')
    _check_rank(torch.diagonal(R), A.shape[0], np_dtype, 'qr')
    return torch.linalg.solve_triangular(R, (Q.T @ b).unsqueeze(1), upper=True).squeeze(1)


def _torch_svd(A: Any, b: Any, np_dtype: type) -> Any:
    import torch

    U, S, Vh = torch.linalg.svd(A, full_matrices=False)
    _check_rank(S, A.shape[0], np_dtype, 'svd')
    return Vh.T @ ((U.T @ b) / S)


def _torch_eigen(A: Any, b: Any, np_dtype: type) -> Any:
    import torch

    eigvals, V = torch.linalg.eigh(A)
    _check_rank(eigvals, A.shape[0], np_dtype, 'eigen')
    return V @ ((V.T @ b) / eigvals)


def _torch_gram_schmidt(A: Any, b: Any, np_dtype: type) -> Any:
    import torch

    p = A.shape[1]
    V = A.clone()
    Q = torch.zeros_like(A)
    R = torch.zeros((p, p), dtype=A.dtype, device=A.device)
    for j in range(p):
        R[j, j] = torch.linalg.vector_norm(V[:, j])
        if R[j, j] > 0:
            Q[:, j] = V[:, j] / R[j, j]
        for k in range(j + 1, p):
            R[j, k] = Q[:, j] @ V[:, k]
            V[:, k] = V[:, k] - R[j, k] * Q[:, j]
    _check_rank(torch.diagonal(R), p, np_dtype, 'gram_schmidt')
    return torch.linalg.solve_triangular(R, (Q.T @ b).unsqueeze(1), upper=True).squeeze(1)


_TORCH_SOLVERS: dict[str, Callable[[Any, Any, type], Any]] = {
    'cholesky': _torch_cholesky,
    'lu': _torch_lu,
    'qr': _torch_qr,
    'svd': _torch_svd,
    'eigen': _torch_eigen,
    'gram_schmidt': _torch_gram_schmidt,
}
