"""
CPU reference backend for weighted least squares.

Forms the weighted normal equations X'WX β = X'Wy in float64 and hands
them to the decomposition chosen by the caller (LAPACK through
NumPy/SciPy, or the Gram-Schmidt kernel).
"""

from typing import Any
import numpy as np

from pywls.core.result import Result
from pywls.core.compute.timing import Timer
from pywls.core.compute.linalg import solve_system
from pywls.core.compute.precision import condition_number, CONDITION_WARNING_THRESHOLD
from pywls.regression.design import WeightedDesign
from pywls.regression.solution import WeightedParams


class CPUNormalEquationsBackend:
    """
    CPU backend solving the weighted normal equations.

    Implements the Backend protocol for WeightedDesign -> WeightedParams.
    A solver failure propagates unchanged; no other decomposition is
    tried.
    """

    @property
    def name(self) -> str:
        return 'cpu'

    def solve(self, design: WeightedDesign, method: str = 'cholesky') -> Result[WeightedParams]:
        """
        Fit β by weighted least squares.

        Algorithm:
            1. A = X'WX, b = X'Wy
            2. Solve A β = b with the named decomposition
            3. Compute fitted values, residuals and weighted RSS

        Args:
            design: Training design
            method: Decomposition name (see pywls.core.compute.linalg)

        Returns:
            Result containing WeightedParams

        Raises:
            SolverError: If the decomposition cannot solve the system
        """
        timer = Timer()
        timer.start()

        X, y, w = design.X, design.y, design.weights
        p = design.p

        with timer.section('normal_equations'):
            A = design.XtWX()
            b = design.XtWy()

        with timer.section('condition_check'):
            cond = condition_number(A)

        with timer.section('solve'):
            coefficients = solve_system(A, b, method)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values
            weighted_rss = float(np.sum(w * residuals ** 2))

        timer.stop()

        warnings_list: list[str] = []
        if cond > CONDITION_WARNING_THRESHOLD:
            warnings_list.append(
                f"X'WX is ill-conditioned (condition number {cond:.2e}); "
                f"coefficients may be inaccurate."
            )
        n_zero = int(np.sum(w == 0))
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

        info: dict[str, Any] = {
            'method': method,
            'rank': p,
            'condition_number': cond,
            'n_zero_weights': n_zero,
            'device': 'cpu',
            'dtype': 'float64',
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=f'{self.name}_{method}',
            warnings=tuple(warnings_list),
        )
