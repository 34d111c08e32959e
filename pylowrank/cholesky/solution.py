"""
Pivoted Cholesky solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pylowrank.core.result import Result

if TYPE_CHECKING:
    from pylowrank.cholesky.design import CholeskyDesign


@dataclass(frozen=True)
class CholeskyParams:
    """
    Parameter payload for the pivoted Cholesky factorization.

    Attributes:
        factor: L, shape (n, k); L @ L.T approximates the kernel matrix
        pivots: Final permutation of 0..n-1; pivots[:k] are the selected
            indices in selection order
        trace: Residual trace trace(A - L L') at termination, clamped at 0
        rank: Number of iterations performed (columns of L)
        initial_trace: Trace of the full kernel matrix
        trace_history: Residual trace after each iteration, length k
    """
    factor: NDArray[np.floating[Any]]
    pivots: NDArray[np.integer[Any]]
    trace: float
    rank: int
    initial_trace: float
    trace_history: tuple[float, ...]


@dataclass
class CholeskySolution:
    """
    User-facing pivoted Cholesky results.

    Wraps Result[CholeskyParams]. ``L``, ``p`` and ``tr`` name the
    factorization triple.
    """
    _result: Result[CholeskyParams]
    _design: 'CholeskyDesign'

    @property
    def L(self) -> NDArray[np.floating[Any]]:
        """Factor matrix (n x k)."""
        return self._result.params.factor

    @property
    def p(self) -> NDArray[np.integer[Any]]:
        """Pivot permutation (n,)."""
        return self._result.params.pivots

    @property
    def tr(self) -> float:
        """Residual trace, an upper bound on the approximation error."""
        return self._result.params.trace

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def selected(self) -> NDArray[np.integer[Any]]:
        """Pivot indices in selection order, shape (k,)."""
        return self.p[:self.rank]

    @property
    def initial_trace(self) -> float:
        return self._result.params.initial_trace

    @property
    def trace_history(self) -> tuple[float, ...]:
        return self._result.params.trace_history

    @property
    def termination(self) -> str:
        """Why the loop stopped: 'tolerance', 'max_rank', 'full_rank' or 'exhausted'."""
        return self._result.info['termination']

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def __iter__(self):
        """Unpack as ``L, p, tr = solution``."""
        return iter((self.L, self.p, self.tr))

    def approximation(self) -> NDArray[np.floating[Any]]:
        """Dense L @ L.T, shape (n, n). Materializes the full matrix."""
        return self.L @ self.L.T

    def relative_error_bound(self) -> float:
        """Residual trace relative to the initial trace (0 for a zero kernel)."""
        if self.initial_trace <= 0:
            return 0.0
        return self.tr / self.initial_trace

    def summary(self) -> str:
        """Short text report."""
        lines = [
            "Pivoted Cholesky factorization",
            f"  n:              {self._design.n}",
            f"  rank:           {self.rank}",
            f"  initial trace:  {self.initial_trace:.6e}",
            f"  residual trace: {self.tr:.6e}",
            f"  relative error: {self.relative_error_bound():.6e}",
            f"  termination:    {self.termination}",
            f"  backend:        {self.backend_name}",
        ]
        if self.warnings:
            lines.append("  warnings:")
            lines.extend(f"    - {w}" for w in self.warnings)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CholeskySolution(n={self._design.n}, rank={self.rank}, "
            f"tr={self.tr:.3e}, termination={self.termination!r})"
        )
