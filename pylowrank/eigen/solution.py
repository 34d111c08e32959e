"""
Eigen-extraction solution types.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pylowrank.core.result import Result

if TYPE_CHECKING:
    from pylowrank.cholesky.design import CholeskyDesign
    from pylowrank.cholesky.solution import CholeskySolution


@dataclass(frozen=True)
class EigenParams:
    """
    Parameter payload for Nyström eigen-extraction.

    Attributes:
        eigenvectors: U, shape (n, k), unit-norm columns
        eigenvalues: Non-negative estimates, shape (k,), in SVD order
    """
    eigenvectors: NDArray[np.floating[Any]]
    eigenvalues: NDArray[np.floating[Any]]


@dataclass
class EigenSolution:
    """
    User-facing eigen-extraction results.

    Unpacks as ``U, lam = solution``. The underlying factorization is
    available as ``cholesky``.
    """
    _result: Result[EigenParams]
    _design: 'CholeskyDesign'
    _cholesky: 'CholeskySolution'

    @property
    def eigenvectors(self) -> NDArray[np.floating[Any]]:
        return self._result.params.eigenvectors

    @property
    def eigenvalues(self) -> NDArray[np.floating[Any]]:
        return self._result.params.eigenvalues

    @property
    def n_eigenpairs(self) -> int:
        return int(self.eigenvalues.shape[0])

    @property
    def cholesky(self) -> 'CholeskySolution':
        return self._cholesky

    @property
    def scale(self) -> float:
        return self._result.info['scale']

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
        return iter((self.eigenvectors, self.eigenvalues))

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Dense U diag(lam) U', shape (n, n). Materializes the full matrix."""
        U = self.eigenvectors
        return (U * self.eigenvalues) @ U.T

    def __repr__(self) -> str:
        lead = f"{self.eigenvalues[0]:.3e}" if self.n_eigenpairs else "none"
        return (
            f"EigenSolution(n={self._design.n}, k={self.n_eigenpairs}, "
            f"leading={lead})"
        )
