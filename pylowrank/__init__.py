"""
pylowrank: low-rank approximation of large kernel matrices.

Incomplete pivoted Cholesky factorization of symmetric positive
semidefinite kernel matrices that are only available through a pairwise
kernel function, with Nyström-style eigen-extraction on top.

Submodules:
    cholesky: Pivoted Cholesky factorization (L, p, tr)
    eigen: Approximate eigenvectors/eigenvalues from the factor
    core: Exceptions, validation, results, dense linear algebra, optimizers
"""

__version__ = "0.1.0"

from pylowrank import cholesky
from pylowrank import eigen
from pylowrank.cholesky import (
    pivoted_cholesky,
    AbsoluteTolerance,
    RelativeTolerance,
    NumberOfEigenfunctions,
)
from pylowrank.eigen import approximate_eigen, extract_eigenvalues

__all__ = [
    "__version__",
    "cholesky",
    "eigen",
    "pivoted_cholesky",
    "approximate_eigen",
    "extract_eigenvalues",
    "AbsoluteTolerance",
    "RelativeTolerance",
    "NumberOfEigenfunctions",
]
