"""
Eigen-extraction module.

Nyström-style approximation of the leading eigenpairs of a kernel
matrix from its pivoted Cholesky factor.

Public API:
    approximate_eigen(A_or_design, scale, stopping=...)  - U, lam
    extract_eigenvalues(U)                               - normalize columns
"""

from pylowrank.eigen.solution import EigenParams, EigenSolution
from pylowrank.eigen.solvers import approximate_eigen, extract_eigenvalues

__all__ = [
    "approximate_eigen",
    "extract_eigenvalues",
    "EigenParams",
    "EigenSolution",
]
