"""
Pivoted Cholesky factorization module.

Greedy, rank-revealing incomplete Cholesky factorization of symmetric
positive semidefinite kernel matrices that are never materialized.

Public API:
    pivoted_cholesky(A_or_design, stopping=...)  - L, p, tr
    AbsoluteTolerance / RelativeTolerance / NumberOfEigenfunctions
    CholeskyDesign                               - kernel call shapes
"""

from pylowrank.cholesky.criteria import (
    AbsoluteTolerance,
    RelativeTolerance,
    NumberOfEigenfunctions,
    StoppingCriterion,
    resolve_bounds,
)
from pylowrank.cholesky.kernels import (
    KernelEvaluator,
    MatrixKernel,
    PointKernel,
    MatrixValuedKernel,
    CallableKernel,
)
from pylowrank.cholesky.design import CholeskyDesign
from pylowrank.cholesky.solution import CholeskyParams, CholeskySolution
from pylowrank.cholesky.solvers import pivoted_cholesky

__all__ = [
    "pivoted_cholesky",
    "AbsoluteTolerance",
    "RelativeTolerance",
    "NumberOfEigenfunctions",
    "StoppingCriterion",
    "resolve_bounds",
    "KernelEvaluator",
    "MatrixKernel",
    "PointKernel",
    "MatrixValuedKernel",
    "CallableKernel",
    "CholeskyDesign",
    "CholeskyParams",
    "CholeskySolution",
]
