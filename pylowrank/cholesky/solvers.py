"""
Solver dispatch for the pivoted Cholesky factorization.

Public API: pivoted_cholesky(data_or_design, stopping=...) -> CholeskySolution
"""

from typing import Literal

from pylowrank.core.exceptions import ValidationError
from pylowrank.cholesky.criteria import StoppingCriterion, check_criterion
from pylowrank.cholesky.design import CholeskyDesign
from pylowrank.cholesky.solution import CholeskySolution
from pylowrank.cholesky.backends.cpu import CPUPivotedCholeskyBackend


BackendChoice = Literal['cpu', 'threaded']


def pivoted_cholesky(
    data_or_design,
    *,
    stopping: StoppingCriterion,
    backend: BackendChoice = 'cpu',
    n_workers: int | None = None,
    verbose: bool = False,
) -> CholeskySolution:
    """
    Incomplete pivoted Cholesky factorization L L' ~ A.

    Accepts EITHER:
        1. A CholeskyDesign (any kernel call shape)
        2. A KernelEvaluator
        3. A dense symmetric PSD matrix (convenience)

    Parameters
    ----------
    data_or_design : array-like, KernelEvaluator or CholeskyDesign
        The kernel matrix, explicit or implicit.
    stopping : StoppingCriterion
        AbsoluteTolerance(tol), RelativeTolerance(tol) or
        NumberOfEigenfunctions(n).
    backend : str
        'cpu' (vectorized, default) or 'threaded' (column update fanned
        out over a thread pool).
    n_workers : int or None
        Thread pool size for the threaded backend. Ignored for 'cpu'.
    verbose : bool
        Print progress information.

    Returns
    -------
    CholeskySolution
        ``L`` (n x k), ``p`` (permutation of 0..n-1) and ``tr`` (residual
        trace). Unpacks as ``L, p, tr = solution``.

    Examples
    --------
    >>> from pylowrank.cholesky import pivoted_cholesky, AbsoluteTolerance
    >>> sol = pivoted_cholesky([[4.0, 2.0], [2.0, 1.0]], stopping=AbsoluteTolerance(1e-10))
    >>> sol.rank
    1
    """
    check_criterion(stopping)
    backend_impl = _get_backend(backend, n_workers)

    design = CholeskyDesign.coerce(data_or_design)

    result = backend_impl.solve(design, stopping=stopping, verbose=verbose)

    return CholeskySolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice, n_workers: int | None = None):
    """Select backend based on user choice."""
    if choice == 'cpu':
        return CPUPivotedCholeskyBackend()

    elif choice == 'threaded':
        from pylowrank.cholesky.backends.threaded import ThreadedPivotedCholeskyBackend
        return ThreadedPivotedCholeskyBackend(n_workers=n_workers)

    else:
        raise ValidationError(f"Unknown backend: {choice!r}. Use 'cpu' or 'threaded'.")
