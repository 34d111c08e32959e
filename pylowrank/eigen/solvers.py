"""
Nyström eigen-extraction on top of the pivoted Cholesky factor.

Public API:
    approximate_eigen(data_or_design, scale, stopping=...) -> EigenSolution
    extract_eigenvalues(U) -> (U_normalized, eigenvalues)

With L (n x k) from the factorization and a scalar weight D:

    Phi = (L' D) L            k x k
    V   = left singular vectors of Phi
    U   = L V                 n x k
    lam_i = ||U[:, i]||^2,  U[:, i] /= ||U[:, i]||
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylowrank.core.result import Result
from pylowrank.core.compute.timing import Timer
from pylowrank.core.compute.linalg.svd import left_singular_vectors
from pylowrank.core.validation import check_array, check_2d, check_positive
from pylowrank.cholesky.criteria import StoppingCriterion
from pylowrank.cholesky.design import CholeskyDesign
from pylowrank.cholesky.solvers import pivoted_cholesky, BackendChoice
from pylowrank.eigen.solution import EigenParams, EigenSolution


def approximate_eigen(
    data_or_design,
    scale: float,
    *,
    stopping: StoppingCriterion,
    backend: BackendChoice = 'cpu',
    n_workers: int | None = None,
    verbose: bool = False,
) -> EigenSolution:
    """
    Approximate eigenpairs of a kernel matrix from its pivoted Cholesky factor.

    Parameters
    ----------
    data_or_design : array-like, KernelEvaluator or CholeskyDesign
        The kernel matrix, explicit or implicit.
    scale : float
        Uniform weight D (e.g. a quadrature or volume weight), > 0.
    stopping : StoppingCriterion
        Passed to the factorization.
    backend : str
        Factorization backend, 'cpu' or 'threaded'.
    n_workers : int or None
        Thread pool size for the threaded backend.
    verbose : bool
        Print progress information.

    Returns
    -------
    EigenSolution
        Unit-norm eigenvectors (n x k) and eigenvalues (k,), ordered by
        descending singular value of Phi.

    Raises
    ------
    ValidationError
        Invalid scale, stopping criterion or input matrix.
    DecompositionError
        The SVD of Phi did not converge.
    """
    D = check_positive(scale, 'scale')
    design = CholeskyDesign.coerce(data_or_design)

    timer = Timer()
    timer.start()
    warnings_list = []

    with timer.section('factorization'):
        chol = pivoted_cholesky(
            design,
            stopping=stopping,
            backend=backend,
            n_workers=n_workers,
            verbose=verbose,
        )
    warnings_list.extend(chol.warnings)

    L = chol.L
    k = L.shape[1]

    if k == 0:
        warnings_list.append("Factorization has rank 0; no eigenpairs extracted")
        U = np.zeros((design.n, 0), dtype=np.float64)
        eigenvalues = np.zeros(0, dtype=np.float64)
    else:
        with timer.section('projection'):
            phi = (L.T * D) @ L

        with timer.section('svd'):
            V = left_singular_vectors(phi, matrix_name='Phi')

        with timer.section('normalization'):
            U, eigenvalues = extract_eigenvalues(L @ V)

        n_zero = int(np.sum(eigenvalues == 0.0))
        if n_zero:
            warnings_list.append(
                f"{n_zero} reconstructed direction(s) have zero norm; "
                f"left as zero vectors with eigenvalue 0"
            )

    if verbose:
        print(f"Extracted {k} eigenpairs"
              + (f", leading eigenvalue {eigenvalues[0]:.6e}" if k else ""))

    timer.stop()

    result = Result(
        params=EigenParams(eigenvectors=U, eigenvalues=eigenvalues),
        info={
            'method': 'nystrom_pivoted_cholesky',
            'scale': D,
            'rank': k,
            'residual_trace': chol.tr,
            'termination': chol.termination,
        },
        timing=timer.result(),
        backend_name=chol.backend_name,
        warnings=tuple(warnings_list),
    )

    return EigenSolution(_result=result, _design=design, _cholesky=chol)


def extract_eigenvalues(
    U: ArrayLike,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Normalize the columns of U and return their squared norms.

    Parameters
    ----------
    U : array-like, shape (n, k)
        Unnormalized directions L V.

    Returns
    -------
    U_normalized : ndarray, shape (n, k)
        Copy of U with unit-norm columns (zero columns stay zero).
    eigenvalues : ndarray, shape (k,)
        Squared column norms of the input.
    """
    U = check_array(U, 'U')
    check_2d(U, 'U')

    norms = np.linalg.norm(U, axis=0)
    safe = np.where(norms > 0.0, norms, 1.0)
    return U / safe, norms ** 2
