"""
Singular value decomposition of small dense matrices.

Eigen-extraction only ever decomposes a k x k matrix (k = factorization
rank), so this is a thin wrapper over LAPACK via SciPy that returns a
structured result and converts LAPACK non-convergence into a library error.
"""

from dataclasses import dataclass
from typing import Literal, Any
import numpy as np
from numpy.typing import NDArray
from scipy import linalg as sla

from pylowrank.core.exceptions import DecompositionError


@dataclass(frozen=True)
class SVDResult:
    """
    Result of singular value decomposition A = U diag(s) Vt.

    Attributes:
        U: Left singular vectors (m x k), columns ordered by s
        s: Singular values in descending order (k,)
        Vt: Right singular vectors, transposed (k x n)
    """
    U: NDArray[np.floating[Any]]
    s: NDArray[np.floating[Any]]
    Vt: NDArray[np.floating[Any]]


def svd_cpu(
    A: NDArray[np.floating[Any]],
    driver: Literal['gesdd', 'gesvd'] = 'gesdd',
    matrix_name: str = 'A',
) -> SVDResult:
    """
    Thin SVD using LAPACK (via SciPy).

    Args:
        A: Matrix to decompose (m x n)
        driver: LAPACK driver; 'gesdd' (divide and conquer) or 'gesvd'
        matrix_name: Name used in error messages

    Returns:
        SVDResult with singular values in descending order

    Raises:
        DecompositionError: If LAPACK fails to converge
    """
    try:
        U, s, Vt = sla.svd(
            A,
            full_matrices=False,
            lapack_driver=driver,
            check_finite=True,
        )
    except np.linalg.LinAlgError as e:
        raise DecompositionError(
            f"SVD of {matrix_name} (shape {A.shape}) did not converge: {e}",
            matrix_name=matrix_name,
            shape=tuple(A.shape),
        ) from e
    except ValueError as e:
        # check_finite rejects NaN/Inf before LAPACK is called
        raise DecompositionError(
            f"SVD of {matrix_name} (shape {A.shape}) failed: {e}",
            matrix_name=matrix_name,
            shape=tuple(A.shape),
        ) from e

    return SVDResult(U=U, s=s, Vt=Vt)


def left_singular_vectors(
    A: NDArray[np.floating[Any]],
    matrix_name: str = 'A',
) -> NDArray[np.floating[Any]]:
    """
    Left singular vectors of A only, ordered by descending singular value.

    Raises:
        DecompositionError: If LAPACK fails to converge
    """
    return svd_cpu(A, matrix_name=matrix_name).U
