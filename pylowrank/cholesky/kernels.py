"""
Kernel evaluators over flat integer positions.

The factorizer is written once against KernelEvaluator: a symmetric PSD
function of two positions 0..n-1. The adapters below translate the
supported call shapes into that form:

    MatrixKernel        dense matrix, entry lookup
    PointKernel         scalar kernel over a point sequence
    MatrixValuedKernel  matrix-valued kernel over points, expanded into
                        (point, output dimension) pairs
    CallableKernel      scalar kernel over arbitrary opaque indices
"""

from __future__ import annotations

from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylowrank.core.exceptions import DimensionError, ValidationError
from pylowrank.core.protocols import KernelFunction
from pylowrank.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_square,
    check_symmetric,
    check_non_empty,
    check_positive_int,
)
from pylowrank.core.compute.tolerances import SYMMETRY_RTOL, SYMMETRY_ATOL


class KernelEvaluator:
    """
    Base class for flat-index kernel evaluators.

    Subclasses implement ``size`` and ``__call__``. ``diagonal`` and
    ``column`` fall back to element-wise evaluation and may be overridden
    with vectorized versions.
    """

    @property
    def size(self) -> int:
        """Number of positions n."""
        raise NotImplementedError

    def __call__(self, i: int, j: int) -> float:
        raise NotImplementedError

    def __len__(self) -> int:
        return self.size

    def diagonal(self) -> NDArray[np.floating[Any]]:
        """k(i, i) for every position, shape (n,)."""
        return np.fromiter(
            (self(i, i) for i in range(self.size)),
            dtype=np.float64,
            count=self.size,
        )

    def column(self, rows: NDArray[np.integer[Any]], pivot: int) -> NDArray[np.floating[Any]]:
        """k(r, pivot) for each r in ``rows``, shape (len(rows),)."""
        return np.fromiter(
            (self(int(r), pivot) for r in rows),
            dtype=np.float64,
            count=len(rows),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self.size})"


class MatrixKernel(KernelEvaluator):
    """
    Kernel given by a dense symmetric PSD matrix.

    Parameters
    ----------
    A : array-like, shape (n, n)
        Square, finite, symmetric matrix.
    """

    def __init__(self, A: ArrayLike):
        A = check_array(A, 'A')
        check_2d(A, 'A')
        check_square(A, 'A')
        check_non_empty(A, 'A')
        check_finite(A, 'A')
        check_symmetric(A, 'A', rtol=SYMMETRY_RTOL, atol=SYMMETRY_ATOL)
        self._A = np.asarray(A, dtype=np.float64)

    @property
    def matrix(self) -> NDArray[np.floating[Any]]:
        return self._A

    @property
    def size(self) -> int:
        return self._A.shape[0]

    def __call__(self, i: int, j: int) -> float:
        return float(self._A[i, j])

    def diagonal(self) -> NDArray[np.floating[Any]]:
        return np.diag(self._A).astype(np.float64, copy=True)

    def column(self, rows, pivot):
        return self._A[rows, pivot]


class PointKernel(KernelEvaluator):
    """
    Scalar kernel evaluated over a sequence of points.

    Parameters
    ----------
    kernel : callable
        ``kernel(x, y) -> float``, symmetric and PSD.
    points : sequence
        Non-empty ordered point set; position i refers to ``points[i]``.
    """

    def __init__(self, kernel: KernelFunction, points: Sequence[Any]):
        _check_kernel(kernel)
        check_non_empty(points, 'points')
        self._kernel = kernel
        self._points = points

    @property
    def points(self) -> Sequence[Any]:
        return self._points

    @property
    def size(self) -> int:
        return len(self._points)

    def __call__(self, i: int, j: int) -> float:
        return float(self._kernel(self._points[i], self._points[j]))


class CallableKernel(PointKernel):
    """
    Scalar kernel over arbitrary opaque indices.

    Identical to PointKernel; named separately for index sets that are not
    geometric points (graph nodes, strings, tuples, ...).
    """

    @property
    def indices(self) -> Sequence[Any]:
        return self._points


class MatrixValuedKernel(KernelEvaluator):
    """
    Matrix-valued kernel expanded into scalar (point, dimension) pairs.

    Flat position ``i`` addresses point ``i // output_dim`` and output
    component ``i % output_dim``, so n = len(points) * output_dim and

        k(i, j) = kernel(points[i // d], points[j // d])[i % d, j % d]

    Parameters
    ----------
    kernel : callable
        ``kernel(x, y) -> array of shape (output_dim, output_dim)``.
    points : sequence
        Non-empty ordered point set.
    output_dim : int
        Dimensionality of the kernel's output block.
    """

    def __init__(
        self,
        kernel: KernelFunction,
        points: Sequence[Any],
        output_dim: int,
    ):
        _check_kernel(kernel)
        check_non_empty(points, 'points')
        self._kernel = kernel
        self._points = points
        self._output_dim = check_positive_int(output_dim, 'output_dim')

    @property
    def points(self) -> Sequence[Any]:
        return self._points

    @property
    def output_dim(self) -> int:
        return self._output_dim

    @property
    def size(self) -> int:
        return len(self._points) * self._output_dim

    def _block(self, a: int, b: int) -> NDArray[np.floating[Any]]:
        block = np.asarray(self._kernel(self._points[a], self._points[b]), dtype=np.float64)
        d = self._output_dim
        if block.shape != (d, d):
            raise DimensionError(
                f"kernel: expected a ({d}, {d}) block, got shape {block.shape}"
            )
        return block

    def __call__(self, i: int, j: int) -> float:
        d = self._output_dim
        return float(self._block(i // d, j // d)[i % d, j % d])

    def diagonal(self) -> NDArray[np.floating[Any]]:
        blocks = [np.diag(self._block(a, a)) for a in range(len(self._points))]
        return np.concatenate(blocks)

    def column(self, rows, pivot):
        # One block evaluation per distinct point among rows
        d = self._output_dim
        pivot_point, pivot_dim = divmod(pivot, d)
        out = np.empty(len(rows), dtype=np.float64)
        cache: dict[int, NDArray[np.floating[Any]]] = {}
        for pos, r in enumerate(rows):
            point, dim = divmod(int(r), d)
            block = cache.get(point)
            if block is None:
                block = self._block(point, pivot_point)
                cache[point] = block
            out[pos] = block[dim, pivot_dim]
        return out


def _check_kernel(kernel) -> None:
    if not isinstance(kernel, KernelFunction):
        raise ValidationError(
            f"kernel: expected a callable k(x, y), got {type(kernel).__name__}"
        )
