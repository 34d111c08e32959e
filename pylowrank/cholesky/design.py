"""
CholeskyDesign: kernel wrapper for the pivoted Cholesky factorization.

Wraps a flat-index KernelEvaluator and exposes validation and metadata
for the factorization pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence
import numpy as np
from numpy.typing import ArrayLike

from pylowrank.core.exceptions import ValidationError
from pylowrank.cholesky.kernels import (
    KernelEvaluator,
    MatrixKernel,
    PointKernel,
    MatrixValuedKernel,
    CallableKernel,
)


@dataclass(frozen=True)
class CholeskyDesign:
    """
    Design for the pivoted Cholesky factorization.

    Immutable after construction. The evaluator is not owned by the
    factorization; it is only read.

    Construction:
        CholeskyDesign.from_matrix(A)
        CholeskyDesign.from_kernel(k, points)
        CholeskyDesign.from_matrix_valued_kernel(k, points, output_dim=3)
        CholeskyDesign.from_callable(k, indices)
        CholeskyDesign.from_evaluator(evaluator)
    """
    _evaluator: KernelEvaluator
    _n: int
    _source: str

    @classmethod
    def from_matrix(cls, A: ArrayLike) -> CholeskyDesign:
        """
        Build a design from a dense symmetric PSD matrix.

        Parameters
        ----------
        A : array-like, shape (n, n)
            Accepts numpy arrays, nested lists, or anything with .values.
        """
        if hasattr(A, 'values') and not isinstance(A, np.ndarray):
            A = A.values
        return cls._build(MatrixKernel(A), source='matrix')

    @classmethod
    def from_kernel(
        cls,
        kernel: Callable[[Any, Any], float],
        points: Sequence[Any],
    ) -> CholeskyDesign:
        """Build a design from a scalar kernel over a point set."""
        return cls._build(PointKernel(kernel, points), source='kernel')

    @classmethod
    def from_matrix_valued_kernel(
        cls,
        kernel: Callable[[Any, Any], ArrayLike],
        points: Sequence[Any],
        output_dim: int,
    ) -> CholeskyDesign:
        """
        Build a design from a matrix-valued kernel over a point set.

        The factor has len(points) * output_dim rows, ordered point-major.
        """
        return cls._build(
            MatrixValuedKernel(kernel, points, output_dim),
            source='matrix_valued_kernel',
        )

    @classmethod
    def from_callable(
        cls,
        kernel: Callable[[Any, Any], float],
        indices: Sequence[Any],
    ) -> CholeskyDesign:
        """Build a design from a scalar kernel over arbitrary indices."""
        return cls._build(CallableKernel(kernel, indices), source='callable')

    @classmethod
    def from_evaluator(cls, evaluator: KernelEvaluator) -> CholeskyDesign:
        """Wrap an existing KernelEvaluator."""
        if not isinstance(evaluator, KernelEvaluator):
            raise ValidationError(
                f"evaluator: expected KernelEvaluator, got {type(evaluator).__name__}"
            )
        return cls._build(evaluator, source='evaluator')

    @classmethod
    def coerce(cls, data_or_design) -> CholeskyDesign:
        """Accept a design, a KernelEvaluator, or a dense matrix."""
        if isinstance(data_or_design, CholeskyDesign):
            return data_or_design
        if isinstance(data_or_design, KernelEvaluator):
            return cls.from_evaluator(data_or_design)
        if callable(data_or_design):
            raise ValidationError(
                "data_or_design: got a bare callable; use "
                "CholeskyDesign.from_kernel(kernel, points) to supply the point set"
            )
        return cls.from_matrix(data_or_design)

    @classmethod
    def _build(cls, evaluator: KernelEvaluator, source: str) -> CholeskyDesign:
        """Internal builder with validation."""
        n = evaluator.size
        if n < 1:
            raise ValidationError(f"Need at least 1 index, got {n}")
        return cls(_evaluator=evaluator, _n=n, _source=source)

    @property
    def evaluator(self) -> KernelEvaluator:
        """Flat-index kernel evaluator."""
        return self._evaluator

    @property
    def n(self) -> int:
        """Number of indices (rows of the factor)."""
        return self._n

    @property
    def source(self) -> str:
        """How the design was built ('matrix', 'kernel', ...)."""
        return self._source

    @property
    def metadata(self) -> dict[str, Any]:
        meta: dict[str, Any] = {'n': self._n, 'source': self._source}
        if isinstance(self._evaluator, MatrixValuedKernel):
            meta['n_points'] = len(self._evaluator.points)
            meta['output_dim'] = self._evaluator.output_dim
        return meta

    def __repr__(self) -> str:
        return f"CholeskyDesign(n={self._n}, source={self._source!r})"
