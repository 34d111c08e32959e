"""
CPU backend for the pivoted Cholesky factorization.

Sequential over iterations; within an iteration the column update is
vectorized over all remaining rows with NumPy.
"""

import math
from typing import Any, Callable
import numpy as np
from numpy.typing import NDArray

from pylowrank.core.result import Result
from pylowrank.core.exceptions import DimensionError, NotPositiveSemidefiniteError
from pylowrank.core.validation import check_finite
from pylowrank.core.compute.timing import Timer
from pylowrank.cholesky.criteria import StoppingCriterion, resolve_bounds
from pylowrank.cholesky.design import CholeskyDesign
from pylowrank.cholesky.kernels import KernelEvaluator
from pylowrank.cholesky.solution import CholeskyParams
from pylowrank.cholesky._factor import PivotedCholeskyFactor


ColumnUpdate = Callable[
    [KernelEvaluator, PivotedCholeskyFactor, NDArray[np.integer[Any]], int, float],
    NDArray[np.floating[Any]],
]


def update_rows(
    evaluator: KernelEvaluator,
    factor: PivotedCholeskyFactor,
    rows: NDArray[np.integer[Any]],
    pivot: int,
    pivot_value: float,
) -> NDArray[np.floating[Any]]:
    """
    Schur complement column entries for ``rows``.

        S[r] = (k(r, pivot) - L[r, :k] . L[pivot, :k]) / pivot_value

    Reads committed columns of ``factor`` only.
    """
    column = evaluator.column(rows, pivot)
    if factor.n_cols > 0:
        column = column - factor.rows(rows) @ factor.rows(pivot)
    return column / pivot_value


class CPUPivotedCholeskyBackend:
    """
    CPU backend for the pivoted Cholesky factorization.

    Greedy: each iteration pivots on the largest remaining diagonal entry
    of the Schur complement (first occurrence on ties), appends one column
    to the factor and downdates the diagonal.
    """

    @property
    def name(self) -> str:
        return 'cpu_pivoted_cholesky'

    def solve(
        self,
        design: CholeskyDesign,
        *,
        stopping: StoppingCriterion,
        verbose: bool = False,
    ) -> Result[CholeskyParams]:
        """
        Factorize the design's kernel matrix.

        Parameters
        ----------
        design : CholeskyDesign
            Kernel evaluator wrapper.
        stopping : StoppingCriterion
            AbsoluteTolerance, RelativeTolerance or NumberOfEigenfunctions.
        verbose : bool
            Print the residual trace after every iteration.

        Returns
        -------
        Result[CholeskyParams]
        """
        return self._run(design, stopping, verbose, update_rows)

    def _run(
        self,
        design: CholeskyDesign,
        stopping: StoppingCriterion,
        verbose: bool,
        update: ColumnUpdate,
        extra_info: dict[str, Any] | None = None,
    ) -> Result[CholeskyParams]:
        timer = Timer()
        timer.start()
        warnings_list = []

        evaluator = design.evaluator
        n = design.n

        with timer.section('diagonal'):
            d = np.array(evaluator.diagonal(), dtype=np.float64)
            _check_diagonal(d, n)

        initial_trace = float(np.sum(d))
        tr = initial_trace
        tolerance, max_rank = resolve_bounds(stopping, initial_trace, n)

        p = np.arange(n)
        factor = PivotedCholeskyFactor(n, size_hint=min(max_rank, 64))
        history: list[float] = []
        k = 0

        if verbose:
            print(f"Pivoted Cholesky ({self.name}): n={n}, tolerance={tolerance:.3e}, max_rank={max_rank}")

        with timer.section('iterations'):
            while True:
                if k >= max_rank:
                    termination = 'full_rank' if k >= n else 'max_rank'
                    break
                if tr < tolerance:
                    termination = 'tolerance'
                    break

                # argmax returns the first maximum: lowest-index tie-break
                pivl = k + int(np.argmax(d[p[k:]]))
                p[k], p[pivl] = p[pivl], p[k]
                pivot = int(p[k])

                if not d[pivot] > 0.0:
                    termination = 'exhausted'
                    warnings_list.append(
                        f"Residual diagonal exhausted at rank {k} "
                        f"(largest remaining entry {d[pivot]:.3e} <= 0)"
                    )
                    break

                S = np.zeros(n, dtype=np.float64)
                S[pivot] = math.sqrt(d[pivot])

                rows = p[k + 1:]
                if rows.size > 0:
                    S[rows] = update(evaluator, factor, rows, pivot, S[pivot])

                active = p[k:]
                d[active] -= S[active] ** 2
                tr = float(np.sum(d[active]))

                factor.add_col(S)
                history.append(tr)

                if verbose:
                    print(f"Iteration: {k} | Trace: {tr}")

                k += 1

        if tr < 0.0:
            warnings_list.append(
                f"Residual trace {tr:.3e} is negative from rounding; reported as 0"
            )

        with timer.section('assembly'):
            L = factor.to_dense()
            pivots = p.copy()
            pivots.flags.writeable = False

        if verbose:
            print(f"Stopped after {k} iterations ({termination}), trace {max(tr, 0.0)}")

        timer.stop()

        params = CholeskyParams(
            factor=L,
            pivots=pivots,
            trace=max(tr, 0.0),
            rank=k,
            initial_trace=initial_trace,
            trace_history=tuple(history),
        )

        return Result(
            params=params,
            info={
                'method': 'pivoted_cholesky',
                'stopping': repr(stopping),
                'tolerance': tolerance,
                'max_rank': max_rank,
                'termination': termination,
                'n': n,
                'raw_trace': tr,
                **(extra_info or {}),
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


def _check_diagonal(d: NDArray[np.floating[Any]], n: int) -> None:
    """The kernel diagonal must be finite and non-negative."""
    if d.shape != (n,):
        raise DimensionError(f"diagonal: expected shape ({n},), got {d.shape}")
    check_finite(d, 'diagonal')
    negative = np.flatnonzero(d < 0)
    if negative.size > 0:
        i = int(negative[0])
        raise NotPositiveSemidefiniteError(
            f"Kernel diagonal must be non-negative; k({i}, {i}) = {d[i]:.6e}",
            index=i,
            value=float(d[i]),
        )
