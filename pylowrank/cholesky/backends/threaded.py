"""
Threaded backend for the pivoted Cholesky factorization.

Iterations stay sequential. Within an iteration the remaining rows are
split into contiguous chunks and the column update for each chunk runs on
a thread pool (fan-out); every chunk reads committed factor columns only
and writes a disjoint slice of the new column. All chunks join before the
diagonal downdate and trace reduction (fan-in).

Worth it when kernel evaluation dominates and releases the GIL
(NumPy-vectorized kernels); the kernel callable must be thread-safe.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylowrank.core.result import Result
from pylowrank.core.validation import check_positive_int
from pylowrank.cholesky.criteria import StoppingCriterion
from pylowrank.cholesky.design import CholeskyDesign
from pylowrank.cholesky.kernels import KernelEvaluator
from pylowrank.cholesky.solution import CholeskyParams
from pylowrank.cholesky._factor import PivotedCholeskyFactor
from pylowrank.cholesky.backends.cpu import CPUPivotedCholeskyBackend, update_rows


class ThreadedPivotedCholeskyBackend(CPUPivotedCholeskyBackend):
    """
    Pivoted Cholesky with a data-parallel column update.

    Produces the same pivots and factor as the CPU backend.

    Parameters
    ----------
    n_workers : int or None
        Thread pool size. None uses os.cpu_count().
    min_rows_per_task : int
        Rows below which a chunk is not split further; an iteration with
        fewer than two chunks' worth of rows runs inline.
    """

    def __init__(self, n_workers: int | None = None, min_rows_per_task: int = 256):
        if n_workers is None:
            n_workers = os.cpu_count() or 1
        self._n_workers = check_positive_int(n_workers, 'n_workers')
        self._min_rows = check_positive_int(min_rows_per_task, 'min_rows_per_task')

    @property
    def name(self) -> str:
        return 'threaded_pivoted_cholesky'

    @property
    def n_workers(self) -> int:
        return self._n_workers

    def solve(
        self,
        design: CholeskyDesign,
        *,
        stopping: StoppingCriterion,
        verbose: bool = False,
    ) -> Result[CholeskyParams]:
        if verbose:
            print(f"Thread pool: {self._n_workers} workers")
        with ThreadPoolExecutor(max_workers=self._n_workers) as executor:
            return self._run(
                design,
                stopping,
                verbose,
                partial(self._update_parallel, executor),
                extra_info={'n_workers': self._n_workers},
            )

    def _update_parallel(
        self,
        executor: ThreadPoolExecutor,
        evaluator: KernelEvaluator,
        factor: PivotedCholeskyFactor,
        rows: NDArray[np.integer[Any]],
        pivot: int,
        pivot_value: float,
    ) -> NDArray[np.floating[Any]]:
        n_chunks = min(self._n_workers, rows.size // self._min_rows)
        if n_chunks < 2:
            return update_rows(evaluator, factor, rows, pivot, pivot_value)

        out = np.empty(rows.size, dtype=np.float64)
        bounds = np.linspace(0, rows.size, n_chunks + 1).astype(int)

        def work(start: int, stop: int) -> None:
            out[start:stop] = update_rows(
                evaluator, factor, rows[start:stop], pivot, pivot_value
            )

        futures = [
            executor.submit(work, int(start), int(stop))
            for start, stop in zip(bounds[:-1], bounds[1:])
        ]
        for future in futures:
            # re-raises any exception from the worker
            future.result()
        return out
