"""
Wall-clock timing for backends.

A section that is entered repeatedly (once per factorization iteration,
say) accumulates: the reported value is the summed time, and ``counts``
tells how often it was entered.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating section timer.

    Example:
        timer = Timer()
        timer.start()
        with timer.section('diagonal'):
            d = evaluator.diagonal()
        for k in range(rank):
            with timer.section('iterations'):
                ...
        timer.stop()

        timer.result()   # {'total_seconds': ..., 'diagonal': ..., 'iterations': ...}
        timer.counts()   # {'diagonal': 1, 'iterations': rank}
    """

    def __init__(self) -> None:
        self._elapsed: dict[str, float] = {}
        self._entered: dict[str, int] = {}
        self._t0: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        self._t0 = time.perf_counter()

    def stop(self) -> None:
        if self._t0 is None:
            raise RuntimeError("Timer.stop(): timer was stopped before start()")
        self._total = time.perf_counter() - self._t0

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent in the block to section ``name``."""
        t = time.perf_counter()
        try:
            yield
        finally:
            self._elapsed[name] = self._elapsed.get(name, 0.0) + (time.perf_counter() - t)
            self._entered[name] = self._entered.get(name, 0) + 1

    def counts(self) -> dict[str, int]:
        """Number of times each section was entered."""
        return dict(self._entered)

    def result(self) -> dict[str, float]:
        """
        Total and per-section seconds.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._total is None:
            raise RuntimeError("Timer.result(): no total before stop() is called")
        return {'total_seconds': self._total, **self._elapsed}


@contextmanager
def timed() -> Iterator[Timer]:
    """
    Time a whole block:

        with timed() as timer:
            sol = pivoted_cholesky(A, stopping=AbsoluteTolerance(1e-8))
        timer.result()['total_seconds']
    """
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
