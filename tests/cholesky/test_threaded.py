"""
Tests for the threaded backend: same factorization as the CPU backend.
"""

import numpy as np
import pytest

from pylowrank.cholesky import (
    CholeskyDesign,
    NumberOfEigenfunctions,
    RelativeTolerance,
    pivoted_cholesky,
)
from pylowrank.cholesky.backends import (
    CPUPivotedCholeskyBackend,
    ThreadedPivotedCholeskyBackend,
)
from pylowrank.core.exceptions import ValidationError


class TestThreadedBackend:

    @pytest.mark.parametrize("n_workers", [1, 2, 4])
    def test_matches_cpu(self, spd_matrix, n_workers):
        design = CholeskyDesign.from_matrix(spd_matrix)
        criterion = NumberOfEigenfunctions(12)
        cpu = CPUPivotedCholeskyBackend().solve(design, stopping=criterion)
        threaded = ThreadedPivotedCholeskyBackend(
            n_workers=n_workers, min_rows_per_task=1
        ).solve(design, stopping=criterion)
        np.testing.assert_array_equal(threaded.params.pivots, cpu.params.pivots)
        np.testing.assert_allclose(threaded.params.factor, cpu.params.factor, rtol=1e-12, atol=1e-12)
        assert threaded.params.trace == pytest.approx(cpu.params.trace, rel=1e-12)

    def test_point_kernel(self, gaussian, rng):
        points = list(rng.uniform(size=(40, 2)))
        design = CholeskyDesign.from_kernel(gaussian, points)
        criterion = RelativeTolerance(1e-6)
        cpu = CPUPivotedCholeskyBackend().solve(design, stopping=criterion)
        threaded = ThreadedPivotedCholeskyBackend(
            n_workers=3, min_rows_per_task=4
        ).solve(design, stopping=criterion)
        np.testing.assert_array_equal(threaded.params.pivots, cpu.params.pivots)
        assert threaded.info['n_workers'] == 3
        assert 'n_workers' not in cpu.info

    def test_through_solver(self, spd_matrix):
        sol = pivoted_cholesky(
            spd_matrix,
            stopping=NumberOfEigenfunctions(5),
            backend='threaded',
            n_workers=2,
        )
        assert sol.backend_name == 'threaded_pivoted_cholesky'
        assert sol.rank == 5

    def test_worker_exception_propagates(self):
        def kernel(x, y):
            if x != y:
                raise RuntimeError("kernel failure")
            return 1.0

        design = CholeskyDesign.from_kernel(kernel, list(range(10)))
        backend = ThreadedPivotedCholeskyBackend(n_workers=4, min_rows_per_task=1)
        with pytest.raises(RuntimeError, match="kernel failure"):
            backend.solve(design, stopping=NumberOfEigenfunctions(3))

    def test_bad_worker_count(self):
        with pytest.raises(ValidationError, match="n_workers"):
            ThreadedPivotedCholeskyBackend(n_workers=0)
