"""
Tests for pivoted_cholesky() on dense matrices.

Validates the factorization guarantees:
    - reconstruction bound: trace(A) - tr == trace(L L')
    - non-increasing residual trace across iterations
    - pivots form a permutation, lowest-index tie-break
    - rank cap for NumberOfEigenfunctions
    - exact recovery of low-rank matrices
    - determinism
    - numerical exhaustion is a normal termination
"""

import numpy as np
import pytest

from pylowrank.cholesky import (
    AbsoluteTolerance,
    CholeskyDesign,
    NumberOfEigenfunctions,
    RelativeTolerance,
    pivoted_cholesky,
)
from pylowrank.core.exceptions import (
    DimensionError,
    NotPositiveSemidefiniteError,
    ValidationError,
)
from pylowrank.core.compute.tolerances import EXACT_FP64, TRACE_SLACK


CRITERIA = [
    AbsoluteTolerance(1.0),
    AbsoluteTolerance(1e-10),
    RelativeTolerance(1e-3),
    NumberOfEigenfunctions(5),
]


# ═══════════════════════════════════════════════════════════════════════
# Small scenarios
# ═══════════════════════════════════════════════════════════════════════


class TestScenarios:

    def test_identity_needs_every_pivot(self):
        """Zero off-diagonals: each pivot only removes its own diagonal entry."""
        sol = pivoted_cholesky(np.eye(3), stopping=AbsoluteTolerance(1e-8))
        assert sol.rank == 3
        assert sol.tr == pytest.approx(0.0, abs=1e-15)
        np.testing.assert_array_equal(sol.p, [0, 1, 2])
        np.testing.assert_allclose(sol.L, np.eye(3))
        assert sol.trace_history == (2.0, 1.0, 0.0)

    def test_rank_one_two_by_two(self):
        sol = pivoted_cholesky(
            [[4.0, 2.0], [2.0, 1.0]], stopping=AbsoluteTolerance(1e-12)
        )
        assert sol.rank == 1
        assert sol.L.shape == (2, 1)
        np.testing.assert_allclose(sol.L[:, 0], [2.0, 1.0])
        assert sol.tr == pytest.approx(0.0, abs=1e-15)
        assert sol.termination == 'tolerance'

    def test_unpacks_as_triple(self):
        L, p, tr = pivoted_cholesky(np.eye(2), stopping=NumberOfEigenfunctions(1))
        assert L.shape == (2, 1)
        assert sorted(p) == [0, 1]
        assert tr == pytest.approx(1.0)

    def test_first_pivot_is_largest_diagonal(self):
        A = np.diag([1.0, 5.0, 3.0])
        sol = pivoted_cholesky(A, stopping=NumberOfEigenfunctions(1))
        assert sol.p[0] == 1
        assert sol.L[1, 0] == pytest.approx(np.sqrt(5.0))

    def test_tie_break_takes_lowest_index(self):
        A = np.diag([1.0, 3.0, 3.0, 2.0])
        sol = pivoted_cholesky(A, stopping=NumberOfEigenfunctions(2))
        np.testing.assert_array_equal(sol.selected, [1, 2])


# ═══════════════════════════════════════════════════════════════════════
# Properties over general PSD matrices
# ═══════════════════════════════════════════════════════════════════════


class TestProperties:

    @pytest.mark.parametrize("criterion", CRITERIA, ids=repr)
    def test_reconstruction_bound(self, spd_matrix, criterion):
        sol = pivoted_cholesky(spd_matrix, stopping=criterion)
        explained = np.sum(sol.L ** 2)
        np.testing.assert_allclose(
            np.trace(spd_matrix) - sol.tr,
            explained,
            rtol=EXACT_FP64.rtol,
        )

    @pytest.mark.parametrize("criterion", CRITERIA, ids=repr)
    def test_trace_non_increasing(self, spd_matrix, criterion):
        sol = pivoted_cholesky(spd_matrix, stopping=criterion)
        history = np.array((sol.initial_trace,) + sol.trace_history)
        slack = TRACE_SLACK * max(1.0, sol.initial_trace)
        assert np.all(np.diff(history) <= slack)

    @pytest.mark.parametrize("criterion", CRITERIA, ids=repr)
    def test_pivots_are_permutation(self, spd_matrix, criterion):
        sol = pivoted_cholesky(spd_matrix, stopping=criterion)
        np.testing.assert_array_equal(np.sort(sol.p), np.arange(spd_matrix.shape[0]))

    @pytest.mark.parametrize("m", [1, 5, 29, 30, 45])
    def test_rank_cap(self, spd_matrix, m):
        sol = pivoted_cholesky(spd_matrix, stopping=NumberOfEigenfunctions(m))
        n = spd_matrix.shape[0]
        assert sol.L.shape == (n, min(m, n))
        assert sol.rank == min(m, n)
        assert sol.termination == ('max_rank' if m < n else 'full_rank')

    def test_full_rank_reproduces_matrix(self, spd_matrix):
        sol = pivoted_cholesky(spd_matrix, stopping=NumberOfEigenfunctions(30))
        np.testing.assert_allclose(sol.approximation(), spd_matrix, rtol=1e-10, atol=1e-9)

    def test_factor_is_lower_triangular_in_pivot_order(self, spd_matrix):
        sol = pivoted_cholesky(spd_matrix, stopping=NumberOfEigenfunctions(10))
        permuted = sol.L[sol.p]
        assert np.allclose(np.triu(permuted[:10], k=1), 0.0)

    def test_exact_low_rank_recovery(self, low_rank_factor):
        B = low_rank_factor
        A = B @ B.T
        sol = pivoted_cholesky(A, stopping=AbsoluteTolerance(1e-10))
        assert sol.rank <= B.shape[1]
        assert sol.tr == pytest.approx(0.0, abs=1e-10)
        np.testing.assert_allclose(sol.approximation(), A, atol=1e-8)

    def test_relative_tolerance_bound(self, gram):
        pts = np.linspace(0.0, 1.0, 60)[:, None]
        A = gram(pts, sigma=0.3)
        sol = pivoted_cholesky(A, stopping=RelativeTolerance(1e-6))
        assert sol.tr < 1e-6 * np.trace(A)
        assert sol.rank < 60
        assert sol.relative_error_bound() < 1e-6

    def test_deterministic(self, spd_matrix):
        a = pivoted_cholesky(spd_matrix, stopping=RelativeTolerance(1e-2))
        b = pivoted_cholesky(spd_matrix, stopping=RelativeTolerance(1e-2))
        np.testing.assert_array_equal(a.p, b.p)
        assert a.tr == b.tr
        np.testing.assert_array_equal(a.L, b.L)


# ═══════════════════════════════════════════════════════════════════════
# Numerical degeneracy
# ═══════════════════════════════════════════════════════════════════════


class TestDegeneracy:

    def test_zero_matrix_absolute_stops_immediately(self):
        sol = pivoted_cholesky(np.zeros((3, 3)), stopping=AbsoluteTolerance(1e-8))
        assert sol.rank == 0
        assert sol.L.shape == (3, 0)
        assert sol.termination == 'tolerance'

    def test_zero_matrix_relative_is_exhausted(self):
        """Relative tolerance of a zero trace is 0; the first pivot is 0."""
        sol = pivoted_cholesky(np.zeros((3, 3)), stopping=RelativeTolerance(0.1))
        assert sol.rank == 0
        assert sol.termination == 'exhausted'
        assert any("exhausted" in w for w in sol.warnings)
        np.testing.assert_array_equal(np.sort(sol.p), [0, 1, 2])

    def test_rounding_never_produces_nan(self, rng):
        v = rng.standard_normal(25)
        A = np.outer(v, v)
        sol = pivoted_cholesky(A, stopping=NumberOfEigenfunctions(25))
        assert sol.rank >= 1
        assert sol.tr >= 0.0
        assert not np.any(np.isnan(sol.L))
        np.testing.assert_allclose(sol.L[:, 0] ** 2, v ** 2, rtol=1e-10)

    def test_negative_residual_trace_reported_as_zero(self):
        """A matrix that is PSD only up to rounding leaves a negative residual."""
        A = np.array([[1.0, 1.0], [1.0, 1.0 - 1e-14]])
        sol = pivoted_cholesky(A, stopping=NumberOfEigenfunctions(2))
        assert sol.info['raw_trace'] < 0.0
        assert sol.tr == 0.0
        assert sol.rank == 1
        assert sol.termination == 'tolerance'
        assert any("negative from rounding" in w for w in sol.warnings)
        assert not np.any(np.isnan(sol.L))

    @pytest.mark.parametrize("seed", range(10))
    def test_low_rank_rounding_is_clamped(self, seed):
        B = np.random.default_rng(seed).standard_normal((12, 3))
        sol = pivoted_cholesky(B @ B.T, stopping=NumberOfEigenfunctions(12))
        assert sol.tr >= 0.0
        assert not np.any(np.isnan(sol.L))
        negative = sol.info['raw_trace'] < 0.0
        assert negative == any("negative from rounding" in w for w in sol.warnings)
        if negative:
            assert sol.tr == 0.0
        np.testing.assert_allclose(sol.approximation(), B @ B.T, atol=1e-8)


# ═══════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════


class TestValidation:

    def test_non_square(self):
        with pytest.raises(DimensionError, match="square"):
            pivoted_cholesky(np.ones((2, 3)), stopping=AbsoluteTolerance(1e-8))

    def test_not_2d(self):
        with pytest.raises(DimensionError):
            pivoted_cholesky(np.ones(3), stopping=AbsoluteTolerance(1e-8))

    def test_empty(self):
        with pytest.raises(ValidationError):
            pivoted_cholesky(np.zeros((0, 0)), stopping=AbsoluteTolerance(1e-8))

    def test_asymmetric(self):
        with pytest.raises(ValidationError, match="symmetric"):
            pivoted_cholesky([[1.0, 0.5], [0.0, 1.0]], stopping=AbsoluteTolerance(1e-8))

    def test_non_finite(self):
        with pytest.raises(ValidationError, match="non-finite"):
            pivoted_cholesky([[np.inf, 0.0], [0.0, 1.0]], stopping=AbsoluteTolerance(1e-8))

    def test_negative_diagonal(self):
        with pytest.raises(NotPositiveSemidefiniteError) as excinfo:
            pivoted_cholesky([[1.0, 0.0], [0.0, -2.0]], stopping=AbsoluteTolerance(1e-8))
        assert excinfo.value.index == 1
        assert excinfo.value.value == -2.0

    @pytest.mark.parametrize("tol", [0.0, -1.0, float("nan")])
    def test_bad_tolerance(self, tol):
        with pytest.raises(ValidationError):
            AbsoluteTolerance(tol)
        with pytest.raises(ValidationError):
            RelativeTolerance(tol)

    @pytest.mark.parametrize("n", [0, -3])
    def test_bad_eigenfunction_count(self, n):
        with pytest.raises(ValidationError):
            NumberOfEigenfunctions(n)

    def test_unknown_criterion(self):
        with pytest.raises(ValidationError, match="stopping"):
            pivoted_cholesky(np.eye(2), stopping=1e-8)

    def test_unknown_backend(self):
        with pytest.raises(ValidationError, match="Unknown backend"):
            pivoted_cholesky(np.eye(2), stopping=AbsoluteTolerance(1e-8), backend='gpu')

    def test_bare_callable_rejected(self):
        with pytest.raises(ValidationError, match="from_kernel"):
            pivoted_cholesky(lambda x, y: 1.0, stopping=AbsoluteTolerance(1e-8))


# ═══════════════════════════════════════════════════════════════════════
# Result metadata
# ═══════════════════════════════════════════════════════════════════════


class TestSolution:

    def test_accepts_design(self, spd_matrix):
        design = CholeskyDesign.from_matrix(spd_matrix)
        sol = pivoted_cholesky(design, stopping=NumberOfEigenfunctions(3))
        assert sol.rank == 3

    def test_result_is_read_only(self, spd_matrix):
        sol = pivoted_cholesky(spd_matrix, stopping=NumberOfEigenfunctions(3))
        assert not sol.L.flags.writeable
        assert not sol.p.flags.writeable

    def test_info_and_timing(self, spd_matrix):
        sol = pivoted_cholesky(spd_matrix, stopping=NumberOfEigenfunctions(3))
        assert sol.backend_name == 'cpu_pivoted_cholesky'
        assert sol.info['max_rank'] == 3
        assert sol.info['tolerance'] == 1e-15
        assert {'total_seconds', 'diagonal', 'iterations', 'assembly'} <= set(sol.timing)

    def test_verbose_prints_trace(self, capsys):
        pivoted_cholesky(np.eye(2), stopping=AbsoluteTolerance(1e-8), verbose=True)
        out = capsys.readouterr().out
        assert "Iteration: 0 | Trace: 1.0" in out
        assert "Iteration: 1 | Trace: 0.0" in out
        assert out.count("Pivoted Cholesky") == 1
        assert "cpu_pivoted_cholesky" in out

    def test_summary_and_repr(self):
        sol = pivoted_cholesky([[4.0, 2.0], [2.0, 1.0]], stopping=AbsoluteTolerance(1e-8))
        summary = sol.summary()
        assert "rank:" in summary and "residual trace:" in summary
        assert "termination='tolerance'" in repr(sol)
