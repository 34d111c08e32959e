"""
Tests for the kernel adapters and CholeskyDesign construction.
"""

import numpy as np
import pytest

from pylowrank.cholesky import (
    AbsoluteTolerance,
    CallableKernel,
    CholeskyDesign,
    MatrixKernel,
    MatrixValuedKernel,
    NumberOfEigenfunctions,
    PointKernel,
    pivoted_cholesky,
)
from pylowrank.core.exceptions import DimensionError, ValidationError


BLOCK = np.array([[2.0, 0.5], [0.5, 1.0]])


def separable_kernel(gaussian):
    """Matrix-valued kernel k(x, y) = g(x, y) * BLOCK."""
    return lambda x, y: gaussian(x, y) * BLOCK


class TestMatrixKernel:

    def test_entries(self, spd_matrix):
        k = MatrixKernel(spd_matrix)
        assert k.size == 30
        assert k(3, 7) == spd_matrix[3, 7]
        np.testing.assert_array_equal(k.diagonal(), np.diag(spd_matrix))
        rows = np.array([0, 5, 9])
        np.testing.assert_array_equal(k.column(rows, 2), spd_matrix[rows, 2])

    def test_diagonal_is_a_copy(self, spd_matrix):
        k = MatrixKernel(spd_matrix)
        d = k.diagonal()
        d[:] = 0.0
        assert k(0, 0) == spd_matrix[0, 0]


class TestPointKernel:

    def test_matches_dense_gram(self, points_1d, gaussian, gram):
        k = PointKernel(gaussian, points_1d)
        G = gram(np.vstack(points_1d))
        assert k.size == 50
        np.testing.assert_allclose(k.diagonal(), np.ones(50))
        rows = np.arange(10, 20)
        np.testing.assert_allclose(k.column(rows, 4), G[rows, 4], rtol=1e-14)

    def test_factorization_matches_dense(self, points_1d, gaussian, gram):
        G = gram(np.vstack(points_1d))
        sol = pivoted_cholesky(
            CholeskyDesign.from_kernel(gaussian, points_1d),
            stopping=AbsoluteTolerance(1e-10),
        )
        assert sol.rank < 50
        np.testing.assert_allclose(sol.approximation(), G, atol=1e-8)

    def test_empty_points(self, gaussian):
        with pytest.raises(ValidationError, match="at least 1"):
            PointKernel(gaussian, [])

    def test_kernel_must_be_callable(self, points_1d):
        with pytest.raises(ValidationError, match="kernel"):
            PointKernel(np.eye(2), points_1d)


class TestMatrixValuedKernel:

    def test_flat_indexing_is_point_major(self, gaussian):
        pts = [np.array([0.0]), np.array([0.5]), np.array([1.0])]
        k = MatrixValuedKernel(separable_kernel(gaussian), pts, output_dim=2)
        assert k.size == 6
        # position 3 -> point 1, component 1; position 4 -> point 2, component 0
        assert k(3, 4) == pytest.approx(gaussian(pts[1], pts[2]) * BLOCK[1, 0])
        np.testing.assert_allclose(k.diagonal(), [2.0, 1.0, 2.0, 1.0, 2.0, 1.0])

    def test_column_matches_kron(self, gaussian, gram, rng):
        pts = list(rng.uniform(size=(6, 2)))
        k = MatrixValuedKernel(separable_kernel(gaussian), pts, output_dim=2)
        full = np.kron(gram(np.vstack(pts)), BLOCK)
        rows = np.array([0, 3, 4, 7, 11])
        np.testing.assert_allclose(k.column(rows, 5), full[rows, 5], rtol=1e-13)

    def test_factorization_approximates_kron(self, gaussian, gram, rng):
        pts = list(rng.uniform(size=(8, 2)))
        full = np.kron(gram(np.vstack(pts)), BLOCK)
        design = CholeskyDesign.from_matrix_valued_kernel(
            separable_kernel(gaussian), pts, output_dim=2
        )
        sol = pivoted_cholesky(design, stopping=AbsoluteTolerance(1e-10))
        assert sol.L.shape[0] == 16
        np.testing.assert_allclose(sol.approximation(), full, atol=1e-8)
        assert design.metadata == {
            'n': 16, 'source': 'matrix_valued_kernel', 'n_points': 8, 'output_dim': 2,
        }

    def test_wrong_block_shape(self, gaussian):
        pts = [np.array([0.0]), np.array([1.0])]
        k = MatrixValuedKernel(lambda x, y: np.eye(3), pts, output_dim=2)
        with pytest.raises(DimensionError, match=r"\(2, 2\) block"):
            pivoted_cholesky(k, stopping=AbsoluteTolerance(1e-8))

    def test_bad_output_dim(self, gaussian):
        with pytest.raises(ValidationError, match="output_dim"):
            MatrixValuedKernel(separable_kernel(gaussian), [np.zeros(1)], output_dim=0)


class TestCallableKernel:

    def test_opaque_indices(self):
        words = ["a", "bb", "ccc", "dddd"]

        def k(u, v):
            # rank-one plus identity: PSD
            return len(u) * len(v) + (1.0 if u == v else 0.0)

        design = CholeskyDesign.from_callable(k, words)
        assert isinstance(design.evaluator, CallableKernel)
        assert design.evaluator.indices is words
        sol = pivoted_cholesky(design, stopping=NumberOfEigenfunctions(4))
        expected = np.array([[k(u, v) for v in words] for u in words])
        np.testing.assert_allclose(sol.approximation(), expected, rtol=1e-12)
        # the longest word has the largest diagonal
        assert sol.p[0] == 3


class TestDesign:

    def test_from_matrix_list(self):
        design = CholeskyDesign.from_matrix([[2.0, 1.0], [1.0, 2.0]])
        assert design.n == 2
        assert design.source == 'matrix'
        assert repr(design) == "CholeskyDesign(n=2, source='matrix')"

    def test_coerce_passthrough(self):
        design = CholeskyDesign.from_matrix(np.eye(2))
        assert CholeskyDesign.coerce(design) is design

    def test_coerce_evaluator(self):
        design = CholeskyDesign.coerce(MatrixKernel(np.eye(3)))
        assert design.source == 'evaluator'
        assert design.n == 3

    def test_from_evaluator_rejects_other(self):
        with pytest.raises(ValidationError, match="KernelEvaluator"):
            CholeskyDesign.from_evaluator(np.eye(2))
