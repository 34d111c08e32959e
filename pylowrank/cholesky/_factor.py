"""
Incrementally growing factor storage for the pivoted Cholesky loop.

Columns are appended one per iteration; column i exists only once
iteration i has completed. The storage is written by a single backend
during a run and converted to a read-only dense matrix at the end.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylowrank.core.exceptions import DimensionError


class PivotedCholeskyFactor:
    """
    Column arena of length-``n`` vectors.

    Backed by a preallocated (n, capacity) array that doubles when full,
    so appending is amortized O(n) and the committed columns are always a
    contiguous slice usable in matrix products.
    """

    def __init__(self, n: int, size_hint: int = 20):
        self._n = n
        self._data = np.zeros((n, max(1, min(size_hint, n))), dtype=np.float64)
        self._k = 0

    @property
    def n_rows(self) -> int:
        return self._n

    @property
    def n_cols(self) -> int:
        return self._k

    def __len__(self) -> int:
        return self._k

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        if not 0 <= col < self._k:
            raise IndexError(f"column {col} out of range for factor with {self._k} columns")
        return float(self._data[row, col])

    def col(self, i: int) -> NDArray[np.floating[Any]]:
        if not 0 <= i < self._k:
            raise IndexError(f"column {i} out of range for factor with {self._k} columns")
        return self._data[:, i]

    def rows(self, row_indices) -> NDArray[np.floating[Any]]:
        """Committed part of the given rows, shape (len(row_indices), k)."""
        return self._data[row_indices, :self._k]

    def _check_length(self, vec: NDArray[np.floating[Any]]) -> None:
        if vec.shape != (self._n,):
            raise DimensionError(
                f"column: expected shape ({self._n},), got {vec.shape}"
            )

    def _grow(self) -> None:
        capacity = self._data.shape[1]
        grown = np.zeros((self._n, max(capacity * 2, 1)), dtype=np.float64)
        grown[:, :self._k] = self._data[:, :self._k]
        self._data = grown

    def add_col(self, vec: NDArray[np.floating[Any]]) -> None:
        """Append a column."""
        vec = np.asarray(vec, dtype=np.float64)
        self._check_length(vec)
        if self._k == self._data.shape[1]:
            self._grow()
        self._data[:, self._k] = vec
        self._k += 1

    def set_col(self, i: int, vec: NDArray[np.floating[Any]]) -> None:
        """Overwrite column i, or append when i equals the column count."""
        if not 0 <= i <= self._k:
            raise IndexError(f"column {i} out of range for factor with {self._k} columns")
        if i == self._k:
            self.add_col(vec)
            return
        vec = np.asarray(vec, dtype=np.float64)
        self._check_length(vec)
        self._data[:, i] = vec

    def to_dense(self) -> NDArray[np.floating[Any]]:
        """Committed columns as a read-only (n, k) array."""
        dense = self._data[:, :self._k].copy()
        dense.flags.writeable = False
        return dense
