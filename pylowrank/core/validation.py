"""
Fail-fast input checks.

Every check raises on the first problem it finds and names the offending
parameter in the message; none of them repairs its input. The only
conversion performed is integer -> float64 in check_array.
"""

import math
import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pylowrank.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Convert ``array`` to a real floating-point ndarray.

    Integer and unsigned input is cast to float64; float input keeps its
    dtype. Object, string, boolean and complex input is refused.

    Raises:
        ValidationError: If the input is not real numeric data
    """
    try:
        arr = np.asarray(array)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: not convertible to an array ({e})") from e

    kind = arr.dtype
    if kind == object:
        raise ValidationError(
            f"{name}: object dtype (ragged or mixed-type input); numeric data required"
        )
    if np.issubdtype(kind, np.complexfloating):
        raise ValidationError(f"{name}: complex dtype {kind} is not supported")
    if not np.issubdtype(kind, np.number):
        raise ValidationError(f"{name}: non-numeric dtype {kind}")

    if np.issubdtype(kind, np.floating):
        return arr
    return arr.astype(np.float64)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """Raise ValidationError if ``array`` holds any NaN or Inf."""
    finite = np.isfinite(array)
    if finite.all():
        return
    n_nan = int(np.isnan(array).sum())
    n_inf = int(finite.size - finite.sum()) - n_nan
    raise ValidationError(f"{name}: non-finite values ({n_nan} NaN, {n_inf} Inf)")


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Raise DimensionError unless ``array`` is a matrix."""
    if array.ndim != 2:
        raise DimensionError(
            f"{name}: expected 2D array, got {array.ndim}D with shape {array.shape}"
        )


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Raises:
        DimensionError: If the row and column counts differ
    """
    rows, cols = array.shape
    if rows != cols:
        raise DimensionError(
            f"{name}: expected a square matrix, got shape {array.shape}"
        )


def check_symmetric(
    array: NDArray[np.floating[Any]],
    name: str,
    rtol: float,
    atol: float = 0.0,
) -> None:
    """
    Verify a square matrix equals its transpose within tolerance.

    Raises:
        ValidationError: If the matrix is not symmetric
    """
    if not np.allclose(array, array.T, rtol=rtol, atol=atol):
        worst = float(np.max(np.abs(array - array.T)))
        raise ValidationError(
            f"{name}: matrix is not symmetric (max |A - A'| = {worst:.3e})"
        )


def check_non_empty(items, name: str) -> int:
    """
    Verify a sequence has at least one element and return its length.

    Raises:
        ValidationError: If the sequence is empty or has no length
    """
    try:
        n = len(items)
    except TypeError as e:
        raise ValidationError(f"{name}: expected a sized sequence, got {type(items).__name__}") from e
    if n < 1:
        raise ValidationError(f"{name}: requires at least 1 element, got 0")
    return n


def check_positive(value: float, name: str) -> float:
    """
    Verify a scalar is a finite real number strictly greater than zero.

    Returns:
        The value as float

    Raises:
        ValidationError: If value is not a finite positive real
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name}: expected a real number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{name}: must be finite, got {value}")
    if value <= 0:
        raise ValidationError(f"{name}: must be > 0, got {value}")
    return value


def check_positive_int(value: int, name: str) -> int:
    """
    Verify a scalar is an integer >= 1.

    Raises:
        ValidationError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name}: expected an integer, got {type(value).__name__}")
    if value < 1:
        raise ValidationError(f"{name}: must be >= 1, got {value}")
    return int(value)
