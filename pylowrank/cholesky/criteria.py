"""
Stopping criteria for the pivoted Cholesky factorization.

A criterion is one of three frozen variants. resolve_bounds() turns any of
them into the pair (trace tolerance, maximum rank) that drives the loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pylowrank.core.exceptions import ValidationError
from pylowrank.core.validation import check_positive, check_positive_int
from pylowrank.core.compute.tolerances import NUMBER_OF_EIGENFUNCTIONS_TOLERANCE


@dataclass(frozen=True)
class AbsoluteTolerance:
    """Stop once the residual trace falls below ``tol``."""
    tol: float

    def __post_init__(self):
        object.__setattr__(self, 'tol', check_positive(self.tol, 'AbsoluteTolerance.tol'))


@dataclass(frozen=True)
class RelativeTolerance:
    """Stop once the residual trace falls below ``tol`` times the initial trace."""
    tol: float

    def __post_init__(self):
        object.__setattr__(self, 'tol', check_positive(self.tol, 'RelativeTolerance.tol'))


@dataclass(frozen=True)
class NumberOfEigenfunctions:
    """Stop after ``n`` pivots (fewer if the matrix is exhausted first)."""
    n: int

    def __post_init__(self):
        object.__setattr__(self, 'n', check_positive_int(self.n, 'NumberOfEigenfunctions.n'))


StoppingCriterion = Union[AbsoluteTolerance, RelativeTolerance, NumberOfEigenfunctions]


def resolve_bounds(
    criterion: StoppingCriterion,
    initial_trace: float,
    n: int,
) -> tuple[float, int]:
    """
    Derive the loop bounds for a criterion.

    Parameters
    ----------
    criterion : StoppingCriterion
        One of AbsoluteTolerance, RelativeTolerance, NumberOfEigenfunctions.
    initial_trace : float
        Sum of the kernel diagonal over all n elements.
    n : int
        Size of the index set.

    Returns
    -------
    tolerance : float
        The loop continues while the residual trace is >= tolerance.
    max_rank : int
        Upper bound on the number of iterations (never more than n).
    """
    if isinstance(criterion, AbsoluteTolerance):
        return criterion.tol, n
    if isinstance(criterion, RelativeTolerance):
        return criterion.tol * initial_trace, n
    if isinstance(criterion, NumberOfEigenfunctions):
        return NUMBER_OF_EIGENFUNCTIONS_TOLERANCE, min(criterion.n, n)
    raise ValidationError(
        f"stopping: expected AbsoluteTolerance, RelativeTolerance or "
        f"NumberOfEigenfunctions, got {type(criterion).__name__}"
    )


def check_criterion(criterion) -> StoppingCriterion:
    """Verify ``criterion`` is one of the known variants."""
    if not isinstance(criterion, (AbsoluteTolerance, RelativeTolerance, NumberOfEigenfunctions)):
        raise ValidationError(
            f"stopping: expected AbsoluteTolerance, RelativeTolerance or "
            f"NumberOfEigenfunctions, got {type(criterion).__name__}"
        )
    return criterion
