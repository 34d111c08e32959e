"""
Result envelope shared by the factorization and eigen-extraction backends.

Each backend fills a frozen Result[P] with its own payload P plus common
bookkeeping: an info dict (termination reason, tolerance, rank), optional
section timings, the backend name and a tuple of warnings.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific payload (factor, pivots, eigenpairs, ...)
        info: Structured metadata (method, termination, tolerance, ...)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=CholeskyParams(...),
        ...     info={'method': 'pivoted_cholesky', 'termination': 'tolerance'},
        ...     timing={'total_seconds': 0.01, 'iterations': 0.008},
        ...     backend_name='cpu_pivoted_cholesky'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
