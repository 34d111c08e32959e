"""
Core protocols for pylowrank.

Structural interfaces for kernels and backends. Any object with the
right methods satisfies them; nothing needs to subclass.
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class KernelFunction(Protocol):
    """
    A symmetric positive-semidefinite pairwise function.

    k(a, b) must equal k(b, a), and the matrix [k(x_i, x_j)] over any finite
    set of elements must be positive semidefinite. The return value is a
    float for scalar kernels and a square array for matrix-valued kernels.
    """

    def __call__(self, a: Any, b: Any) -> Any:
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Each backend takes a domain-specific design and produces a Result with
    a domain-specific payload. Backends are stateless apart from
    construction-time configuration (e.g. worker count).
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{execution}_{algorithm}'
        Examples: 'cpu_pivoted_cholesky', 'threaded_pivoted_cholesky'
        """
        ...

    def solve(self, design: D, **kwargs: Any) -> 'Result[P]':
        """
        Execute the computation.

        Raises:
            ValidationError: If the design or options are invalid
            NumericalError: If numerical issues prevent a solution
        """
        ...
