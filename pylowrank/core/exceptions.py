"""
Exception hierarchy for pylowrank.

Everything the library raises derives from PyLowRankError. Exceptions
carry the offending index, value or matrix as attributes so callers can
report them without parsing messages.

A factorization that runs out of positive residual diagonal is not an
error: it ends with termination 'exhausted' and a warning on the result.
"""


class PyLowRankError(Exception):
    """Base exception for all pylowrank errors."""
    pass


class ValidationError(PyLowRankError):
    """
    Input validation failed.

    Raised before any iteration begins when user-provided inputs
    (tolerances, index sets, scale factors, configurations) are invalid.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised for non-square kernel matrices, non-2D inputs, or kernel
    blocks whose shape does not match the declared output dimension.
    """
    pass


class NumericalError(PyLowRankError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class NotPositiveSemidefiniteError(NumericalError):
    """
    Kernel is not positive semidefinite.

    Raised when the kernel diagonal contains a negative entry, which no
    PSD matrix can have.

    Attributes:
        index: Flat position of the offending diagonal entry
        value: The negative diagonal value
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        value: float | None = None
    ):
        super().__init__(message)
        self.index = index
        self.value = value


class DecompositionError(NumericalError):
    """
    Dense matrix decomposition failed.

    Raised when LAPACK reports that a decomposition (SVD) did not converge.
    Deterministic decompositions are not retried.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        shape: Shape of the matrix that failed to decompose
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        shape: tuple[int, ...] | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.shape = shape


class ConvergenceError(PyLowRankError):
    """
    Iterative optimizer failed to converge.

    Attributes:
        iterations: Number of iterations completed
        final_value: Objective value at the last iterate
        reason: Why convergence failed (e.g., 'max_iterations', 'abnormal')
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_value: float | None = None,
        reason: str | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_value = final_value
        self.reason = reason
