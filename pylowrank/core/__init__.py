"""
Core infrastructure for pylowrank.

Shared abstractions used by the cholesky and eigen submodules.

Key components:
    protocols: KernelFunction, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, dense linear algebra, optimizers
"""

from pylowrank.core.protocols import KernelFunction, Backend
from pylowrank.core.result import Result
from pylowrank.core.exceptions import (
    PyLowRankError,
    ValidationError,
    DimensionError,
    NumericalError,
    NotPositiveSemidefiniteError,
    DecompositionError,
    ConvergenceError,
)

__all__ = [
    # Protocols
    "KernelFunction",
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyLowRankError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "NotPositiveSemidefiniteError",
    "DecompositionError",
    "ConvergenceError",
]
