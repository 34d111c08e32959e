"""
Numerical tolerance constants.

Defines the fixed numerical floors used by the factorizer and the
comparison tiers used by the test suite:
- NUMBER_OF_EIGENFUNCTIONS_TOLERANCE: trace floor when the stopping
  criterion only fixes the rank
- SYMMETRY_RTOL / SYMMETRY_ATOL: admissible asymmetry of a dense kernel matrix
- TRACE_SLACK: admissible increase of the trace between iterations
"""

from dataclasses import dataclass


# A rank-only criterion still stops once the residual trace is numerically gone.
NUMBER_OF_EIGENFUNCTIONS_TOLERANCE = 1e-15

SYMMETRY_RTOL = 1e-10
SYMMETRY_ATOL = 1e-12

# Floating point drift allowed in the per-iteration trace sequence.
TRACE_SLACK = 1e-12


@dataclass(frozen=True)
class ToleranceTier:
    """Relative and absolute tolerance pair for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Identities that hold exactly in exact arithmetic (reconstruction bound,
# trace bookkeeping)
EXACT_FP64 = ToleranceTier(
    rtol=1e-9,
    atol=1e-10,
    name='exact_fp64',
    description='double precision, algebraic identity',
)

# Approximations whose error is governed by the stopping tolerance
# (eigenvalues against a dense eigensolver on a truncated factor)
APPROXIMATE_FP64 = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='approximate_fp64',
    description='double precision, truncated low-rank approximation',
)
