"""
Shared compute infrastructure for pylowrank.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical floors and comparison tiers
    linalg: Dense linear algebra kernels (SVD)
    optimization: Gradient-based optimizers
"""

from pylowrank.core.compute.timing import Timer, timed

__all__ = [
    "Timer",
    "timed",
]
