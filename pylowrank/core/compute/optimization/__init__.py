"""
Optimization utilities for pylowrank.

Gradient-based optimizers over a CostFunction, each exposing an iterator
of per-step states and a minimize() convenience.
"""

from pylowrank.core.compute.optimization._base import (
    CostFunction,
    Optimizer,
    OptimizerState,
)
from pylowrank.core.compute.optimization.lbfgs import (
    LBFGSConfiguration,
    LBFGSOptimizer,
)
from pylowrank.core.compute.optimization.gradient_descent import (
    GradientDescentConfiguration,
    GradientDescentOptimizer,
    golden_section_line_search,
)

__all__ = [
    "CostFunction",
    "Optimizer",
    "OptimizerState",
    "LBFGSConfiguration",
    "LBFGSOptimizer",
    "GradientDescentConfiguration",
    "GradientDescentOptimizer",
    "golden_section_line_search",
]
