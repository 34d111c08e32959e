"""
Linear algebra kernels for pylowrank.

All functions follow these conventions:
    - CPU functions use NumPy/SciPy (LAPACK under the hood)
    - Each operation returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    svd: Singular value decomposition of small dense matrices
"""

from pylowrank.core.compute.linalg.svd import (
    SVDResult,
    svd_cpu,
    left_singular_vectors,
)

__all__ = [
    "SVDResult",
    "svd_cpu",
    "left_singular_vectors",
]
