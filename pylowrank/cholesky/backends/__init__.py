"""
Pivoted Cholesky backends.
"""

from pylowrank.cholesky.backends.cpu import CPUPivotedCholeskyBackend
from pylowrank.cholesky.backends.threaded import ThreadedPivotedCholeskyBackend

__all__ = ['CPUPivotedCholeskyBackend', 'ThreadedPivotedCholeskyBackend']
