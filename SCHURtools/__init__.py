"""
SCHURtools

Eigenvectors and eigenvalue reordering for real (generalized) Schur forms,
with numba-compiled kernels and NumPy/SciPy reference paths.
"""

from .errors import Status, InvalidArgumentError, InconsistentSchurFormError
from .schur_funcs import SchurOperations
from .funcs.blocks import BlockOperations, BlockKind, SchurBlock
from .funcs.small_solver import SmallSystemOperations
from .funcs.eigenvectors import EigenvectorOperations, EigenvectorResult
from .funcs.swap import SwapOperations, SwapWindow, SwapTransform
from .funcs.reorder import ReorderOperations, ReorderResult
from .funcs.selection import SelectionOperations

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'SchurOperations',
    'Status',
    'InvalidArgumentError',
    'InconsistentSchurFormError',
    'BlockOperations',
    'BlockKind',
    'SchurBlock',
    'SmallSystemOperations',
    'EigenvectorOperations',
    'EigenvectorResult',
    'SwapOperations',
    'SwapWindow',
    'SwapTransform',
    'ReorderOperations',
    'ReorderResult',
    'SelectionOperations'
]
