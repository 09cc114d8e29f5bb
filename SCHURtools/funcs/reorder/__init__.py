"""
SCHURtools Reordering Module

Moves selected eigenvalues of a (generalized) real Schur form to its leading
diagonal positions by adjacent block swaps, keeping the orthogonal
accumulators consistent.
"""

# Import main classes
from .operations import ReorderOperations, ReorderResult

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'ReorderOperations',
    'ReorderResult'
]
