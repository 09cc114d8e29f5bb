"""
SCHURtools Selection Module

Predicate-driven selection of the eigenvalues of a (generalized) real Schur
form; a conjugate pair is always selected or deselected as a whole.
"""

# Import main classes
from .operations import SelectionOperations, NO_ARG

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'SelectionOperations',
    'NO_ARG'
]
