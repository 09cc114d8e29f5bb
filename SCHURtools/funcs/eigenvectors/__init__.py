"""
SCHURtools Eigenvector Module

Scaled back-substitution for the right eigenvectors of a real Schur form
(standard problem) and of a generalized real Schur pencil, with numba
kernels parallel over the requested diagonal blocks.
"""

# Import main classes
from .operations import EigenvectorOperations, EigenvectorResult

# Import core functions for advanced users
from .core_functions import (
    back_substitute_standard_nb_core,
    back_substitute_generalized_nb_core,
    eigenvectors_standard_nb_core,
    eigenvectors_generalized_nb_core,
    back_substitute_np_core,
    eigenvectors_standard_np_core,
    eigenvectors_generalized_np_core
)

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'EigenvectorOperations',
    'EigenvectorResult',
    # Core functions for advanced use
    'back_substitute_standard_nb_core',
    'back_substitute_generalized_nb_core',
    'eigenvectors_standard_nb_core',
    'eigenvectors_generalized_nb_core',
    'back_substitute_np_core',
    'eigenvectors_standard_np_core',
    'eigenvectors_generalized_np_core'
]
