"""
SCHURtools Small-System Solver Module

Provides the scaled 1x1/2x2 shifted solver used by the back-substitution
engines and the complete-pivoting LU used by the block-swap primitive for
the Kronecker form of the (generalized) Sylvester equation.
"""

# Import main classes
from .operations import SmallSystemOperations

# Import core functions for advanced users
from .core_functions import (
    ladiv_nb_core,
    solve_small_system_nb_core,
    lu_complete_pivot_nb_core,
    solve_lu_complete_pivot_nb_core,
    solve_small_system_np_core
)

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'SmallSystemOperations',
    # Core functions for advanced use
    'ladiv_nb_core',
    'solve_small_system_nb_core',
    'lu_complete_pivot_nb_core',
    'solve_lu_complete_pivot_nb_core',
    'solve_small_system_np_core'
]
