"""
SCHURtools Block Swap Module

Swaps two adjacent diagonal blocks of a real Schur form (or of a pencil in
generalized real Schur form) by solving the associated (generalized)
Sylvester equation, with weak and strong stability tests before anything
is written back.
"""

# Import main classes
from .operations import (
    SwapOperations,
    SwapWindow,
    SwapTransform,
    compute_swap_standard,
    compute_swap_generalized,
    apply_swap
)

# Import core functions for advanced users
from .core_functions import (
    solve_sylvester_nb_core,
    solve_sylvester_np_core,
    sylvester_system_standard,
    sylvester_system_generalized
)

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'SwapOperations',
    'SwapWindow',
    'SwapTransform',
    'compute_swap_standard',
    'compute_swap_generalized',
    'apply_swap',
    # Core functions for advanced use
    'solve_sylvester_nb_core',
    'solve_sylvester_np_core',
    'sylvester_system_standard',
    'sylvester_system_generalized'
]
