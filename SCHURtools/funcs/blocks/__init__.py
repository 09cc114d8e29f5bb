"""
SCHURtools Block Classifier Module

Partitions the diagonal of a quasi-triangular matrix (or of a pencil in
generalized Schur form) into tagged 1x1 and 2x2 blocks and computes the
eigenvalues they encode.
"""

# Import main classes
from .operations import BlockOperations, BlockKind, SchurBlock

# Import core functions for advanced users
from .core_functions import (
    classify_blocks_nb_core,
    standardize_2x2_nb_core,
    pencil_eigenvalues_2x2_nb_core,
    classify_blocks_np_core,
    block_eigenvalues_np_core
)

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'BlockOperations',
    'BlockKind',
    'SchurBlock',
    # Core functions for advanced use
    'classify_blocks_nb_core',
    'standardize_2x2_nb_core',
    'pencil_eigenvalues_2x2_nb_core',
    'classify_blocks_np_core',
    'block_eigenvalues_np_core'
]
