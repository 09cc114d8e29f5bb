from numba import types
from ..small_solver.constants import SAFMIN, ULP, EPS, SMLNUM, BIGNUM

##############################################################################
# Global constants
##############################################################################

# Per-block outcome codes written by the back-substitution kernels
BLOCK_OK = 0
BLOCK_UNDERFLOW = 1         # cumulative scale fell below SAFMIN, columns zeroed
BLOCK_SINGULAR_PENCIL = 2   # S[k,k] = T[k,k] = 0, unit vector returned

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Signature for the standard back-substitution over a batch of blocks
eigenvectors_standard_sig = types.void(
    types.float64[:,:],     # S: (ld, ld) quasi-triangular matrix
    types.int64,            # n: order
    types.int64[:],         # starts: (nb,) first row of each requested block
    types.int64[:],         # sizes: (nb,) block sizes (1 or 2)
    types.int64[:],         # cols: (nb,) first output column of each block
    types.boolean,          # normalize: scale each vector to unit largest component
    types.float64[:,:],     # Y: (n, ncols) output eigenvectors of S
    types.int64[:],         # status: (nb,) per-block outcome
)

# Signature for the generalized back-substitution over a batch of blocks
eigenvectors_generalized_sig = types.void(
    types.float64[:,:],     # S: (ld, ld) quasi-triangular matrix
    types.float64[:,:],     # T: (ld, ld) upper triangular matrix
    types.int64,            # n: order
    types.int64[:],         # starts: (nb,)
    types.int64[:],         # sizes: (nb,)
    types.int64[:],         # cols: (nb,)
    types.boolean,          # normalize
    types.float64[:,:],     # Y: (n, ncols) output eigenvectors of (S, T)
    types.int64[:],         # status: (nb,)
)
