from numba import types
import numpy as np

##############################################################################
# Global constants
##############################################################################

SAFMIN = np.finfo(np.float64).tiny      # smallest normal number
ULP = np.finfo(np.float64).eps          # relative spacing (eps * base)
EPS = 0.5 * ULP                         # unit roundoff
SMLNUM = 2.0 * SAFMIN                   # pivot floor used by the small solvers
BIGNUM = 1.0 / SMLNUM                   # overflow threshold for the scaled solves

##############################################################################
# Type signatures for Numba functions
##############################################################################

# LU factorisation with complete pivoting of a small (<= 8x8) Kronecker system
lu_complete_pivot_sig = types.int64(
    types.float64[:,:],     # K: (m, m), overwritten by L\U
    types.int64[:],         # ipiv: (m,) row interchanges
    types.int64[:],         # jpiv: (m,) column interchanges
    types.float64,          # smin: pivot floor
)

# Solve with the factors above, scaling the right-hand side against overflow
solve_lu_complete_pivot_sig = types.float64(
    types.float64[:,:],     # LU: (m, m)
    types.int64[:],         # ipiv: (m,)
    types.int64[:],         # jpiv: (m,)
    types.float64[:],       # rhs: (m,), overwritten by the solution
)
