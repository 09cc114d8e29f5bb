from numba import types
from ..small_solver.constants import SAFMIN, ULP, EPS, SMLNUM, BIGNUM

##############################################################################
# Global constants
##############################################################################

SWAP_THRESHOLD_FACTOR = 20.0    # stability threshold, in units of EPS * ||patch||_F
MAX_REFINEMENT_STEPS = 3        # residual corrections of the Sylvester solution

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Solve of the Kronecker form of a (generalized) Sylvester equation
solve_sylvester_sig = types.Tuple((types.float64, types.int64))(
    types.float64[:,:],     # K: (m, m) Kronecker matrix, m <= 8, not modified
    types.float64[:],       # rhs: (m,) right-hand side
    types.float64,          # smin: pivot floor
    types.int64,            # max_steps: cap on refinement steps
    types.float64[:],       # x: (m,) output solution of K x = scale * rhs
)
