from numba import types
from ..small_solver.constants import SAFMIN, ULP, EPS, SMLNUM, BIGNUM

##############################################################################
# Global constants
##############################################################################

MULTPL = 4.0            # split threshold (in units of EPS) for real 2x2 eigenvalues
SAFMN2 = 2.0 ** -511    # rescaling bounds used while standardising 2x2 blocks
SAFMX2 = 1.0 / SAFMN2

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Signature for the diagonal block scan
classify_blocks_sig = types.int64(
    types.float64[:,:],     # S: (ld, ld) quasi-triangular matrix
    types.int64,            # n: order
    types.int64[:],         # starts: (n,) output block positions
    types.int64[:],         # sizes: (n,) output block sizes
)
