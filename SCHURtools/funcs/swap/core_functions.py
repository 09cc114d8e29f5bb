from numba import njit
import numpy as np
from scipy import linalg
from .constants import *
from ..small_solver.core_functions import (
    lu_complete_pivot_nb_core,
    solve_lu_complete_pivot_nb_core
)

##########################################################################################
# Core numba JIT functions for the Sylvester equations of a block swap
##########################################################################################


@njit([solve_sylvester_sig], cache=True)
def solve_sylvester_nb_core(K, rhs, smin, max_steps, x):
    """
    Solve K x = scale * rhs by LU with complete pivoting followed by at most
    max_steps steps of residual correction.

    A correction step is skipped (and refinement stops) if solving for it
    would require a further rescaling of the right-hand side.

    Args:
        K: (m, m) Kronecker-form matrix
        rhs: (m,) right-hand side
        smin: pivot floor
        max_steps: maximum number of refinement steps
        x: (m,) output solution

    Returns:
        (scale, info): right-hand side scale factor, index of the last
                       perturbed pivot (0 if none)
    """
    m = K.shape[0]
    LU = K.copy()
    ipiv = np.zeros(m, dtype=np.int64)
    jpiv = np.zeros(m, dtype=np.int64)
    info = lu_complete_pivot_nb_core(LU, ipiv, jpiv, smin)

    for i in range(m):
        x[i] = rhs[i]
    scale = solve_lu_complete_pivot_nb_core(LU, ipiv, jpiv, x)

    r = np.empty(m)
    for step in range(max_steps):
        rnorm = 0.0
        xnorm = 0.0
        for i in range(m):
            s = scale * rhs[i]
            for j in range(m):
                s -= K[i, j] * x[j]
            r[i] = s
            rnorm = max(rnorm, abs(s))
            xnorm = max(xnorm, abs(x[i]))
        if rnorm <= EPS * xnorm:
            break
        if solve_lu_complete_pivot_nb_core(LU, ipiv, jpiv, r) != 1.0:
            break
        for i in range(m):
            x[i] += r[i]
    return scale, info


##########################################################################################
# Core numpy functions for the Sylvester equations of a block swap
##########################################################################################


def solve_sylvester_np_core(
    K: np.ndarray,
    rhs: np.ndarray,
    smin: float,
    max_steps: int) -> tuple:
    """
    NumPy/SciPy version of solve_sylvester_nb_core. The pivot floor is
    applied to the smallest singular value; no rhs scaling is performed.

    Returns:
        (x, scale, info)
    """
    info = 0
    smallest = np.linalg.svd(K, compute_uv=False)[-1]
    if smallest < max(smin, SMLNUM):
        K = K + max(smin, SMLNUM) * np.eye(K.shape[0])
        info = 1
    lu_piv = linalg.lu_factor(K)
    x = linalg.lu_solve(lu_piv, rhs)
    for _ in range(max_steps):
        r = rhs - K @ x
        if np.max(np.abs(r)) <= EPS * np.max(np.abs(x)):
            break
        x = x + linalg.lu_solve(lu_piv, r)
    return x, 1.0, info


def sylvester_system_standard(
    A11: np.ndarray,
    A12: np.ndarray,
    A22: np.ndarray) -> tuple:
    """
    Kronecker form of A11 X - X A22 = A12 (column-major vec).

    Returns:
        (K, rhs): (pq, pq) matrix and (pq,) right-hand side
    """
    p = A11.shape[0]
    q = A22.shape[0]
    K = np.kron(np.eye(q), A11) - np.kron(A22.T, np.eye(p))
    return K, A12.ravel(order='F').copy()


def sylvester_system_generalized(
    A11: np.ndarray,
    A12: np.ndarray,
    A22: np.ndarray,
    B11: np.ndarray,
    B12: np.ndarray,
    B22: np.ndarray) -> tuple:
    """
    Kronecker form of the coupled equations

        A11 R - L A22 = A12
        B11 R - L B22 = B12

    with unknowns [vec(R); vec(L)].

    Returns:
        (K, rhs): (2pq, 2pq) matrix and (2pq,) right-hand side
    """
    p = A11.shape[0]
    q = A22.shape[0]
    Ip = np.eye(p)
    Iq = np.eye(q)
    K = np.block([
        [np.kron(Iq, A11), -np.kron(A22.T, Ip)],
        [np.kron(Iq, B11), -np.kron(B22.T, Ip)]])
    rhs = np.concatenate([A12.ravel(order='F'), B12.ravel(order='F')])
    return K, rhs


def invariant_basis(
    X: np.ndarray,
    scale: float) -> np.ndarray:
    """
    Orthogonal (m, m) matrix whose leading q columns span range([-X; scale*I]).
    """
    p, q = X.shape
    W = np.vstack([-X, scale * np.eye(q)])
    U, _ = linalg.qr(W)
    return U


def givens_swap_1x1(
    a: float,
    b: float,
    d: float) -> np.ndarray:
    """
    Rotation U with U^T [[a, b], [0, d]] U = [[d, *], [0, a]].
    """
    r = np.hypot(b, d - a)
    if r == 0.0:
        return np.eye(2)
    cs = b / r
    sn = (d - a) / r
    return np.array([[cs, -sn], [sn, cs]])
