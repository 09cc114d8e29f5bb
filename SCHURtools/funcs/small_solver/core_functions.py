from numba import njit
import numpy as np
from .constants import *

##########################################################################################
# Core numba JIT functions for small shifted linear systems
##########################################################################################


@njit(cache=True)
def ladiv_nb_core(a, b, c, d):
    """
    Complex division (a + ib) / (c + id) without unnecessary overflow
    (Smith's algorithm).

    Returns:
        (p, q): real and imaginary part of the quotient
    """
    if abs(d) <= abs(c):
        e = d / c
        f = c + d * e
        p = (a + b * e) / f
        q = (b - a * e) / f
    else:
        e = c / d
        f = d + c * e
        p = (b + a * e) / f
        q = (-a + b * e) / f
    return p, q


@njit(cache=True)
def _cabs1(z):
    return abs(z.real) + abs(z.imag)


@njit(cache=True)
def _cinv(z):
    p, q = ladiv_nb_core(1.0, 0.0, z.real, z.imag)
    return complex(p, q)


@njit(cache=True)
def solve_small_system_nb_core(ltrans, na, nw, smin, ca, A, d1, d2, d12, B, wr, wi, X):
    """
    Solve the shifted 1x1 or 2x2 system

        op(ca * A - w * D) X = scale * B,    w = wr + i*wi,  D = [[d1, d12], [0, d2]]

    where op() is the identity or the transpose (ltrans). For nw == 1 the
    system is real (wi is ignored) and only the first column of B and X is
    used; for nw == 2 the columns hold the real and imaginary parts of a
    complex right-hand side and solution.

    The scale factor (0 < scale <= 1) is chosen so that the solution cannot
    overflow. If the effective pivot is smaller than smin it is replaced by
    smin and info = 1 is returned, so the solution stays bounded even for an
    exactly singular system.

    Args:
        ltrans (bool): solve with the transposed coefficient matrix
        na (int): order of the system, 1 or 2
        nw (int): 1 for a real, 2 for a complex right-hand side
        smin (float): lower bound on the pivot magnitude
        ca (float): coefficient of A
        A (np.ndarray): (2, 2) coefficient block, leading na x na part used
        d1, d2, d12 (float): entries of the (upper triangular) shift matrix D
        B (np.ndarray): (2, 2) right-hand side, leading na x nw part used
        wr, wi (float): real and imaginary part of the shift w
        X (np.ndarray): (2, 2) output, leading na x nw part written

    Returns:
        (scale, xnorm, info): scale factor, infinity norm of X
                              (|re| + |im| per entry), perturbation flag
    """
    smini = max(smin, SMLNUM)
    scale = 1.0
    info = 0
    if nw == 1:
        wi = 0.0

    if na == 1:
        csr = ca * A[0, 0] - wr * d1
        csi = -wi * d1
        cnorm = abs(csr) + abs(csi)
        if cnorm < smini:
            csr = smini
            csi = 0.0
            cnorm = smini
            info = 1

        if nw == 1:
            bnorm = abs(B[0, 0])
        else:
            bnorm = abs(B[0, 0]) + abs(B[0, 1])
        if cnorm < 1.0 and bnorm > 1.0:
            if bnorm > BIGNUM * cnorm:
                scale = 1.0 / bnorm

        if nw == 1:
            X[0, 0] = (B[0, 0] * scale) / csr
            X[0, 1] = 0.0
            xnorm = abs(X[0, 0])
        else:
            xr, xi = ladiv_nb_core(scale * B[0, 0], scale * B[0, 1], csr, csi)
            X[0, 0] = xr
            X[0, 1] = xi
            xnorm = abs(xr) + abs(xi)
        return scale, xnorm, info

    # 2x2 system: form the complex coefficient matrix C = op(ca*A - w*D)
    w = complex(wr, wi)
    C = np.empty((2, 2), dtype=np.complex128)
    for r in range(2):
        for c in range(2):
            if ltrans:
                ar = A[c, r]
                rr, cc = c, r
            else:
                ar = A[r, c]
                rr, cc = r, c
            if rr == 0 and cc == 0:
                dr = d1
            elif rr == 1 and cc == 1:
                dr = d2
            elif rr == 0 and cc == 1:
                dr = d12
            else:
                dr = 0.0
            C[r, c] = ca * ar - w * dr

    b = np.empty(2, dtype=np.complex128)
    for r in range(2):
        if nw == 1:
            b[r] = complex(B[r, 0], 0.0)
        else:
            b[r] = complex(B[r, 0], B[r, 1])

    # complete pivoting: largest entry of C
    cmax = 0.0
    ip = 0
    jp = 0
    for r in range(2):
        for c in range(2):
            if _cabs1(C[r, c]) > cmax:
                cmax = _cabs1(C[r, c])
                ip = r
                jp = c

    if cmax < smini:
        # use smini * I
        bnorm = max(_cabs1(b[0]), _cabs1(b[1]))
        if smini < 1.0 and bnorm > 1.0:
            if bnorm > BIGNUM * smini:
                scale = 1.0 / bnorm
        temp = scale / smini
        for r in range(2):
            X[r, 0] = temp * b[r].real
            X[r, 1] = temp * b[r].imag if nw == 2 else 0.0
        return scale, temp * bnorm, 1

    io = 1 - ip
    jo = 1 - jp
    u11 = C[ip, jp]
    u12 = C[ip, jo]
    u11inv = _cinv(u11)
    l21 = C[io, jp] * u11inv
    u22 = C[io, jo] - l21 * u12
    if _cabs1(u22) < smini:
        u22 = complex(smini, 0.0)
        info = 1

    b1 = b[ip]
    b2 = b[io] - l21 * b1
    bbnd = max(_cabs1(b1) * (_cabs1(u22) * _cabs1(u11inv)), _cabs1(b2))
    if bbnd > 1.0 and _cabs1(u22) < 1.0:
        if bbnd >= BIGNUM * _cabs1(u22):
            scale = 1.0 / bbnd

    x2 = (b2 * scale) * _cinv(u22)
    x1 = (b1 * scale - u12 * x2) * u11inv

    xnorm = max(_cabs1(x1), _cabs1(x2))
    if xnorm > 1.0 and cmax > 1.0:
        if xnorm > BIGNUM / cmax:
            temp = cmax / BIGNUM
            x1 = x1 * temp
            x2 = x2 * temp
            xnorm = xnorm * temp
            scale = scale * temp

    # the pivot column jp carries the first eliminated unknown
    X[jp, 0] = x1.real
    X[jo, 0] = x2.real
    if nw == 2:
        X[jp, 1] = x1.imag
        X[jo, 1] = x2.imag
    else:
        X[jp, 1] = 0.0
        X[jo, 1] = 0.0
    return scale, xnorm, info


@njit([lu_complete_pivot_sig], cache=True)
def lu_complete_pivot_nb_core(K, ipiv, jpiv, smin):
    """
    LU factorisation with complete pivoting, P K Q = L U, for the small
    Kronecker-form Sylvester systems. Pivots smaller than smin are replaced
    by smin.

    Args:
        K: (m, m) matrix, overwritten by the unit-lower L and upper U factors
        ipiv: (m,) output row interchanges (row k swapped with ipiv[k])
        jpiv: (m,) output column interchanges (column k swapped with jpiv[k])
        smin: pivot floor

    Returns:
        info: 0, or k+1 if the k'th pivot was perturbed
    """
    m = K.shape[0]
    smini = max(smin, SMLNUM)
    info = 0
    for k in range(m - 1):
        xmax = -1.0
        ip = k
        jp = k
        for i in range(k, m):
            for j in range(k, m):
                if abs(K[i, j]) > xmax:
                    xmax = abs(K[i, j])
                    ip = i
                    jp = j
        ipiv[k] = ip
        jpiv[k] = jp
        if ip != k:
            for j in range(m):
                temp = K[k, j]
                K[k, j] = K[ip, j]
                K[ip, j] = temp
        if jp != k:
            for i in range(m):
                temp = K[i, k]
                K[i, k] = K[i, jp]
                K[i, jp] = temp
        if abs(K[k, k]) < smini:
            K[k, k] = smini
            info = k + 1
        for i in range(k + 1, m):
            K[i, k] = K[i, k] / K[k, k]
            for j in range(k + 1, m):
                K[i, j] -= K[i, k] * K[k, j]

    ipiv[m - 1] = m - 1
    jpiv[m - 1] = m - 1
    if abs(K[m - 1, m - 1]) < smini:
        K[m - 1, m - 1] = smini
        info = m
    return info


@njit([solve_lu_complete_pivot_sig], cache=True)
def solve_lu_complete_pivot_nb_core(LU, ipiv, jpiv, rhs):
    """
    Solve K x = scale * rhs with the factors of lu_complete_pivot_nb_core.

    Returns:
        scale: factor (<= 1) applied to the right-hand side against overflow
    """
    m = LU.shape[0]
    for k in range(m - 1):
        ip = ipiv[k]
        if ip != k:
            temp = rhs[k]
            rhs[k] = rhs[ip]
            rhs[ip] = temp

    # forward substitution with the unit lower factor
    for i in range(1, m):
        for j in range(i):
            rhs[i] -= LU[i, j] * rhs[j]

    scale = 1.0
    rmax = 0.0
    for i in range(m):
        rmax = max(rmax, abs(rhs[i]))
    if 2.0 * SMLNUM * rmax > abs(LU[m - 1, m - 1]):
        temp = 0.5 / rmax
        for i in range(m):
            rhs[i] *= temp
        scale = temp

    for i in range(m - 1, -1, -1):
        temp = 1.0 / LU[i, i]
        rhs[i] *= temp
        for j in range(i + 1, m):
            rhs[i] -= rhs[j] * (LU[i, j] * temp)

    for k in range(m - 2, -1, -1):
        jp = jpiv[k]
        if jp != k:
            temp = rhs[k]
            rhs[k] = rhs[jp]
            rhs[jp] = temp
    return scale


##########################################################################################
# Core numpy functions for small shifted linear systems
##########################################################################################


def solve_small_system_np_core(
    ltrans: bool,
    na: int,
    nw: int,
    smin: float,
    ca: float,
    A: np.ndarray,
    d1: float,
    d2: float,
    d12: float,
    B: np.ndarray,
    wr: float,
    wi: float) -> tuple:
    """
    Reference solve of op(ca * A - w * D) x = scale * b in complex NumPy
    arithmetic, with the pivot floor applied to the smallest singular value.
    b is scaled down (scale < 1) when the solve against the floored pivot
    would overflow.

    Returns:
        (X, scale, info): (na, 2) solution (re, im columns), scale, perturbation flag
    """
    w = complex(wr, wi if nw == 2 else 0.0)
    D = np.array([[d1, d12], [0.0, d2]])[:na, :na]
    C = ca * np.asarray(A, dtype=np.float64)[:na, :na] - w * D
    if ltrans:
        C = C.T
    b = np.asarray(B, dtype=np.float64)[:na, 0].astype(np.complex128)
    if nw == 2:
        b = b + 1j * np.asarray(B, dtype=np.float64)[:na, 1]

    info = 0
    floor = max(smin, SMLNUM)
    smallest = np.linalg.svd(C, compute_uv=False)[-1]
    if smallest < floor:
        C = C + floor * np.eye(na)
        smallest = floor
        info = 1

    scale = 1.0
    bnorm = np.max(np.abs(b.real) + np.abs(b.imag))
    if smallest < 1.0 and bnorm > 1.0 and bnorm > BIGNUM * smallest:
        scale = 1.0 / bnorm
        b = b * scale
    x = np.linalg.solve(C, b)
    X = np.zeros((na, 2))
    X[:, 0] = x.real
    if nw == 2:
        X[:, 1] = x.imag
    return X, scale, info
