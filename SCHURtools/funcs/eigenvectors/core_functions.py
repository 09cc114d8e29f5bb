from typing import Optional
from numba import njit, prange
import numpy as np
from .constants import *
from ..small_solver.core_functions import (
    solve_small_system_nb_core,
    solve_small_system_np_core
)
from ..blocks.core_functions import (
    standardize_2x2_nb_core,
    pencil_eigenvalues_2x2_nb_core,
    block_eigenvalues_np_core
)

##########################################################################################
# Core numba JIT functions for eigenvector back-substitution
##########################################################################################


@njit(cache=True)
def _pivot_null_vector(m00r, m00i, m01r, m01i, m10r, m10i, m11r, m11i):
    """
    Null vector of a singular complex 2x2 matrix M, taken from its larger row
    and scaled to unit largest component.
    """
    row0 = abs(m00r) + abs(m00i) + abs(m01r) + abs(m01i)
    row1 = abs(m10r) + abs(m10i) + abs(m11r) + abs(m11i)
    if row0 >= row1:
        x0r, x0i, x1r, x1i = m01r, m01i, -m00r, -m00i
    else:
        x0r, x0i, x1r, x1i = m11r, m11i, -m10r, -m10i
    s = max(abs(x0r) + abs(x0i), abs(x1r) + abs(x1i))
    if s == 0.0:
        return 1.0, 0.0, 0.0, 0.0
    return x0r / s, x0i / s, x1r / s, x1i / s


@njit(cache=True)
def _store_vector(xr, xi, m, size, col, normalize, Y):
    emax = 0.0
    for i in range(m):
        emax = max(emax, abs(xr[i]) + abs(xi[i]))
    remax = 1.0
    if normalize and emax > 0.0:
        remax = 1.0 / emax
    for i in range(Y.shape[0]):
        if i < m:
            Y[i, col] = xr[i] * remax
            if size == 2:
                Y[i, col + 1] = xi[i] * remax
        else:
            Y[i, col] = 0.0
            if size == 2:
                Y[i, col + 1] = 0.0


@njit(cache=True)
def _zero_columns(size, col, Y):
    for i in range(Y.shape[0]):
        Y[i, col] = 0.0
        if size == 2:
            Y[i, col + 1] = 0.0


@njit(cache=True)
def back_substitute_standard_nb_core(S, k, size, cnorm, xr, xi):
    """
    Eigenvector of the quasi-triangular S for the block at rows k:k+size.

    Solves (S - lambda*I) x = 0 on the leading k+size rows, block by block
    from row k-1 up to row 0. Every shifted block solve may scale the whole
    partial vector down to avoid overflow; the scaling is multiplicative and
    never increases.

    Args:
        S: (ld, ld) quasi-triangular matrix
        k: first row of the block
        size: 1 (real eigenvalue) or 2 (conjugate pair, eigenvalue with
              positive imaginary part)
        cnorm: (n,) 1-norms of the strictly upper part of each column of S
        xr, xi: (k+size,) output real and imaginary parts

    Returns:
        ok: False if the cumulative scale underflowed
    """
    A2 = np.zeros((2, 2))
    B2 = np.zeros((2, 2))
    X2 = np.zeros((2, 2))
    m = k + size

    if size == 1:
        wr = S[k, k]
        wi = 0.0
        nw = 1
        xr[k] = 1.0
        for i in range(k):
            xr[i] = -S[i, k]
    else:
        res = standardize_2x2_nb_core(S[k, k], S[k, k + 1], S[k + 1, k], S[k + 1, k + 1])
        wr = res[4]
        wi = abs(res[5])
        nw = 2
        x0r, x0i, x1r, x1i = _pivot_null_vector(
            S[k, k] - wr, -wi, S[k, k + 1], 0.0,
            S[k + 1, k], 0.0, S[k + 1, k + 1] - wr, -wi)
        xr[k] = x0r
        xi[k] = x0i
        xr[k + 1] = x1r
        xi[k + 1] = x1i
        for i in range(k):
            xr[i] = -(S[i, k] * x0r + S[i, k + 1] * x1r)
            xi[i] = -(S[i, k] * x0i + S[i, k + 1] * x1i)

    smin = max(ULP * (abs(wr) + abs(wi)), SMLNUM)
    total = 1.0
    j = k - 1
    while j >= 0:
        if j > 0 and S[j, j - 1] != 0.0:
            j1 = j - 1
        else:
            j1 = j
        na = j - j1 + 1
        for r in range(na):
            B2[r, 0] = xr[j1 + r]
            B2[r, 1] = xi[j1 + r]
            for c in range(na):
                A2[r, c] = S[j1 + r, j1 + c]

        scale, xnorm, info = solve_small_system_nb_core(
            False, na, nw, smin, 1.0, A2, 1.0, 1.0, 0.0, B2, wr, wi, X2)

        # the update below grows the remaining entries by up to xnorm * cnorm
        if xnorm > 1.0:
            beta = cnorm[j]
            if na == 2:
                beta = max(cnorm[j1], cnorm[j])
            if beta > BIGNUM / xnorm:
                for r in range(na):
                    X2[r, 0] /= xnorm
                    X2[r, 1] /= xnorm
                scale /= xnorm

        if scale != 1.0:
            total *= scale
            if total < SAFMIN:
                return False
            for i in range(m):
                xr[i] *= scale
                xi[i] *= scale

        for r in range(na):
            xr[j1 + r] = X2[r, 0]
            xi[j1 + r] = X2[r, 1]
        for i in range(j1):
            for r in range(na):
                xr[i] -= S[i, j1 + r] * X2[r, 0]
                if nw == 2:
                    xi[i] -= S[i, j1 + r] * X2[r, 1]
        j = j1 - 1
    return True


@njit([eigenvectors_standard_sig], parallel=True, cache=True)
def eigenvectors_standard_nb_core(S, n, starts, sizes, cols, normalize, Y, status):
    """
    Eigenvectors of the quasi-triangular S for a batch of diagonal blocks.

    Blocks are independent and processed in parallel. A real eigenvalue
    fills column cols[b]; a pair fills cols[b] (real part) and cols[b]+1
    (imaginary part) with the eigenvector of the eigenvalue with positive
    imaginary part.

    Args:
        S: (ld, ld) quasi-triangular matrix
        n: order
        starts, sizes, cols: (nb,) block positions, sizes, output columns
        normalize: scale each vector to unit largest component (|re| + |im|)
        Y: (n, ncols) output
        status: (nb,) output, BLOCK_OK or BLOCK_UNDERFLOW
    """
    cnorm = np.zeros(n)
    for j in range(1, n):
        s = 0.0
        for i in range(j):
            s += abs(S[i, j])
        cnorm[j] = s

    for b in prange(starts.shape[0]):
        k = starts[b]
        size = sizes[b]
        m = k + size
        xr = np.zeros(m)
        xi = np.zeros(m)
        if back_substitute_standard_nb_core(S, k, size, cnorm, xr, xi):
            status[b] = BLOCK_OK
            _store_vector(xr, xi, m, size, cols[b], normalize, Y)
        else:
            status[b] = BLOCK_UNDERFLOW
            _zero_columns(size, cols[b], Y)


@njit(cache=True)
def back_substitute_generalized_nb_core(S, T, k, size, anorm, bnorm, snorm, tnorm, xr, xi):
    """
    Eigenvector of the pencil (S, T) for the block at rows k:k+size.

    Solves (acoef*S - bcoef*T) x = 0 where bcoef/acoef is the eigenvalue,
    scaled so that |acoef|*anorm and |bcoef|*bnorm stay bounded. An infinite
    eigenvalue (T[k,k] = 0) is handled by acoef = 0. The growth guard
    combines the S-side and T-side column norms.

    Args:
        S, T: (ld, ld) generalized real Schur pair
        k, size: block position and size
        anorm, bnorm: 1-norms of S and T
        snorm, tnorm: (n,) 1-norms of the strictly upper part of each column
        xr, xi: (k+size,) output real and imaginary parts

    Returns:
        status: BLOCK_OK, BLOCK_UNDERFLOW or BLOCK_SINGULAR_PENCIL
    """
    A2 = np.zeros((2, 2))
    B2 = np.zeros((2, 2))
    X2 = np.zeros((2, 2))
    m = k + size
    ascale = 1.0 / max(anorm, SAFMIN)
    bscale = 1.0 / max(bnorm, SAFMIN)

    if size == 1:
        sk = S[k, k]
        tk = T[k, k]
        if abs(sk) <= SAFMIN and abs(tk) <= SAFMIN:
            xr[k] = 1.0
            return BLOCK_SINGULAR_PENCIL
        temp = 1.0 / max(max(abs(sk) * ascale, abs(tk) * bscale), SAFMIN)
        acoef = ((temp * tk) * bscale) * ascale
        bcr = ((temp * sk) * ascale) * bscale
        bci = 0.0
        nw = 1
        xr[k] = 1.0
        for i in range(k):
            xr[i] = -(acoef * S[i, k] - bcr * T[i, k])
    else:
        wr, _, wi = pencil_eigenvalues_2x2_nb_core(
            S[k, k], S[k, k + 1], S[k + 1, k], S[k + 1, k + 1],
            T[k, k], T[k, k + 1], T[k + 1, k + 1])
        temp = 1.0 / max(max((abs(wr) + abs(wi)) * ascale, bscale), SAFMIN)
        acoef = (temp * bscale) * ascale
        bcr = ((temp * wr) * ascale) * bscale
        bci = ((temp * wi) * ascale) * bscale
        nw = 2
        x0r, x0i, x1r, x1i = _pivot_null_vector(
            acoef * S[k, k] - bcr * T[k, k], -bci * T[k, k],
            acoef * S[k, k + 1] - bcr * T[k, k + 1], -bci * T[k, k + 1],
            acoef * S[k + 1, k], 0.0,
            acoef * S[k + 1, k + 1] - bcr * T[k + 1, k + 1], -bci * T[k + 1, k + 1])
        xr[k] = x0r
        xi[k] = x0i
        xr[k + 1] = x1r
        xi[k + 1] = x1i
        for i in range(k):
            sr = 0.0
            si = 0.0
            for r in range(2):
                mr = acoef * S[i, k + r] - bcr * T[i, k + r]
                mi = -bci * T[i, k + r]
                sr += mr * xr[k + r] - mi * xi[k + r]
                si += mr * xi[k + r] + mi * xr[k + r]
            xr[i] = -sr
            xi[i] = -si

    bcabs = abs(bcr) + abs(bci)
    dmin = max(max(ULP * abs(acoef) * anorm, ULP * bcabs * bnorm), SAFMIN)
    total = 1.0
    j = k - 1
    while j >= 0:
        if j > 0 and S[j, j - 1] != 0.0:
            j1 = j - 1
        else:
            j1 = j
        na = j - j1 + 1
        for r in range(na):
            B2[r, 0] = xr[j1 + r]
            B2[r, 1] = xi[j1 + r]
            for c in range(na):
                A2[r, c] = S[j1 + r, j1 + c]
        d12 = 0.0
        if na == 2:
            d12 = T[j1, j]

        scale, xnorm, info = solve_small_system_nb_core(
            False, na, nw, dmin, acoef, A2, T[j1, j1], T[j, j], d12, B2, bcr, bci, X2)

        # S-side and T-side contributions of the update below
        if xnorm > 1.0:
            cn = abs(acoef) * snorm[j] + bcabs * tnorm[j]
            if na == 2:
                cn = max(cn, abs(acoef) * snorm[j1] + bcabs * tnorm[j1])
            if cn > BIGNUM / xnorm:
                for r in range(na):
                    X2[r, 0] /= xnorm
                    X2[r, 1] /= xnorm
                scale /= xnorm

        if scale != 1.0:
            total *= scale
            if total < SAFMIN:
                return BLOCK_UNDERFLOW
            for i in range(m):
                xr[i] *= scale
                xi[i] *= scale

        for r in range(na):
            xr[j1 + r] = X2[r, 0]
            xi[j1 + r] = X2[r, 1]
        for i in range(j1):
            for r in range(na):
                mr = acoef * S[i, j1 + r] - bcr * T[i, j1 + r]
                mi = -bci * T[i, j1 + r]
                xr[i] -= mr * X2[r, 0] - mi * X2[r, 1]
                xi[i] -= mr * X2[r, 1] + mi * X2[r, 0]
        j = j1 - 1
    return BLOCK_OK


@njit([eigenvectors_generalized_sig], parallel=True, cache=True)
def eigenvectors_generalized_nb_core(S, T, n, starts, sizes, cols, normalize, Y, status):
    """
    Right eigenvectors of the pencil (S, T) for a batch of diagonal blocks,
    processed in parallel. Column layout as in eigenvectors_standard_nb_core.

    Args:
        S, T: (ld, ld) generalized real Schur pair
        n: order
        starts, sizes, cols: (nb,) block positions, sizes, output columns
        normalize: scale each vector to unit largest component
        Y: (n, ncols) output
        status: (nb,) output per-block outcome
    """
    snorm = np.zeros(n)
    tnorm = np.zeros(n)
    anorm = 0.0
    bnorm = 0.0
    for j in range(n):
        s = 0.0
        t = 0.0
        for i in range(j):
            s += abs(S[i, j])
            t += abs(T[i, j])
        snorm[j] = s
        tnorm[j] = t
        sj = s + abs(S[j, j])
        if j < n - 1:
            sj += abs(S[j + 1, j])
        anorm = max(anorm, sj)
        bnorm = max(bnorm, t + abs(T[j, j]))

    for b in prange(starts.shape[0]):
        k = starts[b]
        size = sizes[b]
        m = k + size
        xr = np.zeros(m)
        xi = np.zeros(m)
        res = back_substitute_generalized_nb_core(
            S, T, k, size, anorm, bnorm, snorm, tnorm, xr, xi)
        status[b] = res
        if res == BLOCK_UNDERFLOW:
            _zero_columns(size, cols[b], Y)
        else:
            _store_vector(xr, xi, m, size, cols[b], normalize, Y)


##########################################################################################
# Core numpy functions for eigenvector back-substitution
##########################################################################################


def _null_vector_np(M2: np.ndarray) -> np.ndarray:
    """Null vector of a singular complex 2x2 matrix from its larger row."""
    rows = np.abs(M2.real).sum(axis=1) + np.abs(M2.imag).sum(axis=1)
    if rows[0] >= rows[1]:
        v = np.array([M2[0, 1], -M2[0, 0]])
    else:
        v = np.array([M2[1, 1], -M2[1, 0]])
    return v / np.max(np.abs(v.real) + np.abs(v.imag))


def back_substitute_np_core(
    S: np.ndarray,
    T: np.ndarray,
    k: int,
    size: int,
    alpha: complex,
    beta: float,
    smin: float) -> Optional[np.ndarray]:
    """
    Reference back-substitution for (beta*S - alpha*T) x = 0 in complex
    arithmetic (T = None for the standard problem).

    The partial vector is rescaled whenever a block solve or the update of
    the rows above would overflow. If the accumulated scale falls below
    SAFMIN the vector cannot be represented and None is returned.

    Returns:
        x: (k+size,) complex eigenvector, unnormalised, or None on underflow
    """
    m = k + size
    Tm = np.eye(m) if T is None else T[:m, :m]
    M = beta * S[:m, :m] - alpha * Tm
    cnorm = np.sum(np.abs(np.triu(M, 1)), axis=0)
    x = np.zeros(m, dtype=np.complex128)
    if size == 1:
        x[k] = 1.0
    else:
        x[k:m] = _null_vector_np(M[k:m, k:m])
    rhs = -M[:k, k:m] @ x[k:m]

    total = 1.0
    B2 = np.zeros((2, 2))
    j = k - 1
    while j >= 0:
        j1 = j - 1 if (j > 0 and S[j, j - 1] != 0.0) else j
        na = j - j1 + 1
        B2[:na, 0] = rhs[j1:j + 1].real
        B2[:na, 1] = rhs[j1:j + 1].imag
        d12 = Tm[j1, j] if na == 2 else 0.0
        X2, scale, _ = solve_small_system_np_core(
            False, na, 2, smin, beta, S[j1:j + 1, j1:j + 1],
            Tm[j1, j1], Tm[j, j], d12, B2, alpha.real, alpha.imag)
        y = X2[:na, 0] + 1j * X2[:na, 1]

        # growth guard for the update of the rows above
        xnorm = np.max(np.abs(y.real) + np.abs(y.imag))
        if xnorm > 1.0 and np.max(cnorm[j1:j + 1]) > BIGNUM / xnorm:
            y = y / xnorm
            scale /= xnorm

        if scale != 1.0:
            total *= scale
            if total < SAFMIN:
                return None
            x *= scale
            rhs *= scale
        x[j1:j + 1] = y
        rhs[:j1] -= M[:j1, j1:j + 1] @ y
        j = j1 - 1
    return x


def _zero_columns_np(
    size: int,
    col: int,
    Y: np.ndarray) -> None:
    Y[:, col:col + size] = 0.0


def _store_vector_np(
    x: np.ndarray,
    size: int,
    col: int,
    normalize: bool,
    Y: np.ndarray) -> None:
    m = x.shape[0]
    if normalize:
        emax = np.max(np.abs(x.real) + np.abs(x.imag))
        if emax > 0.0:
            x = x / emax
    Y[:, col] = 0.0
    Y[:m, col] = x.real
    if size == 2:
        Y[:, col + 1] = 0.0
        Y[:m, col + 1] = x.imag


def eigenvectors_standard_np_core(
    S: np.ndarray,
    n: int,
    starts: np.ndarray,
    sizes: np.ndarray,
    cols: np.ndarray,
    normalize: bool,
    Y: np.ndarray,
    status: np.ndarray) -> None:
    """
    NumPy version of eigenvectors_standard_nb_core.
    """
    for b, (k, size, col) in enumerate(zip(starts.tolist(), sizes.tolist(), cols.tolist())):
        if size == 1:
            alpha = complex(S[k, k])
        else:
            lam = block_eigenvalues_np_core(S[k:k + 2, k:k + 2])
            alpha = complex(lam[np.argmax(lam.imag)])
        smin = max(ULP * (abs(alpha.real) + abs(alpha.imag)), SMLNUM)
        x = back_substitute_np_core(S, None, k, size, alpha, 1.0, smin)
        if x is None:
            _zero_columns_np(size, col, Y)
            status[b] = BLOCK_UNDERFLOW
            continue
        _store_vector_np(x, size, col, normalize, Y)
        status[b] = BLOCK_OK


def eigenvectors_generalized_np_core(
    S: np.ndarray,
    T: np.ndarray,
    n: int,
    starts: np.ndarray,
    sizes: np.ndarray,
    cols: np.ndarray,
    normalize: bool,
    Y: np.ndarray,
    status: np.ndarray) -> None:
    """
    NumPy version of eigenvectors_generalized_nb_core.
    """
    anorm = max(np.linalg.norm(np.triu(S[:n, :n], -1), 1), SAFMIN)
    bnorm = max(np.linalg.norm(np.triu(T[:n, :n]), 1), SAFMIN)
    for b, (k, size, col) in enumerate(zip(starts.tolist(), sizes.tolist(), cols.tolist())):
        if size == 1:
            if abs(S[k, k]) <= SAFMIN and abs(T[k, k]) <= SAFMIN:
                x = np.zeros(k + 1, dtype=np.complex128)
                x[k] = 1.0
                _store_vector_np(x, size, col, normalize, Y)
                status[b] = BLOCK_SINGULAR_PENCIL
                continue
            alpha = complex(S[k, k])
            beta = float(T[k, k])
        else:
            lam = block_eigenvalues_np_core(
                S[k:k + 2, k:k + 2], np.triu(T[k:k + 2, k:k + 2]))
            alpha = complex(lam[np.argmax(lam.imag)])
            beta = 1.0
        smin = max(ULP * abs(beta) * anorm, ULP * abs(alpha) * bnorm, SAFMIN)
        x = back_substitute_np_core(S, T, k, size, alpha, beta, smin)
        if x is None:
            _zero_columns_np(size, col, Y)
            status[b] = BLOCK_UNDERFLOW
            continue
        _store_vector_np(x, size, col, normalize, Y)
        status[b] = BLOCK_OK
