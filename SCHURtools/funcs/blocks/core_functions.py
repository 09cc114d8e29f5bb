from numba import njit
import numpy as np
import math
from scipy import linalg
from .constants import *

##########################################################################################
# Core numba JIT functions for diagonal block classification
##########################################################################################


@njit([classify_blocks_sig], cache=True)
def classify_blocks_nb_core(S, n, starts, sizes):
    """
    Partition the diagonal of a quasi-triangular matrix into 1x1 and 2x2
    blocks in one left-to-right scan. A non-zero sub-diagonal entry
    S[j+1, j] starts a 2x2 block at j.

    Args:
        S: (ld, ld) quasi-triangular matrix, leading n x n part used
        n: order
        starts: (n,) output, first row of each block
        sizes: (n,) output, size of each block (1 or 2)

    Returns:
        count: number of blocks written
    """
    count = 0
    j = 0
    while j < n:
        starts[count] = j
        if j < n - 1 and S[j + 1, j] != 0.0:
            sizes[count] = 2
            j += 2
        else:
            sizes[count] = 1
            j += 1
        count += 1
    return count


@njit(cache=True)
def _sign(a, b):
    if b >= 0.0:
        return abs(a)
    return -abs(a)


@njit(cache=True)
def standardize_2x2_nb_core(a, b, c, d):
    """
    Schur factorisation of a real 2x2 block

        [a b]   [cs -sn] [aa bb] [ cs sn]
        [c d] = [sn  cs] [cc dd] [-sn cs]

    where either cc = 0 (real eigenvalues, upper triangular result) or
    aa = dd and bb*cc < 0 (complex pair in standard form).

    Returns:
        (aa, bb, cc, dd, rt1r, rt1i, rt2r, rt2i, cs, sn)
    """
    if c == 0.0:
        cs = 1.0
        sn = 0.0
    elif b == 0.0:
        # swap rows and columns
        cs = 0.0
        sn = 1.0
        temp = d
        d = a
        a = temp
        b = -c
        c = 0.0
    elif (a - d) == 0.0 and _sign(1.0, b) != _sign(1.0, c):
        cs = 1.0
        sn = 0.0
    else:
        temp = a - d
        p = 0.5 * temp
        bcmax = max(abs(b), abs(c))
        bcmis = min(abs(b), abs(c)) * _sign(1.0, b) * _sign(1.0, c)
        scale = max(abs(p), bcmax)
        z = (p / scale) * p + (bcmax / scale) * bcmis

        if z >= MULTPL * EPS:
            # real eigenvalues: compute a and d
            z = p + _sign(math.sqrt(scale) * math.sqrt(z), p)
            a = d + z
            d = d - (bcmax / z) * bcmis
            tau = math.hypot(c, z)
            cs = z / tau
            sn = c / tau
            b = b - c
            c = 0.0
        else:
            # complex or nearly equal real eigenvalues: make the diagonal equal
            sigma = b + c
            for _ in range(20):
                scale = max(abs(temp), abs(sigma))
                if scale >= SAFMX2:
                    sigma *= SAFMN2
                    temp *= SAFMN2
                elif scale <= SAFMN2:
                    sigma *= SAFMX2
                    temp *= SAFMX2
                else:
                    break
            p = 0.5 * temp
            tau = math.hypot(sigma, temp)
            cs = math.sqrt(0.5 * (1.0 + abs(sigma) / tau))
            sn = -(p / (tau * cs)) * _sign(1.0, sigma)

            aa = a * cs + b * sn
            bb = -a * sn + b * cs
            cc = c * cs + d * sn
            dd = -c * sn + d * cs

            a = aa * cs + cc * sn
            b = bb * cs + dd * sn
            c = -aa * sn + cc * cs
            d = -bb * sn + dd * cs

            temp = 0.5 * (a + d)
            a = temp
            d = temp

            if c != 0.0:
                if b != 0.0:
                    if _sign(1.0, b) == _sign(1.0, c):
                        # real eigenvalues: reduce to upper triangular form
                        sab = math.sqrt(abs(b))
                        sac = math.sqrt(abs(c))
                        p = _sign(sab * sac, c)
                        tau = 1.0 / math.sqrt(abs(b + c))
                        a = temp + p
                        d = temp - p
                        b = b - c
                        c = 0.0
                        cs1 = sab * tau
                        sn1 = sac * tau
                        temp = cs * cs1 - sn * sn1
                        sn = cs * sn1 + sn * cs1
                        cs = temp
                else:
                    b = -c
                    c = 0.0
                    temp = cs
                    cs = -sn
                    sn = temp

    rt1r = a
    rt2r = d
    if c == 0.0:
        rt1i = 0.0
        rt2i = 0.0
    else:
        rt1i = math.sqrt(abs(b)) * math.sqrt(abs(c))
        rt2i = -rt1i
    return a, b, c, d, rt1r, rt1i, rt2r, rt2i, cs, sn


@njit(cache=True)
def pencil_eigenvalues_2x2_nb_core(s00, s01, s10, s11, t00, t01, t11):
    """
    Eigenvalues of the 2x2 pencil (S, T) with T upper triangular, from the
    scaled characteristic polynomial det(S - lambda*T) = 0.

    Returns:
        (wr1, wr2, wi): for a complex pair wr1 == wr2 and wi > 0 is the
                        imaginary magnitude; for real eigenvalues wi == 0
                        (an infinite eigenvalue is returned as inf)
    """
    snorm = max(max(abs(s00), abs(s01)), max(max(abs(s10), abs(s11)), SAFMIN))
    tnorm = max(max(abs(t00), abs(t01)), max(abs(t11), SAFMIN))
    s00 /= snorm
    s01 /= snorm
    s10 /= snorm
    s11 /= snorm
    t00 /= tnorm
    t01 /= tnorm
    t11 /= tnorm
    ratio = snorm / tnorm

    qa = t00 * t11
    qb = -(s00 * t11 + s11 * t00 - s10 * t01)
    qc = s00 * s11 - s01 * s10

    if qa == 0.0:
        if qb == 0.0:
            return np.inf, np.inf, 0.0
        return (-qc / qb) * ratio, np.inf, 0.0

    disc = qb * qb - 4.0 * qa * qc
    if disc < 0.0:
        wr = -qb / (2.0 * qa)
        wi = math.sqrt(-disc) / (2.0 * abs(qa))
        return wr * ratio, wr * ratio, wi * ratio

    root = math.sqrt(disc)
    r1 = (-qb - _sign(root, qb)) / (2.0 * qa)
    if r1 != 0.0:
        r2 = qc / (qa * r1)
    else:
        r2 = -qb / qa - r1
    return r1 * ratio, r2 * ratio, 0.0


##########################################################################################
# Core numpy functions for diagonal block classification
##########################################################################################


def classify_blocks_np_core(
    S: np.ndarray,
    n: int) -> tuple:
    """
    NumPy version of classify_blocks_nb_core.

    Returns:
        (starts, sizes): int64 arrays with one entry per block
    """
    subdiag = np.concatenate(
        [np.diagonal(S[:n, :n], -1) != 0.0, np.zeros(1, dtype=bool)])
    starts = []
    sizes = []
    j = 0
    while j < n:
        starts.append(j)
        if subdiag[j]:
            sizes.append(2)
            j += 2
        else:
            sizes.append(1)
            j += 1
    return np.array(starts, dtype=np.int64), np.array(sizes, dtype=np.int64)


def block_eigenvalues_np_core(
    S2: np.ndarray,
    T2: np.ndarray = None) -> np.ndarray:
    """
    Eigenvalues of a 2x2 block (or 2x2 pencil) with scipy.
    """
    if T2 is None:
        return np.linalg.eigvals(S2)
    return linalg.eigvals(S2, T2)

