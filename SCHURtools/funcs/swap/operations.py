"""
SCHURtools: Block Swap Operations

Swaps two adjacent diagonal blocks of a real Schur form S (or of a pencil
(S, T) in generalized real Schur form) by an orthogonal similarity
(equivalence) transformation on the local patch.

A swap is computed on a copy of the patch first. Only when the weak test
(the new lower-left block is negligible) and the strong test (the
transformation reproduces the original patch) both pass is it written to
the matrices, so a rejected swap leaves every array untouched.

"""

import logging
from typing import NamedTuple, Optional, Tuple
import numpy as np
from scipy import linalg
from .constants import *
from .core_functions import *
from ..blocks.core_functions import standardize_2x2_nb_core

logger = logging.getLogger(__name__)


class SwapWindow(NamedTuple):
    """
    Two adjacent blocks of sizes p and q starting at diagonal position j.

    The local patch is rows/columns j:j+p+q. A transformation of the patch
    also touches the row strip (patch rows, columns to the right) and the
    column strip (rows above, patch columns).
    """
    j: int
    p: int
    q: int

    @property
    def stop(self) -> int:
        return self.j + self.p + self.q

    @property
    def local(self) -> slice:
        return slice(self.j, self.stop)

    def row_strip(self, n: int) -> Tuple[slice, slice]:
        return slice(self.j, self.stop), slice(self.stop, n)

    def column_strip(self) -> Tuple[slice, slice]:
        return slice(0, self.j), slice(self.j, self.stop)


class SwapTransform(NamedTuple):
    """
    An accepted swap: S_local = left^T S[patch] right (same for T), with
    the lower-left block and all sub-diagonal entries outside the new
    2x2 blocks set to exact zeros. In the standard case left is right.
    """
    window: SwapWindow
    left: np.ndarray
    right: np.ndarray
    S_local: np.ndarray
    T_local: Optional[np.ndarray] = None


def _threshold(
    patch: np.ndarray,
    threshold_factor: float) -> float:
    return max(threshold_factor * EPS * np.linalg.norm(patch), SMLNUM)


def _solve(
    K: np.ndarray,
    rhs: np.ndarray,
    smin: float,
    max_refinement_steps: int,
    use_numba: bool) -> Tuple[np.ndarray, float, int]:
    if use_numba:
        x = np.zeros(rhs.shape[0])
        scale, info = solve_sylvester_nb_core(
            np.ascontiguousarray(K), rhs, smin, max_refinement_steps, x)
        return x, scale, info
    return solve_sylvester_np_core(K, rhs, smin, max_refinement_steps)


def _standardize_blocks(
    D: np.ndarray,
    U: np.ndarray,
    starts: Tuple[int, ...],
    use_numba: bool) -> None:
    """
    Standardise the 2x2 blocks of D starting at the given local positions
    (a split into two real eigenvalues leaves an exact zero sub-diagonal),
    accumulating the rotations into U.
    """
    for k in starts:
        blk = slice(k, k + 2)
        if use_numba:
            a, b, c, d, _, _, _, _, cs, sn = standardize_2x2_nb_core(
                D[k, k], D[k, k + 1], D[k + 1, k], D[k + 1, k + 1])
            R = np.array([[cs, -sn], [sn, cs]])
            new = np.array([[a, b], [c, d]])
        else:
            new, R = linalg.schur(D[blk, blk], output='real')
        D[blk, :] = R.T @ D[blk, :]
        D[:, blk] = D[:, blk] @ R
        D[blk, blk] = new
        U[:, blk] = U[:, blk] @ R


def compute_swap_standard(
    S: np.ndarray,
    j: int,
    p: int,
    q: int,
    threshold_factor: float = SWAP_THRESHOLD_FACTOR,
    max_refinement_steps: int = MAX_REFINEMENT_STEPS,
    use_numba: bool = True) -> Optional[SwapTransform]:
    """
    Compute the swap of the adjacent blocks S[j:j+p, j:j+p] and
    S[j+p:j+p+q, j+p:j+p+q].

    Args:
        S: quasi-triangular matrix (not modified)
        j: first diagonal position of the left block
        p, q: sizes of the left and right blocks (1 or 2)
        threshold_factor: stability threshold in units of EPS * ||patch||_F
        max_refinement_steps: cap on Sylvester refinement steps
        use_numba: use the numba Sylvester solver

    Returns:
        SwapTransform, or None if the swap failed a stability test
    """
    window = SwapWindow(j, p, q)
    m = p + q
    D0 = np.array(S[window.local, window.local], dtype=np.float64)
    thresh = _threshold(D0, threshold_factor)

    if p == 1 and q == 1:
        U = givens_swap_1x1(D0[0, 0], D0[0, 1], D0[1, 1])
        D = U.T @ D0 @ U
        D[0, 0] = D0[1, 1]
        D[1, 1] = D0[0, 0]
        D[1, 0] = 0.0
        residual = np.linalg.norm(D0 - U @ D @ U.T)
        if residual > thresh:
            logger.debug("swap at %d (1, 1) rejected: %.3e > %.3e", j, residual, thresh)
            return None
        return SwapTransform(window, U, U, D)

    A11 = D0[:p, :p]
    A12 = D0[:p, p:]
    A22 = D0[p:, p:]
    K, rhs = sylvester_system_standard(A11, A12, A22)
    smin = max(EPS * np.max(np.abs(D0)), SMLNUM)
    x, scale, info = _solve(K, rhs, smin, max_refinement_steps, use_numba)
    if info:
        logger.debug("swap at %d (%d, %d): Sylvester pivot perturbed", j, p, q)

    U = invariant_basis(x.reshape((p, q), order='F'), scale)
    D = U.T @ D0 @ U

    # weak stability test
    lower = np.linalg.norm(D[q:, :q])
    if lower > thresh:
        logger.debug("swap at %d (%d, %d) rejected by the weak test: %.3e > %.3e",
                     j, p, q, lower, thresh)
        return None
    D[q:, :q] = 0.0

    starts = []
    if q == 2:
        starts.append(0)
    if p == 2:
        starts.append(q)
    _standardize_blocks(D, U, tuple(starts), use_numba)
    D[np.tril_indices(m, -2)] = 0.0

    # strong stability test
    residual = np.linalg.norm(D0 - U @ D @ U.T)
    if residual > thresh:
        logger.debug("swap at %d (%d, %d) rejected by the strong test: %.3e > %.3e",
                     j, p, q, residual, thresh)
        return None
    return SwapTransform(window, U, U, D)


def compute_swap_generalized(
    S: np.ndarray,
    T: np.ndarray,
    j: int,
    p: int,
    q: int,
    threshold_factor: float = SWAP_THRESHOLD_FACTOR,
    max_refinement_steps: int = MAX_REFINEMENT_STEPS,
    use_numba: bool = True) -> Optional[SwapTransform]:
    """
    Compute the swap of two adjacent blocks of the pencil (S, T).

    The coupled Sylvester equations A11 R - L A22 = scale*A12,
    B11 R - L B22 = scale*B12 give the right factor from range([-R; scale*I])
    and the left factor from range([-L; scale*I]). The new 2x2 diagonal
    blocks are put back into generalized real Schur form with a 2x2 QZ step.

    Returns:
        SwapTransform, or None if the swap failed a stability test
    """
    window = SwapWindow(j, p, q)
    m = p + q
    A0 = np.array(S[window.local, window.local], dtype=np.float64)
    B0 = np.array(T[window.local, window.local], dtype=np.float64)
    thresha = _threshold(A0, threshold_factor)
    threshb = _threshold(B0, threshold_factor)

    K, rhs = sylvester_system_generalized(
        A0[:p, :p], A0[:p, p:], A0[p:, p:], B0[:p, :p], B0[:p, p:], B0[p:, p:])
    smin = max(EPS * max(np.max(np.abs(A0)), np.max(np.abs(B0))), SMLNUM)
    x, scale, info = _solve(K, rhs, smin, max_refinement_steps, use_numba)
    if info:
        logger.debug("swap at %d (%d, %d): Sylvester pivot perturbed", j, p, q)

    R = x[:p * q].reshape((p, q), order='F')
    L = x[p * q:].reshape((p, q), order='F')
    V = invariant_basis(R, scale)
    U = invariant_basis(L, scale)
    A = U.T @ A0 @ V
    B = U.T @ B0 @ V

    # weak stability test
    lowera = np.linalg.norm(A[q:, :q])
    lowerb = np.linalg.norm(B[q:, :q])
    if lowera > thresha or lowerb > threshb:
        logger.debug("swap at %d (%d, %d) rejected by the weak test: %.3e, %.3e",
                     j, p, q, lowera, lowerb)
        return None
    A[q:, :q] = 0.0
    B[q:, :q] = 0.0

    # restore the diagonal blocks of the new pencil
    for k, size in ((0, q), (q, p)):
        blk = slice(k, k + size)
        if size == 2:
            AA, BB, Qb, Zb = linalg.qz(A[blk, blk], B[blk, blk], output='real')
            A[blk, :] = Qb.T @ A[blk, :]
            B[blk, :] = Qb.T @ B[blk, :]
            A[:, blk] = A[:, blk] @ Zb
            B[:, blk] = B[:, blk] @ Zb
            A[blk, blk] = AA
            B[blk, blk] = np.triu(BB)
            U[:, blk] = U[:, blk] @ Qb
            V[:, blk] = V[:, blk] @ Zb
    A[np.tril_indices(m, -2)] = 0.0
    B[np.tril_indices(m, -1)] = 0.0

    # strong stability test
    resa = np.linalg.norm(A0 - U @ A @ V.T)
    resb = np.linalg.norm(B0 - U @ B @ V.T)
    if resa > thresha or resb > threshb:
        logger.debug("swap at %d (%d, %d) rejected by the strong test: %.3e, %.3e",
                     j, p, q, resa, resb)
        return None
    return SwapTransform(window, U, V, A, B)


def apply_swap(
    transform: SwapTransform,
    S: np.ndarray,
    Q: Optional[np.ndarray],
    T: Optional[np.ndarray] = None,
    Z: Optional[np.ndarray] = None,
    n: Optional[int] = None) -> None:
    """
    Write an accepted swap into S (and T) and accumulate it into Q (and Z).

    Args:
        transform: result of compute_swap_standard / compute_swap_generalized
        S, T: matrices updated in place, leading n x n part
        Q, Z: left and right accumulators, updated in place (Q may be None)
        n: order, defaults to S.shape[0]
    """
    if n is None:
        n = S.shape[0]
    w = transform.window
    U = transform.left
    V = transform.right
    loc = w.local
    rows, right_cols = w.row_strip(n)
    above, cols = w.column_strip()

    S[loc, loc] = transform.S_local
    S[rows, right_cols] = U.T @ S[rows, right_cols]
    S[above, cols] = S[above, cols] @ V
    if T is not None:
        T[loc, loc] = transform.T_local
        T[rows, right_cols] = U.T @ T[rows, right_cols]
        T[above, cols] = T[above, cols] @ V
    if Q is not None:
        Q[:n, loc] = Q[:n, loc] @ U
    if Z is not None:
        Z[:n, loc] = Z[:n, loc] @ V


class SwapOperations:
    """
    A class to swap adjacent diagonal blocks of a (generalized) real Schur form.
    """

    def __init__(
        self,
        use_numba: bool = True,
        threshold_factor: float = SWAP_THRESHOLD_FACTOR,
        max_refinement_steps: int = MAX_REFINEMENT_STEPS) -> None:
        """
        Initialize the SwapOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
            threshold_factor (float, optional): Stability threshold of the
                swap tests in units of EPS * ||patch||_F. Defaults to 20.
            max_refinement_steps (int, optional): Cap on the residual
                corrections of the Sylvester solution. Defaults to 3.
        """
        self.use_numba = use_numba
        self.threshold_factor = threshold_factor
        self.max_refinement_steps = max_refinement_steps


    def swap(
        self,
        S: np.ndarray,
        Q: Optional[np.ndarray],
        j: int,
        p: int,
        q: int,
        T: Optional[np.ndarray] = None,
        Z: Optional[np.ndarray] = None,
        n: Optional[int] = None) -> bool:
        """
        Swap the blocks of sizes p and q starting at diagonal position j.

        Returns:
            True if the swap was applied, False if it was rejected (nothing
            is modified in that case)
        """
        if T is None:
            transform = compute_swap_standard(
                S, j, p, q, self.threshold_factor, self.max_refinement_steps, self.use_numba)
        else:
            transform = compute_swap_generalized(
                S, T, j, p, q, self.threshold_factor, self.max_refinement_steps, self.use_numba)
        if transform is None:
            logger.warning("rejected ill-conditioned swap of blocks (%d, %d) at position %d",
                           p, q, j)
            return False
        apply_swap(transform, S, Q, T, Z, n)
        return True
