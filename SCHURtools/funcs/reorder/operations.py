"""
SCHURtools: Reordering Operations

Moves the selected eigenvalues of a real Schur form S (or of a pencil (S, T)
in generalized real Schur form) to the leading diagonal positions by a
sequence of adjacent block swaps, accumulating the orthogonal
transformations into Q (and Z).

The relative order within the selected group and within the unselected
group is preserved. Each selected block is bubbled leftward, one swap at
a time, until it reaches the end of the already ordered prefix.

"""

import logging
from typing import NamedTuple, Optional
import numpy as np
from ..blocks import BlockOperations
from ..swap import SwapOperations
from ..swap.constants import SWAP_THRESHOLD_FACTOR, MAX_REFINEMENT_STEPS
from ..utils import check_matrix, check_selection
from ...errors import Status

logger = logging.getLogger(__name__)


class ReorderResult(NamedTuple):
    """
    Attributes:
        status: SUCCESS or PARTIAL_REORDERING
        selected: the caller's selection array, now marking exactly the
                  leading positions that hold selected eigenvalues
        real, imag: eigenvalues of the reordered form
        beta: eigenvalue denominators (generalized case, else None)
        num_selected: number of correctly placed selected eigenvalues
        num_swaps: number of adjacent block swaps performed
    """
    status: Status
    selected: np.ndarray
    real: np.ndarray
    imag: np.ndarray
    beta: Optional[np.ndarray]
    num_selected: int
    num_swaps: int


class ReorderOperations:
    """
    A class to reorder a (generalized) real Schur form.
    """

    def __init__(
        self,
        use_numba: bool = True,
        swap_threshold_factor: float = SWAP_THRESHOLD_FACTOR,
        max_refinement_steps: int = MAX_REFINEMENT_STEPS) -> None:
        """
        Initialize the ReorderOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
            swap_threshold_factor (float, optional): Stability threshold of
                the swap tests. Defaults to 20.
            max_refinement_steps (int, optional): Cap on the Sylvester
                refinement steps per swap. Defaults to 3.
        """
        self.use_numba = use_numba
        self.block_ops = BlockOperations(use_numba=use_numba)
        self.swap_ops = SwapOperations(
            use_numba=use_numba,
            threshold_factor=swap_threshold_factor,
            max_refinement_steps=max_refinement_steps)


    def reorder(
        self,
        selected: np.ndarray,
        S: np.ndarray,
        Q: np.ndarray) -> ReorderResult:
        """
        Reorder S so that the selected eigenvalues lead its diagonal.

        Args:
            selected: (n,) selection array, updated in place
            S: quasi-triangular matrix, updated in place
            Q: Schur vectors, updated in place to Q*U

        Returns:
            ReorderResult

        Raises:
            InvalidArgumentError: position 1 (selected), 2 (S) or 3 (Q)
            InconsistentSchurFormError: if S is not in real Schur form
        """
        selected = check_selection(selected, 1, writable=True)
        n = selected.shape[0]
        check_matrix(S, 2, n, "S", writable=True)
        check_matrix(Q, 3, n, "Q", writable=True)
        return self._reorder(selected, S, None, Q, None, n)


    def reorder_generalized(
        self,
        selected: np.ndarray,
        S: np.ndarray,
        T: np.ndarray,
        Q: np.ndarray,
        Z: np.ndarray) -> ReorderResult:
        """
        Reorder the pencil (S, T) so that the selected eigenvalues lead its
        diagonal. Q and Z are updated to Q*U and Z*V.

        Raises:
            InvalidArgumentError: position 1 (selected), 2 (S), 3 (T),
                4 (Q) or 5 (Z)
            InconsistentSchurFormError: if (S, T) is not in generalized real
                Schur form
        """
        selected = check_selection(selected, 1, writable=True)
        n = selected.shape[0]
        check_matrix(S, 2, n, "S", writable=True)
        check_matrix(T, 3, n, "T", writable=True)
        check_matrix(Q, 4, n, "Q", writable=True)
        check_matrix(Z, 5, n, "Z", writable=True)
        return self._reorder(selected, S, T, Q, Z, n)


    @staticmethod
    def _block_size(
        S: np.ndarray,
        k: int,
        n: int) -> int:
        if k + 1 < n and S[k + 1, k] != 0.0:
            return 2
        return 1


    def _reorder(
        self,
        selected: np.ndarray,
        S: np.ndarray,
        T: Optional[np.ndarray],
        Q: np.ndarray,
        Z: Optional[np.ndarray],
        n: int) -> ReorderResult:
        blocks = self.block_ops.classify(S, T, n)
        self.block_ops.check_selection(selected, blocks, 1)

        mask = selected.astype(bool)
        target = 0
        num_swaps = 0
        status = Status.SUCCESS

        while status == Status.SUCCESS:
            ahead = np.flatnonzero(mask[target:])
            if ahead.size == 0:
                break
            k = target + int(ahead[0])
            size = self._block_size(S, k, n)

            while k > target:
                left = 2 if (k >= 2 and S[k - 1, k - 2] != 0.0) else 1
                j = k - left
                if not self.swap_ops.swap(S, Q, j, left, size, T, Z, n):
                    status = Status.PARTIAL_REORDERING
                    break
                num_swaps += 1
                logger.debug("swapped blocks (%d, %d) at position %d", left, size, j)
                mask[j:j + size] = True
                mask[j + size:k + size] = False
                k = j
                size = self._block_size(S, k, n)

            if status == Status.SUCCESS:
                target = k + size

        if status != Status.SUCCESS:
            logger.warning("reordering stopped early: %d of %d selected eigenvalues placed",
                           target, int(mask.sum()))
        selected[:] = 0
        selected[:target] = 1

        eig = self.block_ops.eigenvalues(S, T, n)
        beta = eig[2] if T is not None else None
        return ReorderResult(status, selected, eig[0], eig[1], beta, target, num_swaps)
