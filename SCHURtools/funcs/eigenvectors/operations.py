"""
SCHURtools: Eigenvector Operations

Right eigenvectors of a quasi-triangular matrix S, or of a pencil (S, T) in
generalized real Schur form, for a selected subset of eigenvalues, by
scaled back-substitution. When the Schur vectors are supplied the
eigenvectors are transformed back to the original matrix (pencil).

Column layout of the result X: one column per selected real eigenvalue and
two consecutive columns (real part, imaginary part) per selected conjugate
pair, x = X[:, c] + i*X[:, c+1] belonging to the eigenvalue with positive
imaginary part.

"""

import logging
from typing import NamedTuple, Optional
import numpy as np
from .constants import *
from .core_functions import *
from ..blocks import BlockOperations
from ..utils import check_matrix, check_selection
from ...errors import Status

logger = logging.getLogger(__name__)


class EigenvectorResult(NamedTuple):
    """
    Attributes:
        status: SUCCESS, or PARTIAL_EIGENVECTORS if any block failed
        X: (n, num_selected) eigenvectors
        failed: diagonal positions of the blocks whose columns were zeroed
    """
    status: Status
    X: np.ndarray
    failed: np.ndarray


class EigenvectorOperations:
    """
    A class to compute eigenvectors from a (generalized) real Schur form.
    """

    def __init__(
        self,
        use_numba: bool = True,
        normalize: bool = True) -> None:
        """
        Initialize the EigenvectorOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
            normalize (bool, optional): Scale every eigenvector so that its
                largest component (|re| + |im|) is one. Defaults to True.
        """
        self.use_numba = use_numba
        self.normalize = normalize
        self.block_ops = BlockOperations(use_numba=use_numba)


    def eigenvectors(
        self,
        selected,
        S,
        Q=None) -> EigenvectorResult:
        """
        Eigenvectors of S (or of A = Q S Q^T when Q is given) for the
        selected eigenvalues.

        Args:
            selected: (n,) selection array, both slots of a pair equal
            S: quasi-triangular matrix, leading n x n part used
            Q: orthogonal Schur vectors, optional

        Returns:
            EigenvectorResult

        Raises:
            InvalidArgumentError: position 1 (selected), 2 (S) or 3 (Q)
            InconsistentSchurFormError: if S is not in real Schur form
        """
        selected = check_selection(selected, 1)
        n = selected.shape[0]
        S = check_matrix(S, 2, n, "S")
        if Q is not None:
            Q = check_matrix(Q, 3, n, "Q")
        return self._compute(selected, S, None, Q, n)


    def generalized_eigenvectors(
        self,
        selected,
        S,
        T,
        Z=None) -> EigenvectorResult:
        """
        Right eigenvectors of the pencil (S, T) (or of (A, B) = (Q S Z^T,
        Q T Z^T) when Z is given) for the selected eigenvalues.

        Raises:
            InvalidArgumentError: position 1 (selected), 2 (S), 3 (T) or 4 (Z)
            InconsistentSchurFormError: if (S, T) is not in generalized real
                Schur form
        """
        selected = check_selection(selected, 1)
        n = selected.shape[0]
        S = check_matrix(S, 2, n, "S")
        T = check_matrix(T, 3, n, "T")
        if Z is not None:
            Z = check_matrix(Z, 4, n, "Z")
        return self._compute(selected, S, T, Z, n)


    def _compute(
        self,
        selected: np.ndarray,
        S: np.ndarray,
        T: Optional[np.ndarray],
        V: Optional[np.ndarray],
        n: int) -> EigenvectorResult:
        blocks = self.block_ops.classify(S, T, n)
        self.block_ops.check_selection(selected, blocks, 1)

        chosen = [b for b in blocks if selected[b.position]]
        starts = np.array([b.position for b in chosen], dtype=np.int64)
        sizes = np.array([b.size for b in chosen], dtype=np.int64)
        cols = np.zeros(len(chosen), dtype=np.int64)
        if len(chosen) > 1:
            cols[1:] = np.cumsum(sizes)[:-1]
        ncols = int(sizes.sum())

        Y = np.zeros((n, ncols))
        status = np.zeros(len(chosen), dtype=np.int64)
        if ncols == 0:
            return EigenvectorResult(Status.SUCCESS, Y, np.zeros(0, dtype=np.int64))

        S_n = np.ascontiguousarray(S[:n, :n])
        logger.debug("computing %d eigenvector columns for %d blocks (n = %d)",
                     ncols, len(chosen), n)
        if T is None:
            if self.use_numba:
                eigenvectors_standard_nb_core(
                    S_n, n, starts, sizes, cols, self.normalize, Y, status)
            else:
                eigenvectors_standard_np_core(
                    S_n, n, starts, sizes, cols, self.normalize, Y, status)
        else:
            T_n = np.ascontiguousarray(T[:n, :n])
            if self.use_numba:
                eigenvectors_generalized_nb_core(
                    S_n, T_n, n, starts, sizes, cols, self.normalize, Y, status)
            else:
                eigenvectors_generalized_np_core(
                    S_n, T_n, n, starts, sizes, cols, self.normalize, Y, status)

        singular = starts[status == BLOCK_SINGULAR_PENCIL]
        if singular.size:
            logger.warning("singular pencil at diagonal positions %s, unit vectors returned",
                           singular.tolist())

        if V is not None:
            X = V[:n, :n] @ Y
            if self.normalize:
                X = self._renormalize(X, sizes, cols)
        else:
            X = Y

        failed = starts[status == BLOCK_UNDERFLOW]
        if failed.size:
            logger.warning("%d eigenvector(s) underflowed and were zeroed (positions %s)",
                           failed.size, failed.tolist())
            return EigenvectorResult(Status.PARTIAL_EIGENVECTORS, X, failed)
        return EigenvectorResult(Status.SUCCESS, X, failed)


    @staticmethod
    def _renormalize(
        X: np.ndarray,
        sizes: np.ndarray,
        cols: np.ndarray) -> np.ndarray:
        """Unit largest component per real column / per re-im column pair."""
        for size, col in zip(sizes.tolist(), cols.tolist()):
            if size == 1:
                emax = np.max(np.abs(X[:, col]))
            else:
                emax = np.max(np.abs(X[:, col]) + np.abs(X[:, col + 1]))
            if emax > 0.0:
                X[:, col:col + size] /= emax
        return X
