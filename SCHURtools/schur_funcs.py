"""
    Title: Schur form functions
    Description: One entry point for the selection, reordering and
                 eigenvector operations on a real Schur form (standard
                 problem) and on a generalized real Schur pencil.

"""

import logging
from typing import Any, Callable, Optional
import numpy as np
from .funcs.eigenvectors import EigenvectorOperations, EigenvectorResult
from .funcs.reorder import ReorderOperations, ReorderResult
from .funcs.selection import SelectionOperations, NO_ARG
from .funcs.swap.constants import SWAP_THRESHOLD_FACTOR, MAX_REFINEMENT_STEPS

logger = logging.getLogger(__name__)


class SchurOperations:
    """
    Operations on an existing (generalized) real Schur decomposition

        A = Q S Q^T                     (standard problem)
        A = Q S Z^T,  B = Q T Z^T       (generalized problem)

    The Schur form itself is computed elsewhere, e.g. with
    scipy.linalg.schur(A, output='real') or scipy.linalg.qz(A, B, output='real').
    """

    def __init__(
        self,
        use_numba: bool = True,
        swap_threshold_factor: float = SWAP_THRESHOLD_FACTOR,
        max_refinement_steps: int = MAX_REFINEMENT_STEPS,
        normalize: bool = True) -> None:
        """
        Initialize the SchurOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
            swap_threshold_factor (float, optional): Stability threshold of
                the block swaps. Defaults to 20.
            max_refinement_steps (int, optional): Cap on the Sylvester
                refinement steps per swap. Defaults to 3.
            normalize (bool, optional): Unit largest component for every
                eigenvector. Defaults to True.
        """
        self.use_numba = use_numba
        self.selection_ops = SelectionOperations(use_numba=use_numba)
        self.reorder_ops = ReorderOperations(
            use_numba=use_numba,
            swap_threshold_factor=swap_threshold_factor,
            max_refinement_steps=max_refinement_steps)
        self.eigenvector_ops = EigenvectorOperations(
            use_numba=use_numba,
            normalize=normalize)

    ##########################################################################
    # Standard problem
    ##########################################################################

    def select(
        self,
        S: np.ndarray,
        predicate: Callable[..., Any],
        arg: Any = NO_ARG) -> tuple:
        """
        Selection array from predicate(real, imag[, arg]).

        Returns:
            (selected, num_selected)
        """
        return self.selection_ops.select(S, predicate, arg)


    def reorder_schur(
        self,
        selected: np.ndarray,
        S: np.ndarray,
        Q: np.ndarray) -> ReorderResult:
        """
        Move the selected eigenvalues of S to its upper left corner,
        updating S, Q and selected in place.
        """
        return self.reorder_ops.reorder(selected, S, Q)


    def eigenvectors(
        self,
        selected,
        S: np.ndarray,
        Q: Optional[np.ndarray] = None) -> EigenvectorResult:
        """
        Eigenvectors for the selected eigenvalues; with Q they are
        eigenvectors of A = Q S Q^T.
        """
        return self.eigenvector_ops.eigenvectors(selected, S, Q)


    def reduce(
        self,
        S: np.ndarray,
        Q: np.ndarray,
        predicate: Callable[..., Any],
        arg: Any = NO_ARG) -> ReorderResult:
        """
        Select with the predicate and reorder the Schur form in one call.
        """
        selected, num_selected = self.select(S, predicate, arg)
        logger.debug("reduce: %d eigenvalues selected", num_selected)
        return self.reorder_schur(selected, S, Q)

    ##########################################################################
    # Generalized problem
    ##########################################################################

    def select_generalized(
        self,
        S: np.ndarray,
        T: np.ndarray,
        predicate: Callable[..., Any],
        arg: Any = NO_ARG) -> tuple:
        """
        Selection array from predicate(real, imag, beta[, arg]).

        Returns:
            (selected, num_selected)
        """
        return self.selection_ops.select(S, predicate, arg, T=T)


    def reorder_generalized_schur(
        self,
        selected: np.ndarray,
        S: np.ndarray,
        T: np.ndarray,
        Q: np.ndarray,
        Z: np.ndarray) -> ReorderResult:
        """
        Move the selected eigenvalues of (S, T) to the upper left corner,
        updating S, T, Q, Z and selected in place.
        """
        return self.reorder_ops.reorder_generalized(selected, S, T, Q, Z)


    def generalized_eigenvectors(
        self,
        selected,
        S: np.ndarray,
        T: np.ndarray,
        Z: Optional[np.ndarray] = None) -> EigenvectorResult:
        """
        Right eigenvectors for the selected eigenvalues; with Z they are
        eigenvectors of the pencil (A, B).
        """
        return self.eigenvector_ops.generalized_eigenvectors(selected, S, T, Z)
