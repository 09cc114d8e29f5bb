"""
SCHURtools: Selection Operations

Builds a selection array for a (generalized) real Schur form from a
caller-supplied predicate on the eigenvalues.

"""

import logging
from typing import Any, Callable, Optional, Tuple
import numpy as np
from ..blocks import BlockOperations
from ..utils import check_matrix
from ...errors import InvalidArgumentError

logger = logging.getLogger(__name__)

# default of the optional predicate argument, distinct from None
NO_ARG = object()


class SelectionOperations:
    """
    A class to select eigenvalues of a (generalized) real Schur form.
    """

    def __init__(
        self,
        use_numba: bool = True) -> None:
        """
        Initialize the SelectionOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
        """
        self.use_numba = use_numba
        self.block_ops = BlockOperations(use_numba=use_numba)


    def select(
        self,
        S,
        predicate: Callable[..., Any],
        arg: Any = NO_ARG,
        T=None,
        n: Optional[int] = None) -> Tuple[np.ndarray, int]:
        """
        Evaluate the predicate once per diagonal block.

        A real eigenvalue is passed as predicate(real, 0.0); a conjugate
        pair is passed once as predicate(real, imag) with imag > 0 and the
        result is written to both of its slots. In the generalized case the
        predicate receives predicate(real, imag, beta). If arg is given (None
        included) it is appended unmodified as the last positional argument.

        Args:
            S: quasi-triangular matrix
            predicate: callable returning a truthy value for selected eigenvalues
            arg: optional extra argument forwarded to the predicate
            T: upper triangular matrix of the pencil (generalized case)
            n: order, defaults to S.shape[0]

        Returns:
            selected: (n,) int array of 0/1
            num_selected: number of selected eigenvalues, a pair counts two

        Raises:
            InvalidArgumentError: position 1 (S), 2 (predicate) or 4 (T)
        """
        if n is None:
            n = np.shape(S)[0]
        S = check_matrix(S, 1, n, "S")
        if not callable(predicate):
            raise InvalidArgumentError(2, "predicate must be callable")
        if T is not None:
            T = check_matrix(T, 4, n, "T")

        extra = () if arg is NO_ARG else (arg,)
        selected = np.zeros(n, dtype=np.int64)
        for block in self.block_ops.classify(S, T, n):
            if T is None:
                keep = predicate(block.real, block.imag, *extra)
            else:
                keep = predicate(block.real, block.imag, block.beta, *extra)
            if keep:
                selected[block.rows] = 1

        num_selected = int(selected.sum())
        logger.debug("selected %d of %d eigenvalues", num_selected, n)
        return selected, num_selected
