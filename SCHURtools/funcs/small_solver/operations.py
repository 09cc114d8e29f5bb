"""
SCHURtools: Small-System Operations

Shifted 1x1 and 2x2 solves used at every block boundary of the
back-substitution, with dynamic scaling against overflow and a pivot floor
against (near) singularity.

"""

import numpy as np
from .constants import *
from .core_functions import *


class SmallSystemOperations:
    """
    Solver for op(ca * A - (wr + i*wi) * D) X = scale * B with na, nw in {1, 2}.
    """

    def __init__(
        self,
        use_numba: bool = True) -> None:
        """
        Initialize the SmallSystemOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
        """
        self.use_numba = use_numba


    def solve(
        self,
        A: np.ndarray,
        B: np.ndarray,
        wr: float = 0.0,
        wi: float = 0.0,
        ca: float = 1.0,
        d: tuple = (1.0, 1.0),
        d12: float = 0.0,
        smin: float = SMLNUM,
        trans: bool = False) -> tuple:
        """
        Solve a shifted 1x1 or 2x2 system.

        Args:
            A: (na, na) coefficient block
            B: (na,) real or complex right-hand side, or (na, 2) with re/im columns
            wr, wi: shift w = wr + i*wi (wi != 0 or complex B selects the complex solve)
            ca: coefficient of A
            d: diagonal (d1, d2) of the shift matrix D
            d12: upper off-diagonal entry of D
            smin: lower bound on the pivot magnitude
            trans: solve with the transpose

        Returns:
            x: (na,) solution (complex when the solve is complex)
            scale: factor in (0, 1] applied to B
            xnorm: infinity norm of x
            info: 1 if the system was perturbed, else 0
        """
        A = np.asarray(A, dtype=np.float64)
        na = A.shape[0]
        if A.shape != (na, na) or na not in (1, 2):
            raise ValueError("A must be a 1x1 or 2x2 matrix")

        B = np.asarray(B)
        B2 = np.zeros((2, 2))
        if B.ndim == 2:
            if B.shape != (na, 2):
                raise ValueError("B must have shape (na,) or (na, 2)")
            B2[:na, :] = B
            nw = 2
        else:
            if B.shape != (na,):
                raise ValueError("B must have shape (na,) or (na, 2)")
            B2[:na, 0] = B.real
            if np.iscomplexobj(B):
                B2[:na, 1] = B.imag
            nw = 2 if (np.iscomplexobj(B) or wi != 0.0) else 1

        A2 = np.zeros((2, 2))
        A2[:na, :na] = A

        if self.use_numba:
            X = np.zeros((2, 2))
            scale, xnorm, info = solve_small_system_nb_core(
                trans, na, nw, smin, ca, A2, d[0], d[1], d12, B2, wr, wi, X)
            X = X[:na, :]
        else:
            X, scale, info = solve_small_system_np_core(
                trans, na, nw, smin, ca, A2, d[0], d[1], d12, B2, wr, wi)
            xnorm = np.max(np.abs(X[:, 0]) + np.abs(X[:, 1]))

        if nw == 1:
            return X[:, 0].copy(), scale, xnorm, info
        return X[:, 0] + 1j * X[:, 1], scale, xnorm, info
