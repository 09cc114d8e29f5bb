"""
SCHURtools: Block Operations

Partitions the diagonal of a real (generalized) Schur form into 1x1 blocks
(real eigenvalues) and 2x2 blocks (complex-conjugate pairs). This is the
single source of truth for block tagging used by the back-substitution and
reordering engines.

"""

from enum import IntEnum
from typing import List, NamedTuple, Optional, Tuple, Union
import numpy as np
from .constants import *
from .core_functions import *
from ...errors import InconsistentSchurFormError, InvalidArgumentError


class BlockKind(IntEnum):
    """Block tag; the value is the block size."""
    REAL = 1
    PAIR = 2


class SchurBlock(NamedTuple):
    """
    A diagonal block of a quasi-triangular matrix.

    For a PAIR, (real, imag) is the eigenvalue with positive imaginary part;
    in the generalized case the eigenvalue is (real + i*imag) / beta.
    """
    kind: BlockKind
    position: int
    real: float
    imag: float = 0.0
    beta: float = 1.0

    @property
    def size(self) -> int:
        return int(self.kind)

    @property
    def rows(self) -> slice:
        return slice(self.position, self.position + self.size)


class BlockOperations:
    """
    A class to classify the diagonal blocks of a (generalized) real Schur form.
    """

    def __init__(
        self,
        use_numba: bool = True):
        """
        Initialize the BlockOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
        """
        self.use_numba = use_numba


    def block_structure(
        self,
        S: np.ndarray,
        n: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Block positions and sizes from the sub-diagonal pattern only.

        Returns:
            starts, sizes: int64 arrays with one entry per block
        """
        if self.use_numba:
            starts = np.empty(n, dtype=np.int64)
            sizes = np.empty(n, dtype=np.int64)
            count = classify_blocks_nb_core(S, n, starts, sizes)
            return starts[:count], sizes[:count]
        return classify_blocks_np_core(S, n)


    def classify(
        self,
        S: np.ndarray,
        T: Optional[np.ndarray] = None,
        n: Optional[int] = None) -> List[SchurBlock]:
        """
        Classify the diagonal blocks of S (or of the pencil (S, T)).

        Args:
            S: quasi-triangular matrix, leading n x n part used
            T: upper triangular matrix of the pencil (generalized case)
            n: order, defaults to S.shape[0]

        Returns:
            blocks: list of SchurBlock in storage order

        Raises:
            InconsistentSchurFormError: if S (T) is not in (generalized) real
                Schur form, e.g. a non-zero sub-diagonal encloses real
                eigenvalues or two consecutive sub-diagonals are non-zero.
        """
        if n is None:
            n = S.shape[0]
        self._check_structure(S, T, n)
        starts, sizes = self.block_structure(S, n)

        blocks = []
        for j, size in zip(starts.tolist(), sizes.tolist()):
            if size == 1:
                if T is None:
                    blocks.append(SchurBlock(BlockKind.REAL, j, float(S[j, j])))
                else:
                    blocks.append(SchurBlock(BlockKind.REAL, j, float(S[j, j]), 0.0, float(T[j, j])))
                continue

            if j + 2 < n and S[j + 2, j + 1] != 0.0:
                raise InconsistentSchurFormError(
                    j, "two consecutive non-zero sub-diagonal entries")
            wr, wi = self._pair_eigenvalue(S, T, j)
            if not wi > 0.0:
                raise InconsistentSchurFormError(
                    j, "non-zero sub-diagonal entry but the 2x2 block has real eigenvalues")
            blocks.append(SchurBlock(BlockKind.PAIR, j, wr, wi))
        return blocks


    def eigenvalues(
        self,
        S: np.ndarray,
        T: Optional[np.ndarray] = None,
        n: Optional[int] = None) -> Union[Tuple[np.ndarray, np.ndarray],
                                          Tuple[np.ndarray, np.ndarray, np.ndarray]]:
        """
        Eigenvalue lists of a (generalized) real Schur form.

        Returns:
            real, imag: the eigenvalues, a pair stored as (+imag, -imag)
            beta: (generalized case only) denominators, eigenvalue j is
                  (real[j] + i*imag[j]) / beta[j]
        """
        if n is None:
            n = S.shape[0]
        real = np.zeros(n)
        imag = np.zeros(n)
        beta = np.ones(n)
        for block in self.classify(S, T, n):
            j = block.position
            real[block.rows] = block.real
            beta[block.rows] = block.beta
            if block.kind == BlockKind.PAIR:
                imag[j] = block.imag
                imag[j + 1] = -block.imag
        if T is None:
            return real, imag
        return real, imag, beta


    def check_selection(
        self,
        selected: np.ndarray,
        blocks: List[SchurBlock],
        position: int) -> None:
        """
        Reject a selection array that selects only one half of a conjugate pair.

        Raises:
            InvalidArgumentError: at the given argument position
        """
        for block in blocks:
            if block.kind == BlockKind.PAIR:
                j = block.position
                if bool(selected[j]) != bool(selected[j + 1]):
                    raise InvalidArgumentError(
                        position,
                        f"conjugate pair at positions {j}, {j + 1} is only partially selected")


    def _pair_eigenvalue(
        self,
        S: np.ndarray,
        T: Optional[np.ndarray],
        j: int) -> Tuple[float, float]:
        """Eigenvalue (wr, wi >= 0) of the 2x2 block starting at j."""
        if self.use_numba:
            if T is None:
                res = standardize_2x2_nb_core(
                    S[j, j], S[j, j + 1], S[j + 1, j], S[j + 1, j + 1])
                return res[4], abs(res[5])
            wr, _, wi = pencil_eigenvalues_2x2_nb_core(
                S[j, j], S[j, j + 1], S[j + 1, j], S[j + 1, j + 1],
                T[j, j], T[j, j + 1], T[j + 1, j + 1])
            return wr, wi

        T2 = None if T is None else np.triu(T[j:j + 2, j:j + 2])
        lam = block_eigenvalues_np_core(S[j:j + 2, j:j + 2], T2)
        if not np.all(np.isfinite(lam)) or lam[0].imag == 0.0:
            return float(np.real(lam[0])), 0.0
        return float(lam[0].real), float(abs(lam[0].imag))


    @staticmethod
    def _check_structure(
        S: np.ndarray,
        T: Optional[np.ndarray],
        n: int) -> None:
        """Entries below the first sub-diagonal of S (the diagonal of T) must vanish."""
        below = np.tril(S[:n, :n], -2)
        if np.any(below != 0.0):
            i, j = np.argwhere(below != 0.0)[0]
            raise InconsistentSchurFormError(
                int(j), f"S[{i}, {j}] is non-zero below the first sub-diagonal")
        if T is not None:
            below = np.tril(T[:n, :n], -1)
            if np.any(below != 0.0):
                i, j = np.argwhere(below != 0.0)[0]
                raise InconsistentSchurFormError(
                    int(j), f"T[{i}, {j}] is non-zero below the diagonal")
