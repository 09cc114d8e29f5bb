"""
Argument checks shared by the computational modules.

Arrays follow the leading-dimension convention of the column-major
interface: a matrix argument may be larger than n x n, only its leading
n x n part is referenced. Every check raises InvalidArgumentError with the
1-based position of the argument before anything is modified.
"""
import numpy as np
from ..errors import InvalidArgumentError


def check_matrix(
    M,
    position: int,
    n: int,
    name: str,
    writable: bool = False) -> np.ndarray:
    """
    Validate a matrix argument of order n.

    Args:
        M: matrix argument
        position: ordinal of the argument (for the error code)
        n: order of the problem
        name: argument name used in the message
        writable: the matrix is updated in place, so it must already be a
                  writeable float64 ndarray

    Returns:
        M as a float64 ndarray (the same object when writable)
    """
    if writable:
        if not isinstance(M, np.ndarray):
            raise InvalidArgumentError(position, f"{name} must be a numpy array (updated in place)")
        if M.dtype != np.float64:
            raise InvalidArgumentError(position, f"{name} must have dtype float64, got {M.dtype}")
        if not M.flags.writeable:
            raise InvalidArgumentError(position, f"{name} must be writeable")
    else:
        try:
            M = np.asarray(M, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(position, f"{name} is not a real matrix: {e}") from e

    if M.ndim != 2:
        raise InvalidArgumentError(position, f"{name} must be 2-dimensional, got {M.ndim}D")
    if M.shape[0] < n or M.shape[1] < n:
        raise InvalidArgumentError(
            position, f"{name} has shape {M.shape}, needs at least ({n}, {n})")
    if not np.all(np.isfinite(M[:n, :n])):
        raise InvalidArgumentError(position, f"{name} contains non-finite entries")
    return M


def check_selection(
    selected,
    position: int,
    n: int = None,
    writable: bool = False) -> np.ndarray:
    """
    Validate a selection array (one 0/1 entry per eigenvalue position).

    Returns:
        selected as an ndarray (the same object when writable)
    """
    if writable and not isinstance(selected, np.ndarray):
        raise InvalidArgumentError(position, "selected must be a numpy array (updated in place)")
    selected = np.asarray(selected)
    if selected.ndim != 1:
        raise InvalidArgumentError(position, "selected must be 1-dimensional")
    if selected.dtype != bool and not np.issubdtype(selected.dtype, np.integer):
        raise InvalidArgumentError(position, f"selected must be boolean or integer, got {selected.dtype}")
    if n is not None and selected.shape[0] != n:
        raise InvalidArgumentError(
            position, f"selected has length {selected.shape[0]}, expected {n}")
    if writable and not selected.flags.writeable:
        raise InvalidArgumentError(position, "selected must be writeable")
    return selected
