"""
SCHURtools: Status codes and exceptions

Every computational routine either raises one of the exceptions below for
structurally invalid input (before touching any matrix), or returns a result
object carrying a ``Status`` that distinguishes full success from the
recoverable partial outcomes.

"""

from enum import IntEnum


class Status(IntEnum):
    """Return status shared by all computational routines."""
    SUCCESS = 0
    DID_NOT_CONVERGE = 1        # reserved for the (external) reduction stage
    PARTIAL_REORDERING = 2      # some selected eigenvalues did not reach the prefix
    PARTIAL_EIGENVECTORS = 3    # some eigenvectors failed the underflow test


class InvalidArgumentError(ValueError):
    """
    Raised when an argument is structurally inconsistent (size, shape, dtype,
    selection pattern).

    Attributes:
        position (int): 1-based ordinal of the offending argument.
        code (int): negative status code, ``-position``.
    """

    def __init__(
        self,
        position: int,
        message: str) -> None:
        self.position = position
        super().__init__(f"argument {position}: {message}")

    @property
    def code(self) -> int:
        return -self.position


class InconsistentSchurFormError(ValueError):
    """
    Raised when a matrix is not in (generalized) real Schur form, e.g. a
    non-zero sub-diagonal entry encloses a pair of real eigenvalues.
    """

    def __init__(
        self,
        position: int,
        message: str) -> None:
        self.position = position
        super().__init__(f"diagonal position {position}: {message}")
