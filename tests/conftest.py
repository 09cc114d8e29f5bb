import sys
import os
import numpy as np
import pytest
from scipy import linalg
# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

N = 8


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def schur_form(rng):
    """(A, S, Q) with A = Q S Q^T, S in real Schur form."""
    A = rng.standard_normal((N, N))
    S, Q = linalg.schur(A, output='real')
    return A, np.triu(S, -1), Q


@pytest.fixture
def qz_form(rng):
    """(A, B, S, T, Q, Z) with A = Q S Z^T, B = Q T Z^T."""
    A = rng.standard_normal((N, N))
    B = rng.standard_normal((N, N))
    S, T, Q, Z = linalg.qz(A, B, output='real')
    return A, B, np.triu(S, -1), np.triu(T), Q, Z


@pytest.fixture
def small_schur():
    """4x4 real Schur form with eigenvalues 1, 2 +- i*sqrt(15), -1."""
    return np.array([
        [1.0, 2.0, 3.0, 4.0],
        [0.0, 2.0, -5.0, 1.0],
        [0.0, 3.0, 2.0, 1.0],
        [0.0, 0.0, 0.0, -1.0]])
