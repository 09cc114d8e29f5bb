import numpy as np
import pytest
from scipy import linalg
from SCHURtools import InconsistentSchurFormError, InvalidArgumentError
from SCHURtools.funcs.blocks import BlockOperations, BlockKind


@pytest.mark.parametrize("use_numba", [True, False])
def test_classify_small_form(use_numba, small_schur):
    blocks = BlockOperations(use_numba=use_numba).classify(small_schur)

    assert [b.kind for b in blocks] == [BlockKind.REAL, BlockKind.PAIR, BlockKind.REAL]
    assert [b.position for b in blocks] == [0, 1, 3]
    assert blocks[1].size == 2
    assert blocks[1].real == pytest.approx(2.0)
    assert blocks[1].imag == pytest.approx(np.sqrt(15.0))
    assert blocks[2].real == -1.0


@pytest.mark.parametrize("use_numba", [True, False])
def test_eigenvalue_lists(use_numba, small_schur):
    real, imag = BlockOperations(use_numba=use_numba).eigenvalues(small_schur)
    np.testing.assert_allclose(real, [1.0, 2.0, 2.0, -1.0])
    np.testing.assert_allclose(imag, [0.0, np.sqrt(15.0), -np.sqrt(15.0), 0.0])


@pytest.mark.parametrize("use_numba", [True, False])
def test_generalized_eigenvalues_match_scipy(use_numba, qz_form):
    A, B, S, T, _, _ = qz_form
    real, imag, beta = BlockOperations(use_numba=use_numba).eigenvalues(S, T)
    ours = np.sort_complex((real + 1j * imag) / beta)
    ref = np.sort_complex(linalg.eigvals(A, B))
    np.testing.assert_allclose(ours, ref, rtol=1e-8)


@pytest.mark.parametrize("use_numba", [True, False])
def test_real_eigenvalues_under_subdiagonal_rejected(use_numba):
    S = np.array([[1.0, 1.0], [1.0, 1.0]])
    with pytest.raises(InconsistentSchurFormError):
        BlockOperations(use_numba=use_numba).classify(S)


def test_consecutive_subdiagonals_rejected():
    S = np.array([
        [1.0, -2.0, 0.0],
        [3.0, 1.0, 1.0],
        [0.0, 2.0, 5.0]])
    with pytest.raises(InconsistentSchurFormError):
        BlockOperations().classify(S)


def test_entry_below_subdiagonal_rejected():
    S = np.triu(np.ones((3, 3)))
    S[2, 0] = 1.0
    with pytest.raises(InconsistentSchurFormError):
        BlockOperations().classify(S)


def test_partially_selected_pair_rejected(small_schur):
    ops = BlockOperations()
    blocks = ops.classify(small_schur)
    with pytest.raises(InvalidArgumentError) as err:
        ops.check_selection(np.array([0, 1, 0, 0]), blocks, 1)
    assert err.value.code == -1
    ops.check_selection(np.array([0, 1, 1, 0]), blocks, 1)
