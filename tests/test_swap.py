import numpy as np
import pytest
from SCHURtools.funcs.blocks import BlockOperations
from SCHURtools.funcs.swap import (
    SwapOperations,
    SwapWindow,
    compute_swap_standard,
    apply_swap
)


def test_window_strips():
    w = SwapWindow(2, 2, 1)
    assert w.stop == 5
    assert w.local == slice(2, 5)
    assert w.row_strip(7) == (slice(2, 5), slice(5, 7))
    assert w.column_strip() == (slice(0, 2), slice(2, 5))


def test_swap_two_real_eigenvalues():
    S = np.array([[1.0, 5.0], [0.0, 3.0]])
    tr = compute_swap_standard(S, 0, 1, 1)
    U = tr.left
    np.testing.assert_allclose(np.diag(tr.S_local), [3.0, 1.0])
    assert tr.S_local[1, 0] == 0.0
    np.testing.assert_allclose(U.T @ U, np.eye(2), atol=1e-15)
    np.testing.assert_allclose(U @ tr.S_local @ U.T, S, atol=1e-14)


@pytest.mark.parametrize("use_numba", [True, False])
def test_swap_pair_past_real(use_numba):
    S = np.array([
        [2.0, -5.0, 1.0, 0.5],
        [3.0, 2.0, 4.0, -1.0],
        [0.0, 0.0, 7.0, 2.0],
        [0.0, 0.0, 0.0, -3.0]])
    S0 = S.copy()
    Q = np.eye(4)

    assert SwapOperations(use_numba=use_numba).swap(S, Q, 0, 2, 1)

    assert S[0, 0] == pytest.approx(7.0)
    assert S[1, 0] == 0.0 and S[2, 0] == 0.0
    blocks = BlockOperations().classify(S)
    assert blocks[1].position == 1 and blocks[1].size == 2
    assert blocks[1].real == pytest.approx(2.0)
    assert blocks[1].imag == pytest.approx(np.sqrt(15.0))
    np.testing.assert_allclose(Q.T @ Q, np.eye(4), atol=1e-14)
    np.testing.assert_allclose(Q @ S @ Q.T, S0, atol=1e-13)


@pytest.mark.parametrize("use_numba", [True, False])
def test_swap_two_pairs(use_numba):
    S = np.array([
        [1.0, -2.0, 0.3, 0.4],
        [1.0, 1.0, 0.5, -0.2],
        [0.0, 0.0, -1.0, 4.0],
        [0.0, 0.0, -1.0, -1.0]])
    S0 = S.copy()
    Q = np.eye(4)

    assert SwapOperations(use_numba=use_numba).swap(S, Q, 0, 2, 2)

    real, imag = BlockOperations().eigenvalues(S)
    np.testing.assert_allclose(real, [-1.0, -1.0, 1.0, 1.0], atol=1e-13)
    np.testing.assert_allclose(imag, [2.0, -2.0, np.sqrt(2.0), -np.sqrt(2.0)], atol=1e-13)
    np.testing.assert_allclose(Q @ S @ Q.T, S0, atol=1e-13)


@pytest.mark.parametrize("use_numba", [True, False])
def test_generalized_swap_preserves_pencil(use_numba, qz_form):
    A, B, S, T, Q, Z = qz_form
    n = S.shape[0]
    ops = SwapOperations(use_numba=use_numba)
    blocks = BlockOperations().classify(S, T)
    first, second = blocks[0], blocks[1]

    assert ops.swap(S, Q, 0, first.size, second.size, T, Z)

    np.testing.assert_allclose(Q @ S @ Z.T, A, atol=1e-12)
    np.testing.assert_allclose(Q @ T @ Z.T, B, atol=1e-12)
    assert np.all(np.tril(T, -1) == 0.0)
    assert np.all(np.tril(S, -2) == 0.0)
    lead = BlockOperations().classify(S, T)[0]
    assert complex(lead.real, lead.imag) / lead.beta == pytest.approx(
        complex(second.real, second.imag) / second.beta)


def test_apply_swap_leaves_other_blocks(schur_form):
    _, S, Q = schur_form
    S1 = S.copy()
    blocks = BlockOperations().classify(S)
    b0, b1 = blocks[-2], blocks[-1]
    tr = compute_swap_standard(S1, b0.position, b0.size, b1.size)
    assert tr is not None
    apply_swap(tr, S1, None)
    np.testing.assert_array_equal(S1[:b0.position, :b0.position], S[:b0.position, :b0.position])


def test_swap_two_real_eigenvalues_rejected_below_rounding():
    S = np.array([[1.0, 5.0], [0.0, 3.0]])
    assert compute_swap_standard(S, 0, 1, 1, threshold_factor=0.0) is None
