import numpy as np
import pytest
from SCHURtools import Status, InvalidArgumentError
from SCHURtools.funcs.blocks import BlockOperations
from SCHURtools.funcs.reorder import ReorderOperations


def leading_eigenvalues(real, imag, beta, k):
    return np.sort_complex((real[:k] + 1j * imag[:k]) / beta[:k])


@pytest.mark.parametrize("use_numba", [True, False])
def test_reorder_moves_last_block_to_front(use_numba, schur_form):
    A, S, Q = schur_form
    n = S.shape[0]
    blocks = BlockOperations().classify(S)
    last = blocks[-1]
    selected = np.zeros(n, dtype=np.int64)
    selected[last.rows] = 1
    ops = ReorderOperations(use_numba=use_numba)

    res = ops.reorder(selected, S, Q)

    assert res.status == Status.SUCCESS
    assert res.num_selected == last.size
    assert res.num_swaps >= 1
    np.testing.assert_array_equal(selected[:last.size], 1)
    np.testing.assert_array_equal(selected[last.size:], 0)
    assert res.real[0] == pytest.approx(last.real)
    assert abs(res.imag[0]) == pytest.approx(last.imag)
    np.testing.assert_allclose(Q.T @ Q, np.eye(n), atol=1e-13)
    np.testing.assert_allclose(Q @ S @ Q.T, A, atol=1e-12 * np.linalg.norm(A))
    assert np.all(np.tril(S, -2) == 0.0)


@pytest.mark.parametrize("use_numba", [True, False])
def test_reorder_by_predicate_is_idempotent(use_numba, schur_form):
    A, S, Q = schur_form
    n = S.shape[0]
    real, imag = BlockOperations().eigenvalues(S)
    selected = (real < np.median(real)).astype(np.int64)
    wanted = np.sort_complex((real + 1j * imag)[selected == 1])
    ops = ReorderOperations(use_numba=use_numba)

    res = ops.reorder(selected, S, Q)
    k = res.num_selected
    assert res.status == Status.SUCCESS
    assert k == wanted.size
    np.testing.assert_allclose(
        leading_eigenvalues(res.real, res.imag, np.ones(n), k), wanted, atol=1e-10)
    np.testing.assert_allclose(Q @ S @ Q.T, A, atol=1e-12 * np.linalg.norm(A))

    S_again = S.copy()
    again = ops.reorder(selected, S, Q)
    assert again.num_swaps == 0
    np.testing.assert_array_equal(S, S_again)


@pytest.mark.parametrize("use_numba", [True, False])
def test_reorder_generalized(use_numba, qz_form):
    A, B, S, T, Q, Z = qz_form
    n = S.shape[0]
    real, imag, beta = BlockOperations().eigenvalues(S, T)
    lam = (real + 1j * imag) / beta
    selected = (np.abs(lam) > np.median(np.abs(lam))).astype(np.int64)
    wanted = np.sort_complex(lam[selected == 1])

    res = ReorderOperations(use_numba=use_numba).reorder_generalized(selected, S, T, Q, Z)

    assert res.status == Status.SUCCESS
    k = res.num_selected
    assert k == wanted.size
    np.testing.assert_allclose(
        leading_eigenvalues(res.real, res.imag, res.beta, k), wanted, rtol=1e-8)
    np.testing.assert_allclose(Q @ S @ Z.T, A, atol=1e-12 * np.linalg.norm(A))
    np.testing.assert_allclose(Q @ T @ Z.T, B, atol=1e-12 * np.linalg.norm(B))
    assert np.all(np.tril(T, -1) == 0.0)
    assert np.all(np.tril(S, -2) == 0.0)


def test_partial_pair_rejected_without_side_effects(small_schur):
    S = small_schur.copy()
    Q = np.eye(4)
    selected = np.array([0, 0, 1, 0])
    with pytest.raises(InvalidArgumentError) as err:
        ReorderOperations().reorder(selected, S, Q)
    assert err.value.position == 1
    np.testing.assert_array_equal(S, small_schur)
    np.testing.assert_array_equal(Q, np.eye(4))
    np.testing.assert_array_equal(selected, [0, 0, 1, 0])


def test_readonly_matrix_rejected(small_schur):
    S = small_schur.copy()
    S.flags.writeable = False
    with pytest.raises(InvalidArgumentError) as err:
        ReorderOperations().reorder(np.array([0, 1, 1, 0]), S, np.eye(4))
    assert err.value.code == -2


def test_wrong_selection_length(small_schur):
    with pytest.raises(InvalidArgumentError):
        ReorderOperations().reorder(np.array([1, 0, 0]), small_schur.copy(), np.eye(4)[:2, :2])


def first_and_last_blocks(blocks, n):
    selected = np.zeros(n, dtype=np.int64)
    selected[blocks[0].rows] = 1
    selected[blocks[-1].rows] = 1
    return selected


@pytest.mark.parametrize("use_numba", [True, False])
def test_rejected_swap_keeps_reached_prefix(use_numba, small_schur):
    S = small_schur.copy()
    Q = np.eye(4)
    selected = np.array([1, 0, 0, 1])
    ops = ReorderOperations(use_numba=use_numba, swap_threshold_factor=1e-3)

    res = ops.reorder(selected, S, Q)

    assert res.status == Status.PARTIAL_REORDERING
    assert res.num_selected == 1
    assert res.num_swaps == 0
    np.testing.assert_array_equal(selected, [1, 0, 0, 0])
    assert res.selected is selected
    np.testing.assert_array_equal(S, small_schur)
    np.testing.assert_array_equal(Q, np.eye(4))


@pytest.mark.parametrize("use_numba", [True, False])
def test_partial_reordering_standard(use_numba, schur_form):
    A, S, Q = schur_form
    n = S.shape[0]
    blocks = BlockOperations().classify(S)
    selected = first_and_last_blocks(blocks, n)
    total = int(selected.sum())
    ops = ReorderOperations(use_numba=use_numba, swap_threshold_factor=1e-3)

    res = ops.reorder(selected, S, Q)

    k = res.num_selected
    assert res.status == Status.PARTIAL_REORDERING
    assert k == blocks[0].size
    assert k < total
    np.testing.assert_array_equal(selected[:k], 1)
    np.testing.assert_array_equal(selected[k:], 0)
    np.testing.assert_allclose(Q @ S @ Q.T, A, atol=1e-12 * np.linalg.norm(A))
    assert np.all(np.tril(S, -2) == 0.0)


@pytest.mark.parametrize("use_numba", [True, False])
def test_partial_reordering_generalized(use_numba, qz_form):
    A, B, S, T, Q, Z = qz_form
    n = S.shape[0]
    blocks = BlockOperations().classify(S, T)
    selected = first_and_last_blocks(blocks, n)
    total = int(selected.sum())
    ops = ReorderOperations(use_numba=use_numba, swap_threshold_factor=1e-3)

    res = ops.reorder_generalized(selected, S, T, Q, Z)

    k = res.num_selected
    assert res.status == Status.PARTIAL_REORDERING
    assert k == blocks[0].size
    assert k < total
    np.testing.assert_array_equal(selected[:k], 1)
    np.testing.assert_array_equal(selected[k:], 0)
    assert res.beta is not None
    np.testing.assert_allclose(Q @ S @ Z.T, A, atol=1e-12 * np.linalg.norm(A))
    np.testing.assert_allclose(Q @ T @ Z.T, B, atol=1e-12 * np.linalg.norm(B))
    assert np.all(np.tril(S, -2) == 0.0)
    assert np.all(np.tril(T, -1) == 0.0)


@pytest.mark.parametrize("use_numba", [True, False])
def test_rejected_generalized_swap_keeps_pencil(use_numba, small_schur):
    S = small_schur.copy()
    T = np.eye(4) + np.triu(np.full((4, 4), 0.5), 1)
    T0 = T.copy()
    Q = np.eye(4)
    Z = np.eye(4)
    selected = np.array([1, 0, 0, 1])
    ops = ReorderOperations(use_numba=use_numba, swap_threshold_factor=1e-3)

    res = ops.reorder_generalized(selected, S, T, Q, Z)

    assert res.status == Status.PARTIAL_REORDERING
    assert res.num_selected == 1
    np.testing.assert_array_equal(selected, [1, 0, 0, 0])
    np.testing.assert_array_equal(S, small_schur)
    np.testing.assert_array_equal(T, T0)
    np.testing.assert_array_equal(Q, np.eye(4))
    np.testing.assert_array_equal(Z, np.eye(4))
