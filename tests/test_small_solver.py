import numpy as np
import pytest
from SCHURtools.funcs.small_solver import SmallSystemOperations


@pytest.mark.parametrize("use_numba", [True, False])
def test_real_1x1(use_numba):
    ops = SmallSystemOperations(use_numba=use_numba)
    x, scale, xnorm, info = ops.solve(np.array([[3.0]]), np.array([6.0]), wr=1.0)
    assert scale == 1.0
    assert info == 0
    np.testing.assert_allclose(x, [3.0])
    assert xnorm == pytest.approx(3.0)


@pytest.mark.parametrize("use_numba", [True, False])
@pytest.mark.parametrize("trans", [False, True])
def test_complex_2x2_with_shift_matrix(use_numba, trans):
    ops = SmallSystemOperations(use_numba=use_numba)
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    b = np.array([1.0 + 1.0j, 2.0 - 1.0j])
    w = 0.5 + 1.0j
    D = np.array([[0.5, 0.25], [0.0, 1.5]])

    x, scale, xnorm, info = ops.solve(
        A, b, wr=w.real, wi=w.imag, ca=2.0, d=(0.5, 1.5), d12=0.25, trans=trans)

    C = 2.0 * A - w * D
    if trans:
        C = C.T
    assert info == 0
    np.testing.assert_allclose(C @ x, scale * b, rtol=1e-13, atol=1e-13)
    np.testing.assert_allclose(xnorm, np.max(np.abs(x.real) + np.abs(x.imag)), rtol=1e-13)


@pytest.mark.parametrize("use_numba", [True, False])
def test_real_2x2(use_numba):
    ops = SmallSystemOperations(use_numba=use_numba)
    A = np.array([[4.0, 1.0], [2.0, 3.0]])
    b = np.array([1.0, -2.0])
    x, scale, _, info = ops.solve(A, b, wr=0.5)
    assert not np.iscomplexobj(x)
    np.testing.assert_allclose((A - 0.5 * np.eye(2)) @ x, scale * b, rtol=1e-13, atol=1e-14)


@pytest.mark.parametrize("use_numba", [True, False])
def test_singular_system_is_perturbed(use_numba):
    ops = SmallSystemOperations(use_numba=use_numba)
    x, scale, _, info = ops.solve(np.array([[1.0]]), np.array([6.0]), wr=1.0, smin=1e-8)
    assert info == 1
    assert np.all(np.isfinite(x))
    np.testing.assert_allclose(x * 1e-8, [6.0 * scale])


def test_rejects_bad_shape():
    with pytest.raises(ValueError):
        SmallSystemOperations().solve(np.eye(3), np.ones(3))
