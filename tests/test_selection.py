import numpy as np
import pytest
from SCHURtools import InvalidArgumentError
from SCHURtools.funcs.selection import SelectionOperations


@pytest.mark.parametrize("use_numba", [True, False])
def test_pair_selected_as_a_whole(use_numba, small_schur):
    calls = []

    def is_complex(re, im):
        calls.append((re, im))
        return im != 0.0

    selected, num = SelectionOperations(use_numba=use_numba).select(small_schur, is_complex)

    np.testing.assert_array_equal(selected, [0, 1, 1, 0])
    assert num == 2
    # one call per block, the pair with positive imaginary part
    assert len(calls) == 3
    assert calls[1][1] == pytest.approx(np.sqrt(15.0))


def test_extra_argument_forwarded(small_schur):
    def below(re, im, bound):
        return re < bound

    selected, num = SelectionOperations().select(small_schur, below, 1.5)
    np.testing.assert_array_equal(selected, [1, 0, 0, 1])
    assert num == 2


def test_generalized_predicate_receives_beta(qz_form):
    _, _, S, T, _, _ = qz_form
    seen = []

    def record(re, im, beta):
        seen.append(beta)
        return True

    selected, num = SelectionOperations().select(S, record, T=T)
    assert num == S.shape[0]
    assert np.all(selected == 1)
    assert len(seen) > 0


def test_predicate_must_be_callable(small_schur):
    with pytest.raises(InvalidArgumentError) as err:
        SelectionOperations().select(small_schur, None)
    assert err.value.position == 2


def test_none_is_forwarded_as_argument(small_schur):
    seen = []

    def context_is_none(re, im, ctx):
        seen.append(ctx)
        return ctx is None

    selected, num = SelectionOperations().select(small_schur, context_is_none, None)
    np.testing.assert_array_equal(selected, [1, 1, 1, 1])
    assert num == 4
    assert seen == [None, None, None]
