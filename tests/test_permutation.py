import random
import sys
from pathlib import Path

import numpy as np
import pytest

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from sboxlab.attack import (
    MalformedBasisError,
    NotAPermutationError,
    SearchExhaustedError,
    find_permutation,
    new_sbox,
    random_linear_combination,
)
from sboxlab.cipher.components import AES_SBOX
from sboxlab.linalg.gfmatrix import GF256, GaloisBackend, is_permutation, to_ints


class ScriptedRandom:
    """Stands in for ``random.Random``: replays fixed coefficients."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def randrange(self, stop):
        v = self.values[self.calls]
        self.calls += 1
        assert 0 <= v < stop
        return v


IDENTITY = GF256(list(range(256)))
ONES = GF256([1] * 256)


def test_random_combination_uses_one_coefficient_per_vector():
    basis = GF256(np.stack([to_ints(IDENTITY), to_ints(ONES)]))
    rng = ScriptedRandom([3, 7])
    v = random_linear_combination(basis, GaloisBackend(), rng)
    assert rng.calls == 2
    expected = GF256(3) * IDENTITY + GF256(7) * ONES
    assert np.array_equal(to_ints(v), to_ints(expected))


def test_finder_returns_first_permutation_combination():
    basis = GF256(np.stack([to_ints(IDENTITY), to_ints(ONES)]))
    # (0, 0) -> zero vector, (0, 5) -> constant vector, (1, 0) -> identity
    rng = ScriptedRandom([0, 0, 0, 5, 1, 0])
    v = find_permutation(basis, GaloisBackend(), rng)
    assert rng.calls == 6
    assert to_ints(v).tolist() == list(range(256))


# c1 * S + c2 * e0 is a bijection only for c2 == 0 and c1 != 0: the values
# c1 * S(x) for x != 0 already cover everything except c1 * S(0).
AES_ROW = GF256(list(AES_SBOX))
POINT = GF256([1] + [0] * 255)


def test_finder_skips_non_bijective_combinations_of_nonlinear_basis():
    basis = GF256(np.stack([to_ints(AES_ROW), to_ints(POINT)]))
    # (1, 1) -> S + e0, (0, 7) -> 7 * e0, (0, 0) -> zero, (1, 0) -> S
    rng = ScriptedRandom([1, 1, 0, 7, 0, 0, 1, 0])
    v = find_permutation(basis, GaloisBackend(), rng)
    assert rng.calls == 8
    assert to_ints(v).tolist() == list(AES_SBOX)


def test_finder_on_nonlinear_basis_returns_scaled_sbox():
    basis = GF256(np.stack([to_ints(AES_ROW), to_ints(POINT)]))
    v = find_permutation(basis, GaloisBackend(), random.Random(1337))
    assert is_permutation(v)
    c1 = v[1] / AES_ROW[1]
    assert np.array_equal(to_ints(v), to_ints(c1 * AES_ROW))

def test_finder_with_seeded_source_stays_in_span():
    basis = GF256(np.stack([to_ints(IDENTITY), to_ints(ONES)]))
    v = find_permutation(basis, GaloisBackend(), random.Random(1337))
    assert is_permutation(v)
    # v = c1 * id + c2, so v[0] = c2 and v[1] = c1 + c2
    c2 = v[0]
    c1 = v[1] - v[0]
    assert c1 != 0
    assert np.array_equal(to_ints(v), to_ints(c1 * IDENTITY + c2 * ONES))


def test_empty_basis_is_rejected():
    with pytest.raises(MalformedBasisError):
        find_permutation(GF256.Zeros((0, 256)), GaloisBackend(), random.Random(1))
    with pytest.raises(MalformedBasisError):
        find_permutation([], GaloisBackend(), random.Random(1))


def test_short_vectors_are_rejected():
    with pytest.raises(MalformedBasisError):
        find_permutation(GF256([[1, 2, 3]]), GaloisBackend(), random.Random(1))


def test_search_cap_raises_exhausted():
    basis = GF256([[1] * 256])
    with pytest.raises(SearchExhaustedError) as info:
        find_permutation(basis, GaloisBackend(), random.Random(1), max_attempts=50)
    assert info.value.attempts == 50
    assert info.value.basis_size == 1


# ---------------------------------------------------------------------------
# S-box builder
# ---------------------------------------------------------------------------

def test_new_sbox_forward_direction():
    rotate = GF256([(i + 1) % 256 for i in range(256)])
    s = new_sbox(rotate, backwards=False)
    assert list(s.enc_key) == [(i + 1) % 256 for i in range(256)]
    assert list(s.dec_key) == [(i - 1) % 256 for i in range(256)]


def test_new_sbox_backwards_swaps_tables():
    rotate = GF256([(i + 1) % 256 for i in range(256)])
    s = new_sbox(rotate, backwards=True)
    assert list(s.enc_key) == [(i - 1) % 256 for i in range(256)]
    assert list(s.dec_key) == [(i + 1) % 256 for i in range(256)]


@pytest.mark.parametrize("backwards", [False, True])
def test_new_sbox_is_bijective(backwards):
    table = list(range(256))
    random.Random(7).shuffle(table)
    s = new_sbox(GF256(table), backwards=backwards)
    for i in range(256):
        assert s.dec_key[s.enc_key[i]] == i
        assert s.enc_key[s.dec_key[i]] == i


def test_new_sbox_rejects_non_permutation():
    table = list(range(256))
    table[10] = table[11]
    with pytest.raises(NotAPermutationError):
        new_sbox(GF256(table), backwards=True)
