import random
import sys
from pathlib import Path

import pytest

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from sboxlab.attack import (
    AttackParams,
    ConvergenceError,
    RelationAccumulator,
    cube_generator,
    histogram_row,
    recover_sboxes,
)
from sboxlab.cipher.builder import build_target
from sboxlab.cipher.spec import TargetSpec
from sboxlab.encoding import IdentityBlock
from sboxlab.evaluation import affine_equivalent, is_affine, sbox_ddt_max, verify_recovery
from sboxlab.linalg.gfmatrix import GaloisBackend, to_ints


def _rand_bytes(rng, n):
    return bytes(rng.randrange(0, 256) for _ in range(n))


class CountingGenerator:
    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.inner()


# ---------------------------------------------------------------------------
# Injected backend: every row counts, null space is the identity vector
# ---------------------------------------------------------------------------

class CountingMatrix:
    def __init__(self, n):
        self.n = n
        self.rows = 0

    def __len__(self):
        return self.rows

    def add(self, row):
        self.rows += 1
        return True

    def to_matrix(self):
        return None


class CountingBackend(GaloisBackend):
    def incremental_matrix(self, n):
        return CountingMatrix(n)

    def null_space(self, matrix):
        return self.field([list(range(256))])


class Ones:
    def randrange(self, stop):
        return 1


def test_histogram_row_holds_count_parity():
    row = histogram_row([3, 3, 3, 7, 7, 200], GaloisBackend())
    vals = to_ints(row).tolist()
    assert vals[3] == 1
    assert vals[7] == 0
    assert vals[200] == 1
    assert sum(vals) == 2


def test_accumulator_dimensions_are_monotonic():
    acc = RelationAccumulator(16, 256)
    gen = cube_generator(2, random.Random(5))
    cipher = IdentityBlock()
    last = acc.dimensions()
    for _ in range(30):
        acc.add_observations([cipher.encode(p) for p in gen()])
        dims = acc.dimensions()
        assert all(d >= prev for d, prev in zip(dims, last))
        last = dims
    assert not acc.sufficiently_defined()


def test_converges_in_deterministic_number_of_attempts():
    gen = CountingGenerator(lambda: [bytes(16)])
    params = AttackParams(sufficiency_threshold=3)
    recovery = recover_sboxes(IdentityBlock(), gen, params, backend=CountingBackend(), rng=Ones())
    assert gen.calls == 3
    assert recovery.attempts == 3
    assert recovery.dimensions == [3] * 16
    for s in recovery.layer:
        assert list(s.enc_key) == list(range(256))
        assert list(s.dec_key) == list(range(256))
    pt = bytes(range(16))
    assert recovery.peeled.encode(pt) == pt


def test_never_converging_generator_fails_within_budget():
    gen = CountingGenerator(lambda: [bytes(16)])
    with pytest.raises(ConvergenceError) as info:
        recover_sboxes(IdentityBlock(), gen)
    assert gen.calls == 2000
    assert info.value.attempts == 2000
    assert info.value.dimensions == [1] * 16
    assert info.value.threshold == 247


def test_smaller_budget_is_respected():
    gen = CountingGenerator(lambda: [bytes(16), bytes(range(16))])
    with pytest.raises(ConvergenceError):
        recover_sboxes(IdentityBlock(), gen, AttackParams(attempt_budget=25))
    assert gen.calls == 25


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------

def test_identity_cipher_identity_layer():
    oracle = IdentityBlock()
    recovery = recover_sboxes(oracle, cube_generator(2, random.Random(1337)), rng=random.Random(7))

    assert recovery.attempts < 2000
    assert all(d >= 247 for d in recovery.dimensions)
    assert len(recovery.layer) == 16

    rng = random.Random(99)
    for s in recovery.layer:
        assert s.is_bijective()
        # identity up to the affine encoding absorbed by the peeled oracle
        assert is_affine(s.enc_key)
        assert is_affine(s.dec_key)

    for _ in range(50):
        pt = _rand_bytes(rng, 16)
        peeled = recovery.peeled.encode(pt)
        assert recovery.layer.encode(peeled) == pt
        for pos, s in enumerate(recovery.layer):
            assert peeled[pos] == s.decode(pt[pos])


def test_known_sboxes_after_linear_rounds():
    outer = ["sbox.identity"] * 16
    outer[0] = "sbox.aes"
    outer[1] = "sbox.complement"
    outer[5] = "sbox.random"
    spec = TargetSpec(rounds=2, outer_sboxes=outer, seed=2026)
    key = bytes(range(16))
    oracle, true_layer = build_target(spec, key)

    recovery = recover_sboxes(oracle, cube_generator(2, random.Random(2026)), rng=random.Random(3))

    for got, want in zip(recovery.layer, true_layer):
        assert affine_equivalent(got, want)
    # differential uniformity is invariant under the affine encoding
    assert sbox_ddt_max(list(recovery.layer[0].enc_key)) == 4
    assert not is_affine(recovery.layer[0].enc_key)
    assert is_affine(recovery.layer[1].enc_key)
    assert not is_affine(recovery.layer[5].enc_key)

    check = verify_recovery(oracle, recovery, num_vectors=100, reference_layer=true_layer)
    assert check.is_perfect, check.summary()
