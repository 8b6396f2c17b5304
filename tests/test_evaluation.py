import random
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from sboxlab.attack import SBoxRecovery
from sboxlab.cipher.components import AES_SBOX, COMPLEMENT_SBOX
from sboxlab.encoding import ComposedBlocks, ConcatenatedBlock, IdentityBlock, InverseBlock, SBox
from sboxlab.evaluation import (
    RecoveryReport,
    affine_equivalent,
    analyze_layer,
    analyze_sbox,
    is_affine,
    sbox_ddt_max,
    sbox_lat_max_abs,
    verify_recovery,
)


def _affine_table(seed):
    """A random affine bijection x -> M x ^ c on GF(2)^8."""
    rng = random.Random(seed)
    while True:
        cols = [rng.randrange(1, 256) for _ in range(8)]
        c = rng.randrange(256)
        table = []
        for x in range(256):
            y = c
            for k in range(8):
                if (x >> k) & 1:
                    y ^= cols[k]
            table.append(y)
        if len(set(table)) == 256:
            return table


def _recovery(oracle, layer):
    return SBoxRecovery(layer=layer, peeled=ComposedBlocks(oracle, InverseBlock(layer)), attempts=1)


def test_is_affine():
    assert is_affine(list(range(256)))
    assert is_affine(COMPLEMENT_SBOX)
    assert is_affine(_affine_table(1))
    assert not is_affine(AES_SBOX)


def test_affine_equivalence_detects_input_encoding():
    aes = SBox.from_table(AES_SBOX)
    a = _affine_table(4)
    encoded = SBox.from_table([AES_SBOX[a[x]] for x in range(256)])
    assert affine_equivalent(encoded, aes)
    assert not affine_equivalent(aes, SBox.identity())


def test_aes_profile():
    assert sbox_ddt_max(AES_SBOX) == 4
    assert sbox_lat_max_abs(AES_SBOX) == 32
    result = analyze_sbox(SBox.from_table(AES_SBOX), position=3)
    assert result.position == 3
    assert result.differential_uniformity == "good"
    assert result.linearity == "good"
    assert result.is_bijective
    assert not result.is_affine


def test_affine_profile_is_poor():
    result = analyze_sbox(SBox.from_table(COMPLEMENT_SBOX))
    assert result.ddt_max == 256
    assert result.lat_max_abs == 256
    assert result.is_affine
    assert result.linearity == "poor"


def test_verify_recovery_accepts_exact_layer():
    layer = ConcatenatedBlock([SBox.from_table(AES_SBOX)] * 16)
    oracle = ComposedBlocks(IdentityBlock(), layer)
    check = verify_recovery(oracle, _recovery(oracle, layer), num_vectors=20, reference_layer=layer)
    assert check.is_perfect
    assert check.passed == 20
    assert check.affine_equivalent == [True] * 16


def test_verify_recovery_flags_wrong_layer():
    true_layer = ConcatenatedBlock([SBox.from_table(AES_SBOX)] * 16)
    oracle = ComposedBlocks(IdentityBlock(), true_layer)
    wrong = ConcatenatedBlock([SBox.identity()] * 16)
    # a peeled oracle that ignores the guessed layer cannot round-trip
    bogus = SBoxRecovery(layer=wrong, peeled=IdentityBlock(), attempts=1)
    check = verify_recovery(oracle, bogus, num_vectors=10, reference_layer=true_layer)
    assert not check.is_perfect
    assert check.failed == 10
    assert check.affine_equivalent == [False] * 16
    assert "FAIL" in check.summary()


def test_report_serializes():
    layer = ConcatenatedBlock([SBox.from_table(AES_SBOX)] * 16)
    oracle = ComposedBlocks(IdentityBlock(), layer)
    recovery = _recovery(oracle, layer)
    check = verify_recovery(oracle, recovery, num_vectors=5)
    report = RecoveryReport(recovery=recovery, check=check, sbox_results=analyze_layer(layer)[:2])
    d = report.to_dict()
    assert d["attempts"] == 1
    assert d["layer"][0]["enc_key"] == bytes(AES_SBOX).hex()
    assert d["check"]["passed"] == 5
    assert len(d["sbox"]) == 2
    assert "Recovered 16 S-boxes" in report.to_summary()
