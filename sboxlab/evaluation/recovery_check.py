"""Verification of a recovered S-box layer against its oracle.

Checks the properties that must hold for any successful recovery:

- every recovered S-box is a bijection (``dec[enc[i]] == i`` both ways)
- ``layer.encode(peeled.encode(p)) == oracle.encode(p)`` for random ``p``

and, when the true layer is known, that each recovered S-box matches it up
to an affine encoding of its input, the freedom the attack cannot resolve.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from sboxlab.attack.recover import SBoxRecovery
from sboxlab.encoding import BLOCK_SIZE, Block, ConcatenatedBlock, SBox


@dataclass
class RoundtripMismatch:
    """A plaintext where the peeled oracle plus the layer disagree with the oracle."""
    plaintext_hex: str
    expected_hex: str
    got_hex: str


@dataclass
class RecoveryCheckResult:
    total_vectors: int
    passed: int
    failed: int
    bijective: List[bool]
    affine_equivalent: Optional[List[bool]] = None
    mismatches: List[RoundtripMismatch] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def is_perfect(self) -> bool:
        if self.failed or not all(self.bijective):
            return False
        return self.affine_equivalent is None or all(self.affine_equivalent)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        line = (
            f"[{status}] roundtrip {self.passed}/{self.total_vectors}, "
            f"bijective {sum(self.bijective)}/{len(self.bijective)}"
        )
        if self.affine_equivalent is not None:
            line += f", matches known layer {sum(self.affine_equivalent)}/{len(self.affine_equivalent)}"
        return line + f" ({self.elapsed_seconds:.2f}s)"


def is_affine(table: Sequence[int]) -> bool:
    """True if ``x -> table[x]`` is affine over GF(2)^8."""
    c = table[0]
    basis = [table[1 << k] ^ c for k in range(8)]
    for x in range(256):
        y = c
        for k in range(8):
            if (x >> k) & 1:
                y ^= basis[k]
        if table[x] != y:
            return False
    return True


def affine_equivalent(candidate: SBox, reference: SBox) -> bool:
    """True if ``candidate = reference o A`` for some affine bijection ``A``."""
    return is_affine([reference.decode(candidate.encode(x)) for x in range(256)])


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def verify_recovery(
    oracle: Block,
    recovery: SBoxRecovery,
    *,
    num_vectors: int = 200,
    seed: int = 1337,
    reference_layer: Optional[ConcatenatedBlock] = None,
) -> RecoveryCheckResult:
    rng = random.Random(seed)
    start = time.time()

    mismatches: List[RoundtripMismatch] = []
    for _ in range(num_vectors):
        pt = _rand_bytes(rng, BLOCK_SIZE)
        expected = oracle.encode(pt)
        got = recovery.layer.encode(recovery.peeled.encode(pt))
        if got != expected:
            mismatches.append(RoundtripMismatch(pt.hex(), expected.hex(), got.hex()))

    bijective = [s.is_bijective() for s in recovery.layer]
    matches = None
    if reference_layer is not None:
        matches = [affine_equivalent(s, ref) for s, ref in zip(recovery.layer, reference_layer)]

    return RecoveryCheckResult(
        total_vectors=num_vectors,
        passed=num_vectors - len(mismatches),
        failed=len(mismatches),
        bijective=bijective,
        affine_equivalent=matches,
        mismatches=mismatches,
        elapsed_seconds=time.time() - start,
        seed=seed,
    )
