"""Chosen-plaintext batch generators.

Both structures XOR to zero across the batch, a property that survives any
affine layer (cube) or a few full SPN rounds (integral / Square).

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import random
from typing import Callable, List, Optional

from sboxlab.encoding import BLOCK_SIZE


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def cube_generator(dimension: int = 2, rng: Optional[random.Random] = None) -> Callable[[], List[bytes]]:
    """Random affine cubes: ``base ^ sum(subset of differences)``.

    Each batch holds ``2**dimension`` plaintexts. A single difference gives
    ``[base, base ^ d]``, which XORs to ``d``, so at least two are required.
    """
    if dimension < 2:
        raise ValueError("cube dimension must be at least 2")
    rng = rng or random.Random()

    def generate() -> List[bytes]:
        base = _rand_bytes(rng, BLOCK_SIZE)
        diffs = [_rand_bytes(rng, BLOCK_SIZE) for _ in range(dimension)]
        batch = [base]
        for d in diffs:
            batch += [_xor(p, d) for p in batch]
        return batch

    return generate


def integral_generator(active_bytes: int = 1, rng: Optional[random.Random] = None) -> Callable[[], List[bytes]]:
    """Square-attack structures: one active byte takes all 256 values.

    With ``active_bytes > 1`` the extra active positions are set to fresh
    random bijective images of the same counter, so the batch stays at 256
    plaintexts and every active byte is balanced.
    """
    if not 1 <= active_bytes <= BLOCK_SIZE:
        raise ValueError(f"active_bytes must be in 1..{BLOCK_SIZE}")
    rng = rng or random.Random()

    def generate() -> List[bytes]:
        base = bytearray(_rand_bytes(rng, BLOCK_SIZE))
        positions = rng.sample(range(BLOCK_SIZE), active_bytes)
        tables = []
        for _ in positions:
            t = list(range(256))
            rng.shuffle(t)
            tables.append(t)
        batch = []
        for x in range(256):
            pt = bytearray(base)
            for pos, t in zip(positions, tables):
                pt[pos] = t[x]
            batch.append(bytes(pt))
        return batch

    return generate
