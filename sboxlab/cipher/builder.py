from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from sboxlab.encoding import Block, ComposedBlocks, ConcatenatedBlock, SBox

from .components import xor_bytes
from .registry import ComponentRegistry
from .spec import RANDOM_SBOX, TargetSpec
from .validator import validate_spec

BLOCK_BYTES = 16
KEY_BYTES = 16


class BlockCipher:
    def encrypt_block(self, plaintext_block: bytes, key: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError

    def decrypt_block(self, ciphertext_block: bytes, key: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError


@dataclass
class SPNCipher(BlockCipher):
    spec: TargetSpec
    key_schedule: Callable
    sbox_fwd: Callable
    sbox_inv: Callable
    perm_fwd: Callable
    perm_inv: Callable
    lin_fwd: Callable
    lin_inv: Callable

    def encrypt_block(self, plaintext_block: bytes, key: bytes) -> bytes:
        if len(plaintext_block) != BLOCK_BYTES:
            raise ValueError(f"Plaintext block must be {BLOCK_BYTES} bytes")
        if len(key) != KEY_BYTES:
            raise ValueError(f"Key must be {KEY_BYTES} bytes")

        round_keys: List[bytes] = self.key_schedule(key, rounds=self.spec.rounds, out_len=BLOCK_BYTES, seed=self.spec.seed)
        state = plaintext_block

        for r in range(self.spec.rounds):
            state = xor_bytes(state, round_keys[r])
            state = self.sbox_fwd(state)
            state = self.perm_fwd(state)
            if r != self.spec.rounds - 1:
                state = self.lin_fwd(state)

        return xor_bytes(state, round_keys[self.spec.rounds])

    def decrypt_block(self, ciphertext_block: bytes, key: bytes) -> bytes:
        if len(ciphertext_block) != BLOCK_BYTES:
            raise ValueError(f"Ciphertext block must be {BLOCK_BYTES} bytes")
        if len(key) != KEY_BYTES:
            raise ValueError(f"Key must be {KEY_BYTES} bytes")

        round_keys: List[bytes] = self.key_schedule(key, rounds=self.spec.rounds, out_len=BLOCK_BYTES, seed=self.spec.seed)
        state = xor_bytes(ciphertext_block, round_keys[self.spec.rounds])

        for r in reversed(range(self.spec.rounds)):
            if r != self.spec.rounds - 1:
                state = self.lin_inv(state)
            state = self.perm_inv(state)
            state = self.sbox_inv(state)
            state = xor_bytes(state, round_keys[r])

        return state


@dataclass
class KeyedCipher(Block):
    """Fixes the key of a :class:`BlockCipher`, giving a block oracle."""
    cipher: BlockCipher
    key: bytes

    def encode(self, block: bytes) -> bytes:
        return self.cipher.encrypt_block(block, self.key)

    def decode(self, block: bytes) -> bytes:
        return self.cipher.decrypt_block(block, self.key)


def build_cipher(spec: TargetSpec, registry: Optional[ComponentRegistry] = None) -> SPNCipher:
    reg = registry or ComponentRegistry()
    ok, errs = validate_spec(spec, reg)
    if not ok:
        raise ValueError("Invalid TargetSpec: " + "; ".join(errs))

    ks = reg.get(spec.components["key_schedule"]).forward
    sbox = reg.get(spec.components["sbox"])
    perm = reg.get(spec.components["perm"])
    lin = reg.get(spec.components["linear"])
    if not (sbox.inverse and perm.inverse and lin.inverse):
        raise ValueError("SPN requires invertible components (inverse must be provided)")

    return SPNCipher(
        spec=spec,
        key_schedule=ks,
        sbox_fwd=sbox.forward,
        sbox_inv=sbox.inverse,
        perm_fwd=perm.forward,
        perm_inv=perm.inverse,
        lin_fwd=lin.forward,
        lin_inv=lin.inverse,
    )


def build_outer_layer(spec: TargetSpec, registry: Optional[ComponentRegistry] = None) -> ConcatenatedBlock:
    """The S-box layer appended after the SPN rounds."""
    reg = registry or ComponentRegistry()
    rng = random.Random(spec.seed)
    sboxes = []
    for cid in spec.outer_sboxes:
        if cid == RANDOM_SBOX:
            table = list(range(256))
            rng.shuffle(table)
        else:
            table = reg.get(cid).table
        sboxes.append(SBox.from_table(table))
    return ConcatenatedBlock(sboxes)


def build_target(
    spec: TargetSpec,
    key: bytes,
    registry: Optional[ComponentRegistry] = None,
) -> Tuple[Block, ConcatenatedBlock]:
    """Return ``(oracle, outer_layer)`` where the oracle is rounds then layer."""
    reg = registry or ComponentRegistry()
    cipher = build_cipher(spec, reg)
    layer = build_outer_layer(spec, reg)
    return ComposedBlocks(KeyedCipher(cipher, key), layer), layer
