"""Block transforms: byte S-boxes, S-box layers, inverses and compositions.

Every block transform exposes ``encode(block)`` and, where defined,
``decode(block)`` on 16-byte blocks. Cipher oracles, recovered S-box layers
and peeled oracles all share this interface.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

BLOCK_SIZE = 16


def _check_block(block: bytes) -> bytes:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
    return bytes(block)


class Block:
    """A transform on 16-byte blocks."""

    def encode(self, block: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError

    def decode(self, block: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError


class IdentityBlock(Block):
    def encode(self, block: bytes) -> bytes:
        return _check_block(block)

    def decode(self, block: bytes) -> bytes:
        return _check_block(block)


@dataclass(frozen=True)
class SBox:
    """A bijective byte substitution stored as a table and its inverse."""
    enc_key: bytes
    dec_key: bytes

    def __post_init__(self):
        if len(self.enc_key) != 256 or len(self.dec_key) != 256:
            raise ValueError("S-box tables must have 256 entries")

    @classmethod
    def from_table(cls, table: Sequence[int]) -> "SBox":
        """Build an S-box from its forward table, computing the inverse."""
        enc = bytes(table)
        if len(set(enc)) != 256:
            raise ValueError("S-box table is not a permutation of 0..255")
        dec = bytearray(256)
        for i, j in enumerate(enc):
            dec[j] = i
        return cls(enc_key=enc, dec_key=bytes(dec))

    @classmethod
    def identity(cls) -> "SBox":
        return cls(enc_key=bytes(range(256)), dec_key=bytes(range(256)))

    def encode(self, b: int) -> int:
        return self.enc_key[b]

    def decode(self, b: int) -> int:
        return self.dec_key[b]

    def inverse(self) -> "SBox":
        return SBox(enc_key=self.dec_key, dec_key=self.enc_key)

    def is_bijective(self) -> bool:
        return all(self.dec_key[self.enc_key[i]] == i for i in range(256)) and all(
            self.enc_key[self.dec_key[i]] == i for i in range(256)
        )


class ConcatenatedBlock(Block):
    """Sixteen independent byte S-boxes, one per block position."""

    def __init__(self, sboxes: Iterable[SBox]):
        self.sboxes: Tuple[SBox, ...] = tuple(sboxes)
        if len(self.sboxes) != BLOCK_SIZE:
            raise ValueError(f"expected {BLOCK_SIZE} S-boxes, got {len(self.sboxes)}")

    def __getitem__(self, pos: int) -> SBox:
        return self.sboxes[pos]

    def __len__(self) -> int:
        return len(self.sboxes)

    def __iter__(self):
        return iter(self.sboxes)

    def encode(self, block: bytes) -> bytes:
        block = _check_block(block)
        return bytes(s.encode(b) for s, b in zip(self.sboxes, block))

    def decode(self, block: bytes) -> bytes:
        block = _check_block(block)
        return bytes(s.decode(b) for s, b in zip(self.sboxes, block))


@dataclass(frozen=True)
class InverseBlock(Block):
    """Swaps the encode and decode directions of a block."""
    inner: Block

    def encode(self, block: bytes) -> bytes:
        return self.inner.decode(block)

    def decode(self, block: bytes) -> bytes:
        return self.inner.encode(block)


class ComposedBlocks(Block):
    """Applies blocks left to right when encoding, right to left when decoding."""

    def __init__(self, *blocks: Block):
        if not blocks:
            raise ValueError("ComposedBlocks needs at least one block")
        self.blocks: Tuple[Block, ...] = blocks

    def encode(self, block: bytes) -> bytes:
        for b in self.blocks:
            block = b.encode(block)
        return block

    def decode(self, block: bytes) -> bytes:
        for b in reversed(self.blocks):
            block = b.decode(block)
        return block
