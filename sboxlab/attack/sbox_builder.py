from __future__ import annotations

from sboxlab.encoding import SBox
from sboxlab.linalg.gfmatrix import is_permutation, to_ints

from .errors import NotAPermutationError


def new_sbox(vector, backwards: bool = False) -> SBox:
    """Turn a permutation vector into an S-box.

    ``enc_key[i] = vector[i]`` and ``dec_key`` is its inverse. When
    ``backwards`` is set the vector describes S^-1, so the tables are swapped.
    """
    if not is_permutation(vector, 256):
        raise NotAPermutationError("vector's first 256 coordinates are not a permutation of 0..255")

    enc = bytes(int(v) for v in to_ints(vector)[:256])
    dec = bytearray(256)
    for i, j in enumerate(enc):
        dec[j] = i

    if backwards:
        return SBox(enc_key=bytes(dec), dec_key=enc)
    return SBox(enc_key=enc, dec_key=bytes(dec))
