"""One incremental linear system per output byte position.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from sboxlab.linalg.gfmatrix import LinearAlgebraBackend, default_backend


def histogram_row(values: Sequence[int], backend: LinearAlgebraBackend, size: int = 256):
    """Count how often each byte value occurs, accumulated in the field.

    Repeatedly adding 1 in characteristic 2 leaves the parity of the count.
    """
    counts = np.bincount(np.asarray(values, dtype=np.int64), minlength=size)
    return backend.row(counts % 2)


class RelationAccumulator:
    """Append-only relations for each of ``positions`` byte positions."""

    def __init__(self, positions: int = 16, size: int = 256, backend: Optional[LinearAlgebraBackend] = None):
        self.backend = backend or default_backend()
        self.size = size
        self._matrices = [self.backend.incremental_matrix(size) for _ in range(positions)]

    def __len__(self) -> int:
        return len(self._matrices)

    def add(self, pos: int, row) -> bool:
        return self._matrices[pos].add(row)

    def add_observations(self, ciphertexts: Sequence[bytes]) -> List[bool]:
        """Add one histogram row per position from a batch of ciphertexts."""
        grown = []
        for pos in range(len(self._matrices)):
            row = histogram_row([ct[pos] for ct in ciphertexts], self.backend, self.size)
            grown.append(self.add(pos, row))
        return grown

    def dimension(self, pos: int) -> int:
        return len(self._matrices[pos])

    def dimensions(self) -> List[int]:
        return [len(m) for m in self._matrices]

    def sufficiently_defined(self, threshold: int = 247) -> bool:
        """Every position's null space is at most ``size - threshold`` dimensional.

        Small enough to search, but not so small that there is nowhere left
        to look for the permutation vector.
        """
        return all(len(m) >= threshold for m in self._matrices)

    def matrices(self) -> list:
        return [m.to_matrix() for m in self._matrices]
