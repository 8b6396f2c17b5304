"""Incremental matrices and null spaces over GF(2^8).

Thin layer over the ``galois`` library. The attack code only talks to a
:class:`LinearAlgebraBackend`, so another field or matrix implementation can
be swapped in (tests use a counting fake).

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable, List, Sequence

import galois
import numpy as np

# AES reduction polynomial x^8 + x^4 + x^3 + x + 1
GF256 = galois.GF(2**8, irreducible_poly=0x11B)


def to_ints(row) -> np.ndarray:
    """Return the coordinates of a field row as a plain integer array."""
    if isinstance(row, galois.FieldArray):
        return row.view(np.ndarray)
    return np.asarray(row)


def is_permutation(row, size: int = 256) -> bool:
    """True if the first ``size`` coordinates are a bijection on 0..size-1."""
    vals = to_ints(row)[:size]
    if vals.shape[0] != size:
        return False
    return bool(np.array_equal(np.sort(vals), np.arange(size)))


class IncrementalMatrix:
    """A matrix that absorbs rows one at a time and tracks its rank.

    Accepted rows are kept verbatim for :meth:`to_matrix`. Alongside them a
    reduced echelon copy is maintained where every pivot column is zero
    except in its own row, so reducing a new row is a single product.
    """

    def __init__(self, n: int, field=GF256):
        self.n = n
        self.field = field
        self._rows: List = []
        self._reduced = field.Zeros((0, n))
        self._pivots: List[int] = []

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def dimension(self) -> int:
        return len(self._rows)

    def reduce(self, row):
        """Reduce ``row`` against the accumulated rows."""
        row = self.field(row)
        if not self._pivots:
            return row.copy()
        coeffs = row[self._pivots].reshape(1, -1)
        return row - (coeffs @ self._reduced).reshape(-1)

    def add(self, row) -> bool:
        """Add a row. Returns False if it was already in the span."""
        if len(row) != self.n:
            raise ValueError(f"row must have {self.n} coordinates, got {len(row)}")

        reduced = self.reduce(row)
        nonzero = np.flatnonzero(to_ints(reduced))
        if nonzero.size == 0:
            return False

        pivot = int(nonzero[0])
        reduced = reduced / reduced[pivot]
        if self._pivots:
            self._reduced = self._reduced - self._reduced[:, pivot:pivot + 1] * reduced
        self._reduced = self.field(np.concatenate((self._reduced, reduced.reshape(1, -1)), axis=0))
        self._pivots.append(pivot)
        self._rows.append(self.field(row))
        return True

    def to_matrix(self):
        """Return the accepted rows as an ``n x n`` matrix, zero-padded."""
        out = self.field.Zeros((self.n, self.n))
        for i, row in enumerate(self._rows[: self.n]):
            out[i] = row
        return out


class LinearAlgebraBackend:
    """Narrow interface the attack needs from a linear-algebra engine."""

    field = None

    def row(self, values: Iterable[int]):  # pragma: no cover
        raise NotImplementedError

    def incremental_matrix(self, n: int):  # pragma: no cover
        raise NotImplementedError

    def null_space(self, matrix):  # pragma: no cover
        raise NotImplementedError

    def combine(self, coeffs: Sequence[int], basis):  # pragma: no cover
        raise NotImplementedError

    def is_permutation(self, row, size: int = 256) -> bool:
        return is_permutation(row, size)


class GaloisBackend(LinearAlgebraBackend):
    """Default backend: ``galois`` field arrays with numpy storage."""

    def __init__(self, field=None):
        self.field = field if field is not None else GF256

    def row(self, values: Iterable[int]):
        return self.field(np.asarray(list(values), dtype=np.int64))

    def incremental_matrix(self, n: int) -> IncrementalMatrix:
        return IncrementalMatrix(n, field=self.field)

    def null_space(self, matrix):
        """Basis of ``{x : matrix @ x == 0}``, one vector per row."""
        return self.field(matrix).null_space()

    def combine(self, coeffs: Sequence[int], basis):
        """Linear combination ``sum(coeffs[i] * basis[i])``."""
        c = self.field(np.asarray(coeffs, dtype=np.int64)).reshape(1, -1)
        return (c @ self.field(basis)).reshape(-1)


@lru_cache(maxsize=1)
def default_backend() -> GaloisBackend:
    return GaloisBackend()
