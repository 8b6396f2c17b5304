"""Random search for a permutation vector inside a null space.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import random
import secrets
from typing import Optional

from sboxlab.linalg.gfmatrix import LinearAlgebraBackend, default_backend

from .errors import MalformedBasisError, SearchExhaustedError

logger = logging.getLogger(__name__)


def random_linear_combination(basis, backend: Optional[LinearAlgebraBackend] = None,
                              rng: Optional[random.Random] = None):
    """Combine the basis vectors with coefficients drawn uniformly from the field."""
    backend = backend or default_backend()
    rng = rng or secrets.SystemRandom()
    order = backend.field.order
    coeffs = [rng.randrange(order) for _ in range(len(basis))]
    return backend.combine(coeffs, basis)


def find_permutation(
    basis,
    backend: Optional[LinearAlgebraBackend] = None,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = 100_000,
    size: int = 256,
):
    """Return the first random combination of ``basis`` that permutes 0..size-1.

    With ``max_attempts=None`` the search only stops on success.
    """
    if basis is None or len(basis) == 0:
        raise MalformedBasisError("permutation search needs a non-empty null-space basis")
    lengths = {len(v) for v in basis}
    if len(lengths) != 1 or lengths.pop() < size:
        raise MalformedBasisError(f"basis vectors must share a length of at least {size}")

    backend = backend or default_backend()
    rng = rng or secrets.SystemRandom()

    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        v = random_linear_combination(basis, backend, rng)
        if backend.is_permutation(v, size):
            logger.debug("Permutation found after %d combinations (basis size %d)", attempts, len(basis))
            return v

    raise SearchExhaustedError(attempts, len(basis))
