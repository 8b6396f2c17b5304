"""Failure modes of S-box layer recovery.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import List, Optional


class RecoveryError(RuntimeError):
    """Base class for every failure raised by the recovery attack."""


class ConvergenceError(RecoveryError):
    """The attempt budget ran out before every position had enough relations.

    Callers may retry with a different plaintext generator.
    """

    def __init__(self, attempts: int, dimensions: List[int], threshold: int):
        self.attempts = attempts
        self.dimensions = list(dimensions)
        self.threshold = threshold
        short = [pos for pos, d in enumerate(self.dimensions) if d < threshold]
        super().__init__(
            f"Cube attack failed to find enough linear relations in the S-boxes after "
            f"{attempts} attempts (positions below {threshold}: {short}, "
            f"dimensions={self.dimensions})"
        )


class SearchExhaustedError(RecoveryError):
    """No permutation vector was found within the permutation search cap."""

    def __init__(self, attempts: int, basis_size: int, position: Optional[int] = None):
        self.attempts = attempts
        self.basis_size = basis_size
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(
            f"No permutation found{where} after {attempts} random combinations "
            f"of a {basis_size}-dimensional null space"
        )


class InconsistencyError(RecoveryError):
    """Internal consistency violation; not retriable."""


class MalformedBasisError(InconsistencyError):
    """The null-space basis handed to the permutation search is unusable."""


class NotAPermutationError(InconsistencyError):
    """A vector claimed to be a permutation is not a bijection on 0..255."""
