"""Recovery of the trailing S-box layer of a block cipher.

A variant of the cube attack. Each batch from the generator is assumed to
XOR to zero just before the last S-box layer. For every output position the
parity of each byte value across the batch's ciphertexts is then a relation
that any vector ``v`` with ``v[y] = A(S^-1(y))`` (``A`` affine) satisfies.
Once enough relations are collected the null space is small enough to be
searched at random for such a permutation vector.

Because of that affine freedom the layer is recovered up to an affine
encoding on its input. The encoding is absorbed by the peeled oracle, so
``layer.encode(peeled.encode(p)) == cipher.encode(p)`` always holds.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import random
import secrets
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from sboxlab.encoding import BLOCK_SIZE, Block, ComposedBlocks, ConcatenatedBlock, InverseBlock, SBox
from sboxlab.linalg.gfmatrix import LinearAlgebraBackend, default_backend

from .accumulator import RelationAccumulator
from .errors import ConvergenceError, MalformedBasisError, SearchExhaustedError
from .params import AttackParams
from .permutation import find_permutation
from .sbox_builder import new_sbox

logger = logging.getLogger(__name__)

Generator = Callable[[], Sequence[bytes]]


@dataclass
class SBoxRecovery:
    """Output of :func:`recover_sboxes`."""
    layer: ConcatenatedBlock        # recovered last S-box layer
    peeled: Block                   # cipher followed by the inverse of ``layer``
    attempts: int                   # generator batches consumed
    dimensions: List[int] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def sboxes(self) -> List[SBox]:
        return list(self.layer)

    def summary(self) -> str:
        return (
            f"Recovered {len(self.layer)} S-boxes after {self.attempts} batches "
            f"(min rank {min(self.dimensions) if self.dimensions else 0}, "
            f"{self.elapsed_seconds:.2f}s)"
        )


def collect_relations(
    cipher: Block,
    generator: Generator,
    params: AttackParams,
    accumulator: RelationAccumulator,
) -> int:
    """Query the oracle until every position is sufficiently defined.

    Returns the number of batches used. Raises :class:`ConvergenceError` when
    the attempt budget runs out first.
    """
    attempt = 0
    while attempt < params.attempt_budget and not accumulator.sufficiently_defined(params.sufficiency_threshold):
        pts = generator()
        cts = [cipher.encode(pt) for pt in pts]
        accumulator.add_observations(cts)
        attempt += 1

        if attempt % 100 == 0:
            logger.debug("attempt %d: min rank %d", attempt, min(accumulator.dimensions()))

    if not accumulator.sufficiently_defined(params.sufficiency_threshold):
        dims = accumulator.dimensions()
        logger.error("Relation collection did not converge after %d attempts: %s", attempt, dims)
        raise ConvergenceError(attempt, dims, params.sufficiency_threshold)

    logger.info("Relations sufficient after %d attempts (ranks %s)", attempt, accumulator.dimensions())
    return attempt


def recover_sboxes(
    cipher: Block,
    generator: Generator,
    params: Optional[AttackParams] = None,
    *,
    backend: Optional[LinearAlgebraBackend] = None,
    rng: Optional[random.Random] = None,
) -> SBoxRecovery:
    """Remove the trailing S-box layer of ``cipher``.

    Args:
        cipher: Encode-only oracle on 16-byte blocks.
        generator: Zero-argument callable returning a batch of plaintexts.
        params: Attempt budget, sufficiency threshold and search cap.
        backend: Linear-algebra engine; ``galois`` over GF(2^8) by default.
        rng: Source of combination coefficients; ``secrets.SystemRandom`` by default.

    Returns:
        SBoxRecovery with the recovered layer and the peeled oracle.
    """
    params = params or AttackParams()
    backend = backend or default_backend()
    rng = rng or secrets.SystemRandom()
    start = time.time()

    accumulator = RelationAccumulator(BLOCK_SIZE, 256, backend)
    attempts = collect_relations(cipher, generator, params, accumulator)

    sboxes: List[SBox] = []
    for pos, matrix in enumerate(accumulator.matrices()):
        basis = backend.null_space(matrix)
        if len(basis) == 0:
            raise MalformedBasisError(f"null space at position {pos} is empty; relations are inconsistent")
        try:
            v = find_permutation(basis, backend, rng, max_attempts=params.search_limit)
        except SearchExhaustedError as e:
            raise SearchExhaustedError(e.attempts, e.basis_size, pos) from e
        sboxes.append(new_sbox(v, backwards=True))
        logger.debug("position %d: null space dimension %d", pos, len(basis))

    layer = ConcatenatedBlock(sboxes)
    peeled = ComposedBlocks(cipher, InverseBlock(layer))
    elapsed = time.time() - start
    logger.info("Recovered S-box layer in %.2fs", elapsed)

    return SBoxRecovery(
        layer=layer,
        peeled=peeled,
        attempts=attempts,
        dimensions=accumulator.dimensions(),
        elapsed_seconds=elapsed,
    )
