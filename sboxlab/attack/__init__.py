"""Recovery of a trailing S-box layer from an encrypt-only oracle.

Research / education only. Do NOT use in production.
"""

from .accumulator import RelationAccumulator, histogram_row
from .errors import (
    ConvergenceError,
    InconsistencyError,
    MalformedBasisError,
    NotAPermutationError,
    RecoveryError,
    SearchExhaustedError,
)
from .generators import cube_generator, integral_generator
from .params import AttackParams
from .permutation import find_permutation, random_linear_combination
from .recover import SBoxRecovery, collect_relations, recover_sboxes
from .sbox_builder import new_sbox

__all__ = [
    "RelationAccumulator",
    "histogram_row",
    "ConvergenceError",
    "InconsistencyError",
    "MalformedBasisError",
    "NotAPermutationError",
    "RecoveryError",
    "SearchExhaustedError",
    "cube_generator",
    "integral_generator",
    "AttackParams",
    "find_permutation",
    "random_linear_combination",
    "SBoxRecovery",
    "collect_relations",
    "recover_sboxes",
    "new_sbox",
]
