from .gfmatrix import (
    GF256,
    GaloisBackend,
    IncrementalMatrix,
    LinearAlgebraBackend,
    default_backend,
    is_permutation,
    to_ints,
)

__all__ = [
    "GF256",
    "GaloisBackend",
    "IncrementalMatrix",
    "LinearAlgebraBackend",
    "default_backend",
    "is_permutation",
    "to_ints",
]
