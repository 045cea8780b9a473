"""
sparse-merkle

Sparse Merkle tree engine: commits a sparse key -> value-hash mapping to a
single root hash and produces membership and non-membership proofs.
"""

from sparse_merkle.merkle import MerkleProof, MerkleVerifier, SparseMerkleTree
from sparse_merkle.schemas import (
    ConfigurationError,
    InvariantViolation,
    KeyTooLargeError,
    ReservedValueError,
    SMTException,
    TypeMismatchError,
)

__version__ = "0.1.0"

__all__ = [
    "SparseMerkleTree",
    "MerkleProof",
    "MerkleVerifier",
    "SMTException",
    "ConfigurationError",
    "TypeMismatchError",
    "KeyTooLargeError",
    "ReservedValueError",
    "InvariantViolation",
]
