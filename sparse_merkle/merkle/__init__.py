"""
Sparse Merkle Tree and Proofs
Fixed-depth sparse Merkle tree with membership and non-membership proofs.

This module provides:
- SparseMerkleTree: get / add / update / delete / create_proof / verify_proof
- MerkleProof: Immutable proof snapshot
- verify_merkle_proof / MerkleVerifier: Verification without a tree
- HashCombinator: Zero-absorbing wrapper around the caller's hash function
- PathEncoder: Key to direction-bit path
- NodeStore: Arena of materialized internal nodes

Usage:
    from sparse_merkle.crypto import sha256_hex_hash
    from sparse_merkle.merkle import SparseMerkleTree, MerkleVerifier

    tree = SparseMerkleTree(sha256_hex_hash, depth=8)
    tree.add("2b", "44")
    proof = tree.create_proof("2b")

    assert MerkleVerifier(sha256_hex_hash, depth=8).verify(proof)
"""
from .combinator import (
    BIG_INT_DOMAIN,
    HEX_DOMAIN,
    BigIntHashDomain,
    Hash,
    HashCombinator,
    HashDomain,
    HexHashDomain,
    Key,
    Node,
    get_domain,
)
from .node_store import ROOT_ID, ChildNodes, NodeId, NodeStore
from .paths import LEFT, RIGHT, Path, PathEncoder, PathOrder
from .proofs import MerkleProof, MerkleVerifier, verify_merkle_proof
from .sparse_tree import SparseMerkleTree


__all__ = [
    # Core types
    "Hash",
    "Key",
    "Node",
    "ChildNodes",
    "NodeId",
    "Path",
    "MerkleProof",
    # Components
    "HashDomain",
    "HexHashDomain",
    "BigIntHashDomain",
    "HEX_DOMAIN",
    "BIG_INT_DOMAIN",
    "get_domain",
    "HashCombinator",
    "PathEncoder",
    "PathOrder",
    "LEFT",
    "RIGHT",
    "NodeStore",
    "ROOT_ID",
    "SparseMerkleTree",
    # Verification
    "verify_merkle_proof",
    "MerkleVerifier",
]
