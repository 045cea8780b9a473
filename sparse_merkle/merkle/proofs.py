"""
Sparse Merkle - Proofs
Membership and non-membership proofs and their verification.

This module provides:
- MerkleProof: immutable snapshot of a key's sibling chain
- verify_merkle_proof: pure fold from leaf to root
- MerkleVerifier: stand-alone verifier that needs no tree

A proof carries one sibling hash per level, ordered from the root's
children down to the leaf's sibling. A value hash of ZERO makes it a
non-membership proof.

Verification only needs the hash combinator and the path encoder, so
it never touches a tree or its node store and is safe to run from any
number of threads.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sparse_merkle.crypto.hashing import HashFunction
from sparse_merkle.merkle.combinator import (
    BIG_INT_DOMAIN,
    HEX_DOMAIN,
    Hash,
    HashCombinator,
    Key,
    get_domain,
)
from sparse_merkle.merkle.paths import RIGHT, PathEncoder, PathOrder


_ZEROS = (HEX_DOMAIN.zero, BIG_INT_DOMAIN.zero)


@dataclass(frozen=True)
class MerkleProof:
    """
    A proof that a key maps to a value hash (ZERO for absent keys).

    Attributes:
        value_hash: Hash stored at the key's leaf, ZERO if absent
        root_hash: Root commitment the proof was created against
        key: The key being proven
        siblings: One sibling hash per level, root-to-leaf order
    """
    value_hash: Hash
    root_hash: Hash
    key: Key
    siblings: tuple[Hash, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.siblings, tuple):
            object.__setattr__(self, "siblings", tuple(self.siblings))

    @property
    def depth(self) -> int:
        return len(self.siblings)

    @property
    def is_membership(self) -> bool:
        """False for non-membership proofs (value hash is ZERO)."""
        return self.value_hash not in _ZEROS


def verify_merkle_proof(
    proof: MerkleProof,
    combinator: HashCombinator,
    encoder: PathEncoder,
) -> bool:
    """
    Verify a proof against its own root hash.

    Algorithm:
    1. Compute the path for proof.key
    2. Start with proof.value_hash at the leaf
    3. From the deepest level up, combine with that level's sibling:
       sibling on the left when the path bit is 1, on the right otherwise
    4. Compare the result with proof.root_hash

    Args:
        proof: Proof to verify
        combinator: Zero-absorbing combinator of the tree
        encoder: Path encoder with the tree's depth and bit order

    Returns:
        True if the proof is valid, False otherwise

    Raises:
        TypeMismatchError, KeyTooLargeError: If proof.key is not a valid key
    """
    path = encoder.key_to_path(proof.key)
    if len(proof.siblings) != len(path):
        return False

    domain = combinator.domain
    hashes: Sequence[Hash] = (proof.value_hash, proof.root_hash, *proof.siblings)
    if not all(domain.accepts(h) for h in hashes):
        return False

    node_hash = proof.value_hash
    for level in range(len(path) - 1, -1, -1):
        sibling = proof.siblings[level]
        if path[level] == RIGHT:
            node_hash = combinator.combine(sibling, node_hash)
        else:
            node_hash = combinator.combine(node_hash, sibling)

    return node_hash == proof.root_hash


class MerkleVerifier:
    """
    Verifies proofs without access to the tree that produced them.

    Must be configured with the same hash function, depth, representation
    and path order as the tree.

    Example:
        >>> verifier = MerkleVerifier(sha256_hex_hash, depth=3)
        >>> verifier.verify(tree.create_proof("1"))
        True
    """

    def __init__(
        self,
        hash_fn: HashFunction,
        depth: int,
        big_numbers: bool = False,
        path_order: PathOrder | str = PathOrder.MSB_FIRST,
    ) -> None:
        domain = get_domain(big_numbers)
        self.combinator = HashCombinator(hash_fn, domain)
        self.encoder = PathEncoder(depth, domain, path_order)

    @property
    def zero(self) -> Hash:
        return self.combinator.zero

    def verify(self, proof: MerkleProof) -> bool:
        return verify_merkle_proof(proof, self.combinator, self.encoder)

    def verify_membership(self, proof: MerkleProof, value_hash: Hash) -> bool:
        """True if the proof is valid and shows key -> value_hash."""
        if value_hash == self.zero or proof.value_hash != value_hash:
            return False
        return self.verify(proof)

    def verify_non_membership(self, proof: MerkleProof) -> bool:
        """True if the proof is valid and shows the key is absent."""
        if proof.value_hash != self.zero:
            return False
        return self.verify(proof)


__all__ = [
    "MerkleProof",
    "verify_merkle_proof",
    "MerkleVerifier",
]
