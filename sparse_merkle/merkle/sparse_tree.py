"""
Sparse Merkle - Tree Engine
Fixed-depth sparse Merkle tree with incremental bottom-up updates.

This module provides:
- SparseMerkleTree: get / add / update / delete / create_proof / verify_proof

Characteristics:
- Binary tree; every leaf sits at the same depth D
- A leaf holds the hash of a value, never the value itself
- ZERO means "no entry"; empty subtrees are never materialized
- The hash combinator treats ZERO as identity, so a subtree with a single
  leaf hashes to that leaf's value hash at any height

Node layout:
- Leaf node: (value_hash, ZERO)
- Internal node: (left_child_hash, right_child_hash)
- Root: ZERO_NODE (ZERO, ZERO) exactly when the tree is empty

Update Rules (Hard Contracts):
1. All argument validation happens before any mutation
2. Only the D positions on the key's path are rewritten
3. Every new node value is computed before the first write, so a failing
   hash call leaves the tree unchanged
4. Deleting the last entry under an ancestor prunes that ancestor

Thread Safety:
- No internal locking; callers serialize mutations and reads on one tree
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from sparse_merkle.crypto.hashing import HashFunction, get_hash_function
from sparse_merkle.merkle.combinator import Hash, HashCombinator, Key, Node, get_domain
from sparse_merkle.merkle.node_store import ROOT_ID, NodeId, NodeStore, child_id, parent_id
from sparse_merkle.merkle.paths import LEFT, Path, PathEncoder, PathOrder
from sparse_merkle.merkle.proofs import MerkleProof, verify_merkle_proof
from sparse_merkle.schemas.errors import (
    InvariantViolation,
    ReservedValueError,
    TypeMismatchError,
)

if TYPE_CHECKING:
    from sparse_merkle.config.runtime import RuntimeConfig, TreeConfig


logger = logging.getLogger(__name__)


@dataclass
class _Walk:
    """
    Result of walking one key's path from the root.

    node_ids covers all D positions on the path. nodes holds the
    materialized prefix only; its length is the fork level, the first
    level with no stored node.
    """
    path: Path
    node_ids: list[NodeId] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)
    siblings: list[Hash] = field(default_factory=list)
    value_hash: Optional[Hash] = None

    @property
    def fork_level(self) -> int:
        return len(self.nodes)

    @property
    def reached_leaf(self) -> bool:
        return len(self.nodes) == len(self.path)


# Staged write: None removes the node
_Change = tuple[NodeId, Optional[Node]]


class SparseMerkleTree:
    """
    Sparse Merkle tree over hex-string or big-number hashes.

    Args:
        hash_fn: Deterministic two-argument hash function returning the
            configured representation
        depth: Number of levels below the root (positive)
        big_numbers: Use non-negative ints instead of hex strings
        path_order: Key bit order, MSB-first by default
        strict_deletes: Raise InvariantViolation when deleting an absent key
            instead of returning False

    Raises:
        ConfigurationError: If hash_fn fails validation or depth is invalid

    Example:
        >>> tree = SparseMerkleTree(sha256_hex_hash, depth=8)
        >>> tree.add("2b", "44")
        >>> tree.get("2b")
        '44'
        >>> tree.verify_proof(tree.create_proof("2b"))
        True
    """

    def __init__(
        self,
        hash_fn: HashFunction,
        depth: int,
        big_numbers: bool = False,
        *,
        path_order: PathOrder | str = PathOrder.MSB_FIRST,
        strict_deletes: bool = False,
    ) -> None:
        domain = get_domain(big_numbers)
        self._combinator = HashCombinator(hash_fn, domain)
        self._encoder = PathEncoder(depth, domain, path_order)

        self.depth = depth
        self.big_numbers = big_numbers
        self.strict_deletes = strict_deletes
        self.zero: Hash = domain.zero
        self._nodes = NodeStore(depth, self.zero)
        self._size = 0

        logger.info(
            f"Created sparse Merkle tree (depth={depth}, "
            f"representation={domain.describe()}, order={self._encoder.order.value})"
        )

    @classmethod
    def from_config(
        cls,
        config: "TreeConfig | RuntimeConfig",
        hash_fn: HashFunction | None = None,
    ) -> "SparseMerkleTree":
        """
        Build a tree from configuration.

        When hash_fn is omitted the configured stock hash function is used.
        """
        tree_config = getattr(config, "tree", config)
        if hash_fn is None:
            hash_fn = get_hash_function(tree_config.hash_function, tree_config.big_numbers)
        return cls(
            hash_fn,
            tree_config.depth,
            tree_config.big_numbers,
            path_order=tree_config.path_order,
            strict_deletes=tree_config.strict_deletes,
        )

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def combinator(self) -> HashCombinator:
        return self._combinator

    @property
    def encoder(self) -> PathEncoder:
        return self._encoder

    @property
    def node_store(self) -> NodeStore:
        return self._nodes

    @property
    def root(self) -> Node:
        node = self._nodes.get(ROOT_ID)
        return self._nodes.zero_node if node is None else node

    @property
    def root_hash(self) -> Hash:
        """The root commitment."""
        return self._combinator.combine_node(self.root)

    def is_empty(self) -> bool:
        return self.root == self._nodes.zero_node

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return self.get(key) != self.zero

    def __repr__(self) -> str:
        return (
            f"SparseMerkleTree(depth={self.depth}, big_numbers={self.big_numbers}, "
            f"entries={self._size})"
        )

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def get(self, key: Key) -> Hash:
        """Return the value hash stored for key, ZERO if absent."""
        return self._walk(key).value_hash

    def add(self, key: Key, value_hash: Hash) -> None:
        """
        Add or overwrite an entry.

        Raises:
            TypeMismatchError: If key or value_hash has the wrong representation
            KeyTooLargeError: If key needs more than depth bits
            ReservedValueError: If value_hash is ZERO
        """
        self._check_hash(value_hash)
        if value_hash == self.zero:
            raise ReservedValueError(
                "Value hash cannot be zero, which denotes an empty subtree",
                key=key,
            )
        self.update(key, value_hash)

    def update(self, key: Key, value_hash: Hash) -> None:
        """
        Set the value hash of key, rewriting every node on its path.

        A value hash of ZERO removes the entry; removing an absent key this
        way is a no-op.
        """
        self._check_hash(value_hash)
        walk = self._walk(key)

        if walk.value_hash == value_hash:
            logger.debug(f"Update of key {key} is a no-op")
            return

        self._apply(walk, value_hash)

    def delete(self, key: Key) -> bool:
        """
        Remove an entry.

        Returns:
            True if an entry was removed, False if the key was absent

        Raises:
            InvariantViolation: If the key is absent and strict_deletes is set
        """
        walk = self._walk(key)

        if walk.value_hash == self.zero:
            if self.strict_deletes:
                raise InvariantViolation(
                    f"Cannot delete key {key}: no leaf at depth {self.depth}",
                    details={"key": str(key), "fork_level": walk.fork_level},
                )
            logger.debug(f"Delete of absent key {key} ignored")
            return False

        self._apply(walk, self.zero)
        return True

    def create_proof(self, key: Key) -> MerkleProof:
        """
        Create a membership proof (present key) or non-membership proof
        (absent key, value_hash ZERO).
        """
        walk = self._walk(key)
        return MerkleProof(
            value_hash=walk.value_hash,
            root_hash=self.root_hash,
            key=key,
            siblings=tuple(walk.siblings),
        )

    def verify_proof(self, proof: MerkleProof) -> bool:
        """Verify a proof with this tree's hash function, depth and bit order."""
        return verify_merkle_proof(proof, self._combinator, self._encoder)

    def leaves(self) -> Iterator[tuple[int, Hash]]:
        """
        Yield (path_index, value_hash) for every entry, left to right.

        path_index is the leaf's path read as a binary number; with
        MSB-first order it equals the integer value of the key.
        """
        if self.is_empty():
            return
        stack: list[NodeId] = [ROOT_ID]
        while stack:
            node_id = stack.pop()
            node = self._nodes.get(node_id)
            level = node_id[0]
            internal: list[NodeId] = []
            for direction in (0, 1):
                child_hash = node[direction]
                if child_hash == self.zero:
                    continue
                cid = child_id(node_id, direction)
                if level + 1 == self.depth:
                    yield cid[1], child_hash
                else:
                    internal.append(cid)
            stack.extend(reversed(internal))

    def check_invariants(self) -> None:
        """
        Verify the stored structure against a fully materialized tree.

        Raises:
            InvariantViolation: On the first inconsistency found
        """
        zero_node = self._nodes.zero_node
        if len(self._nodes) and ROOT_ID not in self._nodes:
            raise InvariantViolation("Stored nodes exist but the root is missing")

        leaf_count = 0
        for node_id, node in self._nodes:
            level, prefix = node_id
            details = {"node_id": list(node_id)}
            if not 0 <= level < self.depth:
                raise InvariantViolation(f"Node {node_id} lies outside the tree", details=details)
            if node == zero_node:
                raise InvariantViolation(f"Empty subtree materialized at {node_id}", details=details)

            if level > 0:
                parent = self._nodes.get(parent_id(node_id))
                if parent is None:
                    raise InvariantViolation(f"Node {node_id} is unreachable", details=details)
                if parent[prefix & 1] != self._combinator.combine_node(node):
                    raise InvariantViolation(
                        f"Parent of {node_id} holds a stale hash",
                        details=details,
                    )

            # Resolves internal children, raising if one is missing
            self._nodes.children(node_id)
            if level + 1 == self.depth:
                leaf_count += sum(1 for h in node if h != self.zero)

        if leaf_count != self._size:
            raise InvariantViolation(
                f"Tree holds {leaf_count} leaves but counted {self._size} entries",
                details={"leaves": leaf_count, "entries": self._size},
            )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_hash(self, value: Hash) -> None:
        domain = self._combinator.domain
        if not domain.accepts(value):
            raise TypeMismatchError(
                f"Parameter {value!r} must be a {domain.describe()}",
                value=value,
                expected=domain.describe(),
            )

    def _walk(self, key: Key) -> _Walk:
        """
        Retrieval walk from the root towards key's leaf.

        Stops looking nodes up at the first unmaterialized level; every
        sibling below it is ZERO.
        """
        walk = _Walk(path=self._encoder.key_to_path(key))
        node_id = ROOT_ID
        for level, direction in enumerate(walk.path):
            walk.node_ids.append(node_id)
            node = self._nodes.get(node_id) if walk.fork_level == level else None
            if node is None:
                walk.siblings.append(self.zero)
            else:
                walk.nodes.append(node)
                walk.siblings.append(node[1 - direction])
            node_id = child_id(node_id, direction)

        if walk.reached_leaf:
            walk.value_hash = walk.nodes[-1][walk.path[-1]]
        else:
            walk.value_hash = self.zero
        return walk

    def _apply(self, walk: _Walk, value_hash: Hash) -> None:
        if value_hash == self.zero and not walk.reached_leaf:
            raise InvariantViolation(
                f"Path to leaf stops at level {walk.fork_level}, not at depth {self.depth}",
                details={"fork_level": walk.fork_level, "depth": self.depth},
            )

        changes = self._rebuild(walk, value_hash)
        for node_id, node in changes:
            if node is None:
                self._nodes.discard(node_id)
            else:
                self._nodes.put(node_id, node)

        if walk.value_hash == self.zero:
            self._size += 1
        elif value_hash == self.zero:
            self._size -= 1

        pruned = sum(1 for _, node in changes if node is None)
        created = len(changes) - walk.fork_level
        logger.debug(
            f"Rewrote path (fork_level={walk.fork_level}, created={created}, "
            f"pruned={pruned}, entries={self._size})"
        )

    def _rebuild(self, walk: _Walk, value_hash: Hash) -> list[_Change]:
        """
        Compute new nodes for every level of the path, deepest first.

        Below the fork level fresh nodes get one non-zero child and one
        ZERO child. A node left with two ZERO children is pruned. Each
        level's combined hash becomes its parent's child hash on the
        path side.
        """
        zero_node = self._nodes.zero_node
        changes: list[_Change] = []
        child_hash = value_hash

        for level in range(self.depth - 1, -1, -1):
            if level < walk.fork_level:
                node = walk.nodes[level]
            else:
                node = zero_node

            if walk.path[level] == LEFT:
                node = (child_hash, node[1])
            else:
                node = (node[0], child_hash)

            node_id = walk.node_ids[level]
            changes.append((node_id, None if node == zero_node else node))
            child_hash = self._combinator.combine_node(node)

        return changes


__all__ = [
    "SparseMerkleTree",
]
