"""
Sparse Merkle - Node Store
Arena of the materialized internal nodes of one tree.

Each internal node is identified by its position (level, prefix), where
prefix is the integer formed by the first `level` path bits. The store
owns every node exclusively; a node holds only the hashes of its two
children, never references to other nodes.

Absence from the store means one of:
- the position lies inside an empty (ZERO) subtree
- the position is at leaf level, where a leaf (value_hash, ZERO) is
  implied by its parent's child hash
"""
from __future__ import annotations

from typing import Iterator

from sparse_merkle.merkle.combinator import Hash, Node
from sparse_merkle.schemas.errors import InvariantViolation


NodeId = tuple[int, int]
ChildNodes = tuple[Node, Node]

ROOT_ID: NodeId = (0, 0)


def child_id(node_id: NodeId, direction: int) -> NodeId:
    """Position of the left (0) or right (1) child."""
    level, prefix = node_id
    return (level + 1, (prefix << 1) | direction)


def parent_id(node_id: NodeId) -> NodeId:
    level, prefix = node_id
    return (level - 1, prefix >> 1)


class NodeStore:
    """Mapping from node position to node, for levels 0..depth-1."""

    def __init__(self, depth: int, zero: Hash) -> None:
        self.depth = depth
        self.zero = zero
        self.zero_node: Node = (zero, zero)
        self._nodes: dict[NodeId, Node] = {}

    def get(self, node_id: NodeId) -> Node | None:
        return self._nodes.get(node_id)

    def put(self, node_id: NodeId, node: Node) -> None:
        self._nodes[node_id] = node

    def discard(self, node_id: NodeId) -> None:
        self._nodes.pop(node_id, None)

    def clear(self) -> None:
        self._nodes.clear()

    def children(self, node_id: NodeId) -> ChildNodes:
        """
        Materialize the two child nodes of a stored node.

        Leaf children come back as (value_hash, ZERO); empty children as
        (ZERO, ZERO); internal children are read from the store.

        Raises:
            KeyError: If node_id is not stored
            InvariantViolation: If a non-zero internal child is missing
        """
        node = self._nodes[node_id]
        level = node_id[0]
        result = []
        for direction in (0, 1):
            child_hash = node[direction]
            if child_hash == self.zero:
                result.append(self.zero_node)
            elif level + 1 == self.depth:
                result.append((child_hash, self.zero))
            else:
                cid = child_id(node_id, direction)
                child = self._nodes.get(cid)
                if child is None:
                    raise InvariantViolation(
                        f"Node {node_id} references missing child {cid}",
                        details={"node_id": list(node_id), "child_id": list(cid)},
                    )
                result.append(child)
        return (result[0], result[1])

    def ids(self) -> list[NodeId]:
        return list(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[tuple[NodeId, Node]]:
        return iter(self._nodes.items())


__all__ = [
    "NodeId",
    "ChildNodes",
    "ROOT_ID",
    "child_id",
    "parent_id",
    "NodeStore",
]
