"""
Sparse Merkle - Path Encoding
Maps a key to the sequence of left/right turns from the root to its leaf.

A path has exactly `depth` entries; entry i is the direction taken at
level i (0 = left child, 1 = right child). The key's natural binary
digits are left-padded with zeros to the tree depth.

Bit order is fixed per tree:
- MSB_FIRST (default): the most significant bit picks the root's child,
  so numerically close keys share long path prefixes.
- LSB_FIRST: the padded digits are reversed before use, so the least
  significant bit picks the root's child.

Proofs only verify under the order that produced them.
"""
from __future__ import annotations

from enum import Enum

from sparse_merkle.merkle.combinator import HashDomain, Key
from sparse_merkle.schemas.errors import ConfigurationError, KeyTooLargeError, TypeMismatchError


Path = tuple[int, ...]

LEFT = 0
RIGHT = 1


class PathOrder(str, Enum):
    """Which end of the key controls the top of the tree."""
    MSB_FIRST = "msb"
    LSB_FIRST = "lsb"

    @classmethod
    def parse(cls, value: "PathOrder | str") -> "PathOrder":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown path order: {value!r}",
                details={"allowed": [o.value for o in cls]},
            ) from None


class PathEncoder:
    """
    Converts keys into fixed-length direction paths.

    Example:
        >>> encoder = PathEncoder(3, HEX_DOMAIN)
        >>> encoder.key_to_path("6")
        (1, 1, 0)
    """

    def __init__(
        self,
        depth: int,
        domain: HashDomain,
        order: PathOrder | str = PathOrder.MSB_FIRST,
    ) -> None:
        if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1:
            raise ConfigurationError(
                f"Tree depth must be a positive integer, got {depth!r}",
                details={"depth": repr(depth)},
            )
        self.depth = depth
        self.domain = domain
        self.order = PathOrder.parse(order)

    def check_key(self, key: Key) -> str:
        """
        Validate a key and return its natural binary digits.

        Raises:
            TypeMismatchError: If the key is not in the tree's representation
            KeyTooLargeError: If the key needs more than `depth` bits
        """
        if not self.domain.accepts(key):
            raise TypeMismatchError(
                f"Key {key!r} must be a {self.domain.describe()}",
                value=key,
                expected=self.domain.describe(),
            )
        bits = self.domain.to_bits(key)
        if len(bits) > self.depth:
            raise KeyTooLargeError(
                f"The key {key} is too big for the tree depth {self.depth}",
                key=key,
                bit_length=len(bits),
                depth=self.depth,
            )
        return bits

    def key_to_path(self, key: Key) -> Path:
        bits = self.check_key(key).zfill(self.depth)
        if self.order is PathOrder.LSB_FIRST:
            bits = bits[::-1]
        return tuple(RIGHT if b == "1" else LEFT for b in bits)

    def __repr__(self) -> str:
        return f"PathEncoder(depth={self.depth}, order={self.order.value!r})"


__all__ = [
    "Path",
    "LEFT",
    "RIGHT",
    "PathOrder",
    "PathEncoder",
]
