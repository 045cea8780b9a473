"""
Sparse Merkle - Hash Combinator
Zero-absorbing wrapper around a caller-supplied two-to-one hash function.

This module provides:
- HashDomain: the value representation a tree is built over, chosen once
  at construction (hex strings or non-negative integers)
- HashCombinator: combine(x, y) with ZERO as identity element

Canonical Commitment Rules (Hard Contracts):
1. combine(ZERO, y) = y
2. combine(x, ZERO) = x
3. combine(ZERO, ZERO) = ZERO
4. Otherwise combine(x, y) = H(x, y)

Rules 1-3 let an empty subtree hash to ZERO and a subtree holding a
single leaf hash to that leaf's value hash, whatever its depth.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Union

from sparse_merkle.crypto.hashing import HashFunction, check_hex, hex_to_bin
from sparse_merkle.schemas.errors import ConfigurationError


Hash = Union[str, int]
Key = Union[str, int]
Node = tuple[Hash, Hash]


class HashDomain(ABC):
    """
    Representation of keys and hashes for one tree.

    Resolved once when the tree is built so that the engine never has to
    branch on the representation again.
    """

    name: str = ""
    zero: Hash
    probe: Hash

    @abstractmethod
    def accepts(self, value: Any) -> bool:
        """Return True if value is a key/hash in this representation."""

    @abstractmethod
    def to_bits(self, key: Key) -> str:
        """Natural binary digits of a key, most significant first."""

    @property
    def zero_node(self) -> Node:
        return (self.zero, self.zero)

    def describe(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class HexHashDomain(HashDomain):
    """Hexadecimal strings of 1 to 64 digits; ZERO is "0"."""

    name = "hexadecimal string"
    zero = "0"
    probe = "1"

    def accepts(self, value: Any) -> bool:
        return check_hex(value)

    def to_bits(self, key: Key) -> str:
        return hex_to_bin(key)


class BigIntHashDomain(HashDomain):
    """Non-negative arbitrary-precision integers; ZERO is 0."""

    name = "big number"
    zero = 0
    probe = 1

    def accepts(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0

    def to_bits(self, key: Key) -> str:
        return format(key, "b")


HEX_DOMAIN = HexHashDomain()
BIG_INT_DOMAIN = BigIntHashDomain()


def get_domain(big_numbers: bool) -> HashDomain:
    """Return the shared domain instance for the requested representation."""
    return BIG_INT_DOMAIN if big_numbers else HEX_DOMAIN


class HashCombinator:
    """
    Combines two child hashes into their parent hash.

    The wrapped hash function is only called when both operands are
    non-zero. It is probed once at construction: H(1, 1) in big-number
    mode, H("1", "1") in string mode, and the result must belong to the
    domain.

    Example:
        >>> combinator = HashCombinator(sha256_hex_hash, HEX_DOMAIN)
        >>> combinator.combine("0", "ab")
        'ab'
    """

    def __init__(self, hash_fn: HashFunction, domain: HashDomain) -> None:
        if not callable(hash_fn):
            raise ConfigurationError(
                "The hash function must be callable",
                details={"hash_fn": repr(hash_fn)},
            )

        try:
            sample = hash_fn(domain.probe, domain.probe)
        except Exception as e:
            raise ConfigurationError(
                f"The hash function failed on probe input: {e}",
                details={"domain": domain.describe()},
            ) from e

        if not domain.accepts(sample):
            raise ConfigurationError(
                f"The hash function must return a {domain.describe()}",
                details={"domain": domain.describe(), "sample": repr(sample)},
            )

        self._hash = hash_fn
        self.domain = domain
        self.zero = domain.zero

    def combine(self, x: Hash, y: Hash) -> Hash:
        if x == self.zero:
            return y
        if y == self.zero:
            return x
        return self._hash(x, y)

    def combine_node(self, node: Node) -> Hash:
        """Hash of the subtree rooted at node."""
        return self.combine(node[0], node[1])

    def __repr__(self) -> str:
        return f"HashCombinator(domain={self.domain!r})"


__all__ = [
    "Hash",
    "Key",
    "Node",
    "HashDomain",
    "HexHashDomain",
    "BigIntHashDomain",
    "HEX_DOMAIN",
    "BIG_INT_DOMAIN",
    "get_domain",
    "HashCombinator",
]
