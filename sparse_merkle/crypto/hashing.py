"""
Sparse Merkle - Hashing Utilities
Hex helpers and stock two-to-one hash functions for the tree.

This module provides:
- Hex validity checking and hex-to-binary conversion for keys
- SHA-256 over raw bytes
- Ready-made hash functions for string mode and big-number mode

The tree never requires these hash functions; any deterministic
two-argument function returning the configured representation works.

Determinism Notes:
- hex_to_bin keeps the natural width of the first nibble and pads
  every following nibble to 4 bits, so leading zero nibbles count
  towards the key's bit length
"""
from __future__ import annotations

import hashlib
import re
from typing import Any, Callable

from sparse_merkle.schemas.errors import ConfigurationError


HEX_PATTERN = re.compile(r"^[0-9A-Fa-f]{1,64}$")

HashFunction = Callable[[Any, Any], Any]


def check_hex(n: Any) -> bool:
    """
    Check whether a value is a hexadecimal string of 1 to 64 digits.

    Example:
        >>> check_hex("be12")
        True
        >>> check_hex("gbe12")
        False
    """
    return isinstance(n, str) and HEX_PATTERN.fullmatch(n) is not None


def hex_to_bin(n: str) -> str:
    """
    Convert a hexadecimal string to its binary digits.

    The first nibble is written without padding, the remaining
    nibbles are zero-padded to 4 bits each.

    Example:
        >>> hex_to_bin("12")
        '10010'
    """
    bits = format(int(n[0], 16), "b")
    for digit in n[1:]:
        bits += format(int(digit, 16), "04b")
    return bits


def sha256(data: bytes) -> bytes:
    """Compute SHA-256 hash of raw bytes."""
    return hashlib.sha256(data).digest()


def sha256_hex_hash(left: str, right: str) -> str:
    """
    String-mode hash function: sha256 over the concatenated hex text.

    Returns 64 lowercase hex digits.
    """
    return hashlib.sha256((left + right).encode("utf-8")).hexdigest()


def _int_to_bytes(n: int) -> bytes:
    return n.to_bytes(max(32, (n.bit_length() + 7) // 8), "big")


def sha256_int_hash(left: int, right: int) -> int:
    """
    Big-number-mode hash function: sha256 over the big-endian encodings
    (at least 32 bytes each), returned as a non-negative integer.
    """
    digest = sha256(_int_to_bytes(left) + _int_to_bytes(right))
    return int.from_bytes(digest, "big")


_HASH_FUNCTIONS: dict[str, tuple[HashFunction, HashFunction]] = {
    "sha256": (sha256_hex_hash, sha256_int_hash),
}


def get_hash_function(name: str, big_numbers: bool = False) -> HashFunction:
    """
    Resolve a stock hash function by name for the given representation.

    Raises:
        ConfigurationError: If the name is unknown
    """
    try:
        hex_fn, int_fn = _HASH_FUNCTIONS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown hash function: {name!r}",
            details={"available": sorted(_HASH_FUNCTIONS)},
        ) from None
    return int_fn if big_numbers else hex_fn


__all__ = [
    "HEX_PATTERN",
    "HashFunction",
    "check_hex",
    "hex_to_bin",
    "sha256",
    "sha256_hex_hash",
    "sha256_int_hash",
    "get_hash_function",
]
