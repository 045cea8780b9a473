"""
Core cryptographic utilities.

Hex helpers for keys and the stock hash functions usable by the tree.
"""
from .hashing import (
    HashFunction,
    check_hex,
    hex_to_bin,
    sha256,
    sha256_hex_hash,
    sha256_int_hash,
    get_hash_function,
)

__all__ = [
    "HashFunction",
    "check_hex",
    "hex_to_bin",
    "sha256",
    "sha256_hex_hash",
    "sha256_int_hash",
    "get_hash_function",
]
