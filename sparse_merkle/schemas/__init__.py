"""
Sparse Merkle - Schemas
File: __init__.py

Purpose: Export the error taxonomy shared by every engine module.
"""

from .errors import (
    ConfigurationError,
    ErrorCodes,
    InvariantViolation,
    KeyTooLargeError,
    ReservedValueError,
    SMTError,
    SMTException,
    TypeMismatchError,
)

__all__ = [
    "ErrorCodes",
    "SMTError",
    "SMTException",
    "ConfigurationError",
    "TypeMismatchError",
    "KeyTooLargeError",
    "ReservedValueError",
    "InvariantViolation",
]
