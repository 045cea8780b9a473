"""
Sparse Merkle - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for the sparse Merkle tree engine.
Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Construction & configuration
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Argument validation
    TYPE_MISMATCH = "TYPE_MISMATCH"
    KEY_TOO_LARGE = "KEY_TOO_LARGE"
    RESERVED_VALUE = "RESERVED_VALUE"

    # Structural
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class SMTError(BaseModel):
    """
    Error model for structured error communication.

    Lets callers pass engine failures around (logs, API payloads) without
    carrying live exception objects.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.KEY_TOO_LARGE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "SMTException":
        """Convert this error model to a raised exception."""
        return SMTException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class SMTException(Exception):
    """
    Base exception for all sparse Merkle tree errors.

    Carries structured error information and can be converted
    to/from SMTError models. Engine operations are deterministic
    in-memory computations, so nothing here is retryable.
    """

    def __init__(
        self,
        message: str,
        code: str = "SMT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> SMTError:
        """Convert this exception to an SMTError model."""
        return SMTError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationError(SMTException):
    """Raised when the hash function or tree parameters fail validation."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=details,
        )


class TypeMismatchError(SMTException):
    """Raised when a key or hash does not match the tree's representation."""

    def __init__(
        self,
        message: str,
        value: Any = None,
        expected: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["value"] = repr(value)
        if expected:
            full_details["expected"] = expected
        super().__init__(
            message=message,
            code=ErrorCodes.TYPE_MISMATCH,
            details=full_details,
        )


class KeyTooLargeError(SMTException):
    """Raised when a key needs more bits than the tree depth."""

    def __init__(
        self,
        message: str,
        key: Any = None,
        bit_length: int | None = None,
        depth: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key is not None:
            full_details["key"] = str(key)
        if bit_length is not None:
            full_details["bit_length"] = bit_length
        if depth is not None:
            full_details["depth"] = depth
        super().__init__(
            message=message,
            code=ErrorCodes.KEY_TOO_LARGE,
            details=full_details,
        )


class ReservedValueError(SMTException):
    """Raised when ZERO is added as a value hash."""

    def __init__(
        self,
        message: str,
        key: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key is not None:
            full_details["key"] = str(key)
        super().__init__(
            message=message,
            code=ErrorCodes.RESERVED_VALUE,
            details=full_details,
        )


class InvariantViolation(SMTException):
    """Raised when the stored structure is inconsistent, or on a strict delete of an absent key."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=details,
        )

