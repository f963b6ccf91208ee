"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for allocation trees.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

A failed proof or a root mismatch is NOT an exception: verification
returns a VerificationResult. Exceptions are reserved for inputs that
cannot be turned into a tree at all.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Allocation input errors
    INVALID_ROW = "INVALID_ROW"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    INVALID_REFERRAL = "INVALID_REFERRAL"

    # Tree construction errors
    EMPTY_LEAF_SET = "EMPTY_LEAF_SET"
    INVALID_ENCODER = "INVALID_ENCODER"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Claims file errors
    MALFORMED_CLAIMS_FILE = "MALFORMED_CLAIMS_FILE"

    # Verification outcomes (carried in CheckResult, not raised)
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    INDEX_SET_INVALID = "INDEX_SET_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AllotreeError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors between modules without exceptions,
    e.g. inside a VerificationResult.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_ADDRESS],
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


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AllotreeException(Exception):
    """
    Base exception for all allocation tree errors.

    Carries structured error information and can be converted
    to an AllotreeError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "ALLOTREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AllotreeError:
        """Convert this exception to an AllotreeError model."""
        return AllotreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InputValidationException(AllotreeException):
    """Raised when an allocation row is rejected (bad address, duplicate key, bad cap)."""

    def __init__(
        self,
        message: str,
        code: str,
        row: int | None = None,
        raw_value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if row is not None:
            full_details["row"] = row
        if raw_value is not None:
            full_details["raw_value"] = str(raw_value)
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )
        self.row = row
        self.raw_value = raw_value


class ConstructionException(AllotreeException):
    """Raised when a tree cannot be built (empty leaf set, bad encoder layout)."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.EMPTY_LEAF_SET,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class ClaimsFileException(AllotreeException):
    """Raised when a claims file is structurally unusable."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_CLAIMS_FILE,
            details=full_details,
            retryable=False,
        )


class MerkleProofException(AllotreeException):
    """Raised when a proof is requested for a leaf the tree does not contain."""

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=full_details,
            retryable=False,
        )
