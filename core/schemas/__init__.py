"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Error models and exceptions
from .errors import (
    AllotreeError,
    AllotreeException,
    ClaimsFileException,
    ConstructionException,
    ErrorCodes,
    InputValidationException,
    MerkleProofException,
)

# Allocation records
from .allocation import (
    KEY_SEPARATOR,
    UINT256_LIMIT,
    AllocationRecord,
)

# Claims file
from .claims import (
    HEX32_PATTERN,
    ClaimEntry,
    ClaimsFile,
    format_capacity,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)


__all__ = [
    # Errors
    "AllotreeError",
    "AllotreeException",
    "ClaimsFileException",
    "ConstructionException",
    "ErrorCodes",
    "InputValidationException",
    "MerkleProofException",
    # Allocation
    "KEY_SEPARATOR",
    "UINT256_LIMIT",
    "AllocationRecord",
    # Claims
    "HEX32_PATTERN",
    "ClaimEntry",
    "ClaimsFile",
    "format_capacity",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
