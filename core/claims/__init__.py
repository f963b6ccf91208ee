"""
Allocation claims: leaf encoding, tree construction, parsing and audit.

Usage:
    from core.claims import parse_allocations, audit_claims_file

    claims = parse_allocations([
        {"address": "0x...", "claimCap": "1000"},
    ])
    assert audit_claims_file(claims).ok
"""
from .encoding import (
    ClaimVariant,
    LEAF_FIELD_NAMES,
    LeafField,
    LeafEncoder,
    PLAIN_ENCODER,
    REFERRAL_ENCODER,
    get_encoder,
)

from .claims_tree import ClaimsTree

from .parser import (
    normalize_address,
    parse_capacity,
    parse_referral,
    validate_rows,
    parse_allocations,
)

from .reconcile import (
    ClaimRecord,
    verify_claim,
    detect_variant,
    claims_to_records,
    reconcile_root,
    audit_claims_file,
)


__all__ = [
    # Encoding
    "ClaimVariant",
    "LEAF_FIELD_NAMES",
    "LeafField",
    "LeafEncoder",
    "PLAIN_ENCODER",
    "REFERRAL_ENCODER",
    "get_encoder",
    # Tree
    "ClaimsTree",
    # Parsing
    "normalize_address",
    "parse_capacity",
    "parse_referral",
    "validate_rows",
    "parse_allocations",
    # Verification
    "ClaimRecord",
    "verify_claim",
    "detect_variant",
    "claims_to_records",
    "reconcile_root",
    "audit_claims_file",
]
