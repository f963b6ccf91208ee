"""
Distribution Pipeline

File-to-file wiring of the claims core:

- generate: allocation rows on disk -> validated claims file on disk
- audit: claims file on disk -> VerificationResult

Both steps are deterministic; running generate twice on the same input
produces byte-identical output.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from core.claims import ClaimVariant, audit_claims_file, detect_variant, parse_allocations
from core.schemas.claims import ClaimsFile
from core.schemas.verification import VerificationResult

from distribution.artifacts.io import load_allocation_rows, load_claims_file, save_claims_file


logger = logging.getLogger(__name__)


# =============================================================================
# Leaf Order
# =============================================================================

class LeafOrder(str, Enum):
    """How leaves are laid out at the bottom of the tree."""
    INDEX = "index"  # Leaf i sits at position i
    HASH = "hash"  # Leaves sorted by value, duplicates removed

    @property
    def sort_leaves(self) -> bool:
        return self is LeafOrder.HASH


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class DistributionConfig:
    """Settings shared by generate and audit."""

    # None lets audit detect the variant from the file
    variant: Optional[ClaimVariant] = None
    leaf_order: LeafOrder = LeafOrder.INDEX

    # Output
    json_indent: Optional[int] = 2

    @property
    def sort_leaves(self) -> bool:
        return LeafOrder(self.leaf_order).sort_leaves


# =============================================================================
# Results
# =============================================================================

@dataclass
class GenerateSummary:
    """Outcome of a generate run."""
    input_path: str = ""
    output_path: str = ""
    variant: str = ""
    leaf_order: str = ""
    merkle_root: str = ""
    entry_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": self.input_path,
            "output": self.output_path,
            "variant": self.variant,
            "leaf_order": self.leaf_order,
            "merkleRoot": self.merkle_root,
            "entries": self.entry_count,
        }


@dataclass
class AuditReport:
    """Outcome of an audit run, with the claims file it was computed on."""
    claims_path: str
    variant: ClaimVariant
    claims: ClaimsFile
    result: VerificationResult
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.result.ok

    def to_dict(self, include_checks: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "input": self.claims_path,
            "variant": self.variant.value,
            "ok": self.result.ok,
            "merkleRoot": self.result.expected_root,
            "reconstructedRoot": self.result.rebuilt_root,
            "rootMatches": self.result.root_matches,
            "entries": len(self.claims.claims),
            "passed": self.result.passed_count,
            "failed": self.result.error_count,
            "errors": self.result.get_error_messages(),
        }
        if include_checks:
            data["checks"] = [
                {"check_id": c.check_id, "ok": c.ok, "message": c.message}
                for c in self.result.checks
            ]
        return data


# =============================================================================
# Steps
# =============================================================================

def generate_distribution(
    input_path: str | Path,
    output_path: str | Path,
    config: Optional[DistributionConfig] = None,
) -> GenerateSummary:
    """
    Read allocation rows, build the claims file and write it.

    Raises:
        ClaimsIOError: If the input cannot be read
        InputValidationException: If a row is invalid
        ConstructionException: If the input has no rows
    """
    config = config or DistributionConfig()
    variant = ClaimVariant(config.variant or ClaimVariant.PLAIN)
    leaf_order = LeafOrder(config.leaf_order)

    rows = load_allocation_rows(input_path)
    logger.info(f"Loaded {len(rows)} allocation rows from {input_path}")

    claims = parse_allocations(rows, variant=variant, sort_leaves=leaf_order.sort_leaves)
    written = save_claims_file(claims, output_path, indent=config.json_indent)
    logger.info(f"Wrote claims file {written}")

    return GenerateSummary(
        input_path=str(input_path),
        output_path=str(written),
        variant=variant.value,
        leaf_order=leaf_order.value,
        merkle_root=claims.merkle_root,
        entry_count=len(claims.claims),
    )


def audit_distribution(
    claims_path: str | Path,
    config: Optional[DistributionConfig] = None,
) -> AuditReport:
    """
    Load a claims file and run every proof and reconciliation check on it.

    A failed check is reported in the result, not raised.

    Raises:
        ClaimsIOError: If the file cannot be read
        ClaimsFileException: If the file is malformed or mixes variants
    """
    config = config or DistributionConfig()
    claims = load_claims_file(claims_path)

    detected = detect_variant(claims)
    variant = ClaimVariant(config.variant) if config.variant is not None else detected
    warnings: list[str] = []
    if variant is not detected:
        warnings.append(f"File looks like a {detected.value} distribution, checking as {variant.value}")
        logger.warning(warnings[-1])

    logger.info(f"Auditing {len(claims.claims)} entries in {claims_path} as {variant.value}")
    result = audit_claims_file(claims, variant=variant, sort_leaves=config.sort_leaves)

    if result.ok:
        logger.info("Audit passed")
    else:
        logger.warning(f"Audit failed: {result.error_count} failed check(s)")

    return AuditReport(
        claims_path=str(claims_path),
        variant=variant,
        claims=claims,
        result=result,
        warnings=warnings,
    )


__all__ = [
    "LeafOrder",
    "DistributionConfig",
    "GenerateSummary",
    "AuditReport",
    "generate_distribution",
    "audit_distribution",
]
