"""
Distribution Pipeline

File-level wiring around the claims core.

Public API:
- generate_distribution: Allocation file -> claims file
- audit_distribution: Claims file -> AuditReport (per-entry proofs, index set, root)
- DistributionConfig: Variant, leaf order and output settings
- LeafOrder: Index-ordered or hash-sorted tree layout
- GenerateSummary / AuditReport: Step results
- ClaimsIOError: Raised when a file cannot be read or written
"""

from distribution.pipeline import (
    AuditReport,
    DistributionConfig,
    GenerateSummary,
    LeafOrder,
    audit_distribution,
    generate_distribution,
)

from distribution.artifacts.io import ClaimsIOError


__all__ = [
    "AuditReport",
    "DistributionConfig",
    "GenerateSummary",
    "LeafOrder",
    "audit_distribution",
    "generate_distribution",
    "ClaimsIOError",
]
