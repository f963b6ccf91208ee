"""
CLI Verify Command

Audit a claims file offline:
- Verify every entry's proof against merkleRoot
- Check that the indices are exactly 0..n-1
- Rebuild the root from the raw entries and compare it with merkleRoot

Usage:
    allotree verify --input claims.json [--variant auto|plain|referral] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.claims import ClaimVariant
from core.schemas.errors import AllotreeException
from distribution import AuditReport, ClaimsIOError, DistributionConfig, LeafOrder, audit_distribution


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def resolve_verify_config(args: Namespace) -> DistributionConfig:
    """Merge command-line flags over the loaded CLI config."""
    cli_config = getattr(args, "cli_config", None)

    variant = args.variant or (cli_config.default_variant if cli_config else "auto")
    leaf_order = args.leaf_order or (cli_config.leaf_order if cli_config else LeafOrder.INDEX.value)

    return DistributionConfig(
        variant=None if variant == "auto" else ClaimVariant(variant),
        leaf_order=LeafOrder(leaf_order),
    )


def print_report_human(report: AuditReport, debug: bool = False) -> None:
    """Print report in human-readable format."""
    result = report.result
    print(f"input: {report.claims_path}")
    print(f"variant: {report.variant.value}")
    print(f"entries: {len(report.claims.claims)}")
    print(f"merkleRoot: {result.expected_root}")
    print(f"reconstructedRoot: {result.rebuilt_root or '(not rebuilt)'}")
    print(f"root_ok: {str(result.root_matches).lower()}")

    for warning in report.warnings:
        print(f"warning: {warning}")

    failed = result.get_failed_checks()
    if failed:
        print(f"\nerrors ({len(failed)}):")
        for check in failed[:10]:
            print(f"  ✗ {check.message}")
        if len(failed) > 10:
            print(f"  ... and {len(failed) - 10} more")

    if debug:
        print(f"\nchecks: {result.passed_count} passed, {result.error_count} failed")
        for check in result.checks:
            status = "✓" if check.ok else "✗"
            print(f"  {status} {check.check_id}")

    print("\nOK" if result.ok else "\nFAILED")


def print_report_json(report: AuditReport, debug: bool = False) -> None:
    """Print report as JSON."""
    print(json.dumps(report.to_dict(include_checks=debug), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 all checks passed, 2 any check failed, 1 runtime error)
    """
    config = resolve_verify_config(args)

    try:
        report = audit_distribution(args.input, config)
    except ClaimsIOError as e:
        print(f"Error loading claims file: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except AllotreeException as e:
        if args.debug and e.details:
            print(f"Error: {e.message} {json.dumps(e.details, default=str)}", file=sys.stderr)
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print_report_json(report, debug=args.debug)
    else:
        print_report_human(report, debug=args.debug)

    if report.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
