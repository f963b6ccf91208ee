"""
CLI Generate Command

Build a claims file from an allocation list.

Usage:
    allotree generate --input rows.json --out claims.json [--variant referral] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.claims import ClaimVariant
from core.schemas.errors import AllotreeException, InputValidationException
from distribution import ClaimsIOError, DistributionConfig, LeafOrder, generate_distribution


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def resolve_generate_config(args: Namespace) -> DistributionConfig:
    """Merge command-line flags over the loaded CLI config."""
    cli_config = getattr(args, "cli_config", None)

    variant = args.variant
    if variant is None and cli_config is not None and cli_config.default_variant != "auto":
        variant = cli_config.default_variant

    leaf_order = args.leaf_order or (cli_config.leaf_order if cli_config else LeafOrder.INDEX.value)
    indent = cli_config.json_indent if cli_config is not None else 2

    return DistributionConfig(
        variant=ClaimVariant(variant or ClaimVariant.PLAIN.value),
        leaf_order=LeafOrder(leaf_order),
        json_indent=indent,
    )


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = resolve_generate_config(args)

    try:
        summary = generate_distribution(args.input, args.out, config)
    except ClaimsIOError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except InputValidationException as e:
        row = f" (row {e.row})" if e.row is not None else ""
        print(f"Invalid allocation{row}: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except AllotreeException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"merkleRoot: {summary.merkle_root}")
        print(f"entries: {summary.entry_count}")
        print(f"variant: {summary.variant}")
        print(f"written: {summary.output_path}")

    return EXIT_SUCCESS
