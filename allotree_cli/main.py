"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m allotree_cli generate --input rows.json --out claims.json [--variant referral] [--json]
    python -m allotree_cli verify --input claims.json [--variant auto] [--json] [--debug]
    python -m allotree_cli config --init
    python -m allotree_cli config --show

Environment Variables:
    ALLOTREE_LOG_LEVEL          Log level (default: INFO)
    ALLOTREE_LOG_FILE           Also write logs to this file
    ALLOTREE_VARIANT            Default variant: auto, plain, referral
    ALLOTREE_LEAF_ORDER         Leaf layout: index, hash
    ALLOTREE_JSON_INDENT        Indent of written claims files (none for compact)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from allotree_cli import __version__
from allotree_cli.commands import generate, verify
from allotree_cli.config import (
    LEAF_ORDER_CHOICES,
    VARIANT_CHOICES,
    get_default_config_template,
    load_config,
)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="allotree",
        description="allotree - Build and audit merkle claim distributions.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./allotree.json or ~/.config/allotree/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Build a claims file from an allocation list",
        description="Validate allocation rows, build the merkle tree and write root and proofs.",
    )
    generate_parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Allocation list (.json or .csv)",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        required=True,
        help="Output path for the claims file",
    )
    generate_parser.add_argument(
        "--variant",
        type=str,
        choices=["plain", "referral"],
        default=None,
        help="Leaf layout (default: from config, else plain)",
    )
    generate_parser.add_argument(
        "--leaf-order",
        type=str,
        choices=list(LEAF_ORDER_CHOICES),
        default=None,
        help="Tree layout: index order (default) or sorted by leaf hash",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    generate_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a claims file offline",
        description="Check every proof and reconcile the merkle root from the raw entries.",
    )
    verify_parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Path to the claims file",
    )
    verify_parser.add_argument(
        "--variant",
        type=str,
        choices=list(VARIANT_CHOICES),
        default=None,
        help="Leaf layout to check against (default: auto-detect)",
    )
    verify_parser.add_argument(
        "--leaf-order",
        type=str,
        choices=list(LEAF_ORDER_CHOICES),
        default=None,
        help="Tree layout the file was generated with",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include every check in the output",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="allotree.json",
        help="Path for config file (default: allotree.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (ALLOTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: allotree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
