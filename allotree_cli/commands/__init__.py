"""
CLI command modules.
"""

from allotree_cli.commands import generate, verify

__all__ = ["generate", "verify"]
