"""
Test fixtures package for allotree tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_rows, make_claims_file

    def test_something():
        claims = make_claims_file(count=5)
"""

from .common import (
    ACCOUNTS,
    pack_leaf,
    make_rows,
    make_referral_rows,
    make_claims_file,
    replace_entry,
)

__all__ = [
    "ACCOUNTS",
    "pack_leaf",
    "make_rows",
    "make_referral_rows",
    "make_claims_file",
    "replace_entry",
]
