"""
allotree CLI

Command-line interface for building and auditing merkle claim distributions.

Usage:
    python -m allotree_cli generate --input rows.csv --out claims.json
    python -m allotree_cli verify --input claims.json
    python -m allotree_cli config --show
"""

__version__ = "0.1.0"
