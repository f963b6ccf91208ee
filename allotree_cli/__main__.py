"""
Module execution entry point.

Allows running with: python -m allotree_cli
"""

import sys
from allotree_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
