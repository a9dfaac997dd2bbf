"""
CageScan - Entry Point

This module allows the package to be executed directly using 'python -m cagescan'.
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
