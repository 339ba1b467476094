"""Entry point for running Soundprint as a module.

Usage: python -m soundprint
"""

import sys

from soundprint.cli import main

if __name__ == "__main__":
    sys.exit(main())
