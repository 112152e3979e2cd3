"""Allow running bbtree as a module: python -m bbtree."""

import sys

from bbtree.cli import main

if __name__ == "__main__":
    sys.exit(main())
