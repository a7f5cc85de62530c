"""Entry point for ``python -m pingx``."""

import sys

from pingx.cli import main

if __name__ == "__main__":
    sys.exit(main())
