"""Command-line interface: `python -m curvegraph`."""
import sys

from curvegraph.main import main

if __name__ == "__main__":
    sys.exit(main())
