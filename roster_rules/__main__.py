"""Entry point for running the roster checker via python -m roster_rules"""

import sys

from roster_rules.cli import main

if __name__ == "__main__":
    sys.exit(main())
