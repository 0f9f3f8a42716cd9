#!/usr/bin/env python3
"""
Run the lawyer verification command line.

Usage:
    python start.py verify 12345-1234567-1 LTR-12345
    python start.py pending
    python start.py approve 1 "Jane Doe"
"""

import sys

from lawverify.cli import main

if __name__ == "__main__":
    if sys.version_info < (3, 10):
        print("Python 3.10 or newer is required.", file=sys.stderr)
        sys.exit(1)
    sys.exit(main())
