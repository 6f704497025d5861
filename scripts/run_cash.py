#!/usr/bin/env python3
"""
Run CASH subspace clustering on a numeric data file.

Thin wrapper around ``correlation_mining.cli`` for running from a checkout
without installing the package.

Usage:
    python scripts/run_cash.py data.csv --delimiter , --min-pts 20 --max-level 6 --jitter 0.2
    python scripts/run_cash.py data.txt --label-column -1 --output result.json
"""

import sys
from pathlib import Path

# Allow running from project root or scripts/ directory
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from correlation_mining.cli import main

if __name__ == "__main__":
    main()
