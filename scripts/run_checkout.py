#!/usr/bin/env python
"""
Run the interactive checkout terminal.

Usage:
    python scripts/run_checkout.py --config pricing.yaml
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from checkout_tool.cli import main


if __name__ == "__main__":
    sys.exit(main())
