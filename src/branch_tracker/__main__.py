#!/usr/bin/env python3
"""
Main entry point for the Branch Tracker module.
This allows running the module with: python -m branch_tracker
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
