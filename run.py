#!/usr/bin/env python3
"""Convenience runner for the ski ride tracker.

Usage:
    python run.py history
    python run.py replay fixes.csv
"""
import logging
import sys

from ski_tracker.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    sys.exit(main())
