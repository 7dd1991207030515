#!/usr/bin/env python3
"""Run the staffing console CLI from a checkout: python run_console.py dashboard"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from staffing.cli import main

if __name__ == "__main__":
    sys.exit(main())
