#!/usr/bin/env python3
"""
Allow running sieve as a module: python -m sieve
"""

from sieve.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
