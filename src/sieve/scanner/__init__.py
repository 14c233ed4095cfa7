"""Public API for Sieve scanning.

    from sieve.scanner import LineScanner, scan_line
"""

from sieve.scanner.line import LineScanner, scan_line

__all__ = ["LineScanner", "scan_line"]
