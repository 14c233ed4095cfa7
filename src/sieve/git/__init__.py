"""Git diff supply for Sieve."""

from sieve.git.diff import DiffLine, parse_diff

__all__ = ["DiffLine", "parse_diff"]
