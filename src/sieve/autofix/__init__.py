"""Secret redaction in place."""

from sieve.autofix.apply import FixResult, Replacement, fix_file

__all__ = ["FixResult", "Replacement", "fix_file"]
