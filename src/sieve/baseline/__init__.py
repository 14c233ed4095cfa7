"""Baseline and findings cache persistence."""

from sieve.baseline.store import Baseline, BaselineEntry
from sieve.baseline.cache import load_cache, save_cache

__all__ = ["Baseline", "BaselineEntry", "load_cache", "save_cache"]
