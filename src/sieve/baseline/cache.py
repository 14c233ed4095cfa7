"""Findings cache written by ``sieve check`` and read back by ``check --fix N``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from sieve.core.findings import Finding

DEFAULT_CACHE_PATH = ".sieve_cache.json"


def save_cache(findings: List[Finding], path: str = DEFAULT_CACHE_PATH) -> None:
    Path(path).write_text(
        json.dumps([f.to_dict() for f in findings], indent=2) + "\n",
        encoding="utf-8",
    )


def load_cache(path: str = DEFAULT_CACHE_PATH) -> List[Finding]:
    """
    Read cached findings.

    Raises:
        FileNotFoundError: If no scan has written the cache yet
        ValueError: If the cache is not a JSON list of findings
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Cache file not found: {path}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("Findings cache must be a JSON list")
    try:
        return [Finding.from_dict(item) for item in data]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed findings cache entry: {e}")
