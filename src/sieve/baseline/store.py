# SPDX-License-Identifier: MIT
"""
Baseline of accepted findings.

The baseline is a JSON document listing fingerprints the team has accepted,
with optional per-fingerprint metadata for humans inspecting the file:

    {
      "generated_at": "2026-01-01T00:00:00+00:00",
      "fingerprints": ["..."],
      "metadata": {"<fingerprint>": {"file": "...", "rule": "...", "preview": "..."}}
    }

Scanning only ever asks :meth:`Baseline.contains`. There is no locking:
concurrent writers race and the last one wins.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Set

from sieve.core.findings import Finding

logger = logging.getLogger(__name__)

DEFAULT_BASELINE_PATH = ".sieve.baseline.json"


def _parse_timestamp(value) -> Optional[datetime]:
    """ISO-8601 timestamp, accepting a trailing ``Z``; None if absent or unparsable."""
    if not value:
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparsable baseline timestamp: %r", value)
        return None


@dataclass
class BaselineEntry:
    file: str
    rule: str
    preview: str


@dataclass
class Baseline:
    path: str = DEFAULT_BASELINE_PATH
    generated_at: Optional[datetime] = None
    fingerprints: Set[str] = field(default_factory=set)
    metadata: Dict[str, BaselineEntry] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str = DEFAULT_BASELINE_PATH) -> "Baseline":
        """Load the baseline; a missing or unreadable file gives an empty one."""
        baseline = cls(path=path)
        p = Path(path)
        if not p.exists():
            return baseline
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("baseline must be a JSON object")
            baseline.fingerprints = {str(fp) for fp in data.get("fingerprints") or []}
            for fp, entry in (data.get("metadata") or {}).items():
                baseline.metadata[str(fp)] = BaselineEntry(
                    file=str(entry.get("file", "")),
                    rule=str(entry.get("rule", "")),
                    preview=str(entry.get("preview", "")),
                )
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable baseline %s: %s", path, e)
            return cls(path=path)
        baseline.generated_at = _parse_timestamp(data.get("generated_at"))
        return baseline

    def contains(self, fingerprint: str) -> bool:
        return fingerprint in self.fingerprints

    def __contains__(self, fingerprint: str) -> bool:
        return self.contains(fingerprint)

    def __len__(self) -> int:
        return len(self.fingerprints)

    def add(self, fingerprint: str, file: str, rule: str, preview: str) -> bool:
        """Add a fingerprint; returns False if it was already present."""
        if fingerprint in self.fingerprints:
            return False
        self.fingerprints.add(fingerprint)
        self.metadata[fingerprint] = BaselineEntry(file=file, rule=rule, preview=preview)
        return True

    def add_finding(self, finding: Finding) -> bool:
        return self.add(
            finding.fingerprint,
            finding.file_path,
            finding.rule_id,
            finding.redacted_preview,
        )

    def to_dict(self) -> Dict:
        data = {
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
            "fingerprints": sorted(self.fingerprints),
        }
        if self.metadata:
            data["metadata"] = {
                fp: {"file": e.file, "rule": e.rule, "preview": e.preview}
                for fp, e in sorted(self.metadata.items())
            }
        return data

    def save(self) -> None:
        """Stamp the generation time and write the baseline."""
        self.generated_at = datetime.now(timezone.utc)
        Path(self.path).write_text(json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8")
