"""Finding data structures and utilities for Sieve."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Any, Tuple


class Severity(IntEnum):
    """Ordered severity levels. LOW is never produced by the line scorer."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_label(cls, label: str) -> "Severity":
        try:
            return cls[str(label).upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {label!r}")

    @classmethod
    def from_score(cls, score: int) -> "Severity":
        """Map a clamped score to a severity.

        Scores below 60 map to LOW; the line scanner discards those before a
        Finding is built, so LOW only shows up when callers map scores
        themselves (report filters, future threshold policies).
        """
        if score >= 80:
            return cls.HIGH
        if score >= 60:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class Finding:
    """One scored candidate secret at a specific file and line."""

    rule_id: str  # detector rule tag (e.g. 'AWS_ACCESS_KEY')
    severity: Severity
    score: int  # 0-100
    file_path: str
    line_number: int  # 1-based line number
    start_index: int  # 0-based byte offset of the value, inclusive
    end_index: int  # 0-based byte offset of the value, exclusive
    redacted_preview: str  # never the raw secret
    fingerprint: str  # sha256 hex digest
    reason: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert Finding to dictionary format."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.label,
            "score": self.score,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "start_index": self.start_index,
            "end_index": self.end_index,
            "redacted_preview": self.redacted_preview,
            "fingerprint": self.fingerprint,
            "reason": list(self.reason),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Finding":
        """Rebuild a Finding from :meth:`to_dict` output (e.g. the findings cache)."""
        reason = data.get("reason") or ()
        if isinstance(reason, str):
            reason = tuple(r.strip() for r in reason.split(",") if r.strip())
        return cls(
            rule_id=str(data["rule_id"]),
            severity=Severity.from_label(data["severity"]),
            score=int(data["score"]),
            file_path=str(data["file_path"]),
            line_number=int(data["line_number"]),
            start_index=int(data["start_index"]),
            end_index=int(data["end_index"]),
            redacted_preview=str(data.get("redacted_preview", "")),
            fingerprint=str(data["fingerprint"]),
            reason=tuple(reason),
        )
