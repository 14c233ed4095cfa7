# SPDX-License-Identifier: MIT
"""
Line-level secret scoring.

A line goes through three stages:

1. the catalog's high-signal detectors, first match wins;
2. otherwise the generic ``key = "value"`` heuristic (key name, entropy,
   key-like value);
3. path and placeholder-value penalties, applied whatever fired.

The clamped score decides severity; anything under 60 is dropped.
"""
from __future__ import annotations

import hashlib
import math
from collections import Counter
from typing import List, Optional, Tuple

from sieve.core.findings import Finding, Severity
from sieve.core.redaction import redact_secret
from sieve.core.text import char_to_byte_offset
from sieve.detectors import PatternCatalog, get_default_catalog

MAX_LINE_LENGTH = 1000
REPORT_THRESHOLD = 60
UNKNOWN_RULE = "UNKNOWN"
SUSPECT_RULE = "SUSPECT_VARIABLE"

SUSPECT_KEY_BONUS = 40
HIGH_ENTROPY_BONUS = 30
MODERATE_ENTROPY_BONUS = 20
SHORT_VALUE_PENALTY = 20
KEYLIKE_BONUS = 30
TEST_PATH_PENALTY = 40
DUMMY_VALUE_PENALTY = 50


def shannon_entropy(value: str) -> float:
    """Shannon entropy in bits per character of *value*."""
    if not value:
        return 0.0
    total = len(value)
    entropy = 0.0
    for count in Counter(value).values():
        p = count / total
        entropy -= p * math.log2(p)
    return entropy


def compute_fingerprint(rule_id: str, value: str, path: str, line_number: int) -> str:
    """Stable identity of a finding: rule, value, path and line all count."""
    raw = f"{rule_id}|{value}|{path}|{line_number}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class LineScanner:
    """Scores single lines against a :class:`PatternCatalog`."""

    def __init__(self, catalog: Optional[PatternCatalog] = None):
        self.catalog = catalog or get_default_catalog()

    def is_test_path(self, path: str) -> bool:
        lowered = path.lower()
        return any(marker in lowered for marker in self.catalog.test_path_markers)

    def scan(self, path: str, line_number: int, text: str) -> Optional[Finding]:
        """Return at most one Finding for ``text`` at ``path:line_number``."""
        if len(text) > MAX_LINE_LENGTH:
            return None

        matched = self._match_high_signal(text)
        if matched is None:
            matched = self._match_assignment(text)
        if matched is None:
            return None

        rule_id, score, value, span, reasons = matched

        if self.is_test_path(path):
            score -= TEST_PATH_PENALTY
            reasons.append("File appears to be a test/mock")

        if self.catalog.dummy_values.search(value):
            score -= DUMMY_VALUE_PENALTY
            reasons.append("Value matches known placeholders")

        score = max(0, min(100, score))
        if score < REPORT_THRESHOLD:
            return None

        start, end = span
        return Finding(
            rule_id=rule_id,
            severity=Severity.from_score(score),
            score=score,
            file_path=path,
            line_number=line_number,
            start_index=char_to_byte_offset(text, start),
            end_index=char_to_byte_offset(text, end),
            redacted_preview=redact_secret(value),
            fingerprint=compute_fingerprint(rule_id, value, path, line_number),
            reason=tuple(reasons),
        )

    def _match_high_signal(self, text: str):
        for detector in self.catalog.detectors:
            m = detector.pattern.search(text)
            if m is None:
                continue
            group = detector.value_group
            value = detector.fixed_value or m.group(group)
            return (
                detector.rule_id,
                detector.base_score,
                value,
                (m.start(group), m.end(group)),
                [detector.description],
            )
        return None

    def _match_assignment(self, text: str):
        m = self.catalog.assignment.search(text)
        if m is None:
            return None

        key = m.group(2)
        value = m.group(4)
        score = 0
        rule_id = UNKNOWN_RULE
        reasons: List[str] = []

        if self.catalog.suspect_keys.search(key):
            score += SUSPECT_KEY_BONUS
            rule_id = SUSPECT_RULE
            reasons.append(f"Variable '{key}' implies secret")

        entropy = shannon_entropy(value)
        if len(value) > 16 and entropy > 4.0:
            score += HIGH_ENTROPY_BONUS
            reasons.append("Value has high entropy")
        elif len(value) > 20 and entropy > 3.0:
            score += MODERATE_ENTROPY_BONUS
            reasons.append("Value has moderate entropy and length")
        elif len(value) < 8:
            score -= SHORT_VALUE_PENALTY
            reasons.append("Value is too short to be a credential")

        if self.catalog.generic_keylike.search(value):
            score += KEYLIKE_BONUS
            reasons.append("Value looks like an API key (sk-...)")

        span: Tuple[int, int] = (m.start(4), m.end(4))
        return rule_id, score, value, span, reasons


# Shared scanner over the default catalog
_scanner = None


def scan_line(path: str, line_number: int, text: str) -> Optional[Finding]:
    """Scan one line with the default catalog."""
    global _scanner
    if _scanner is None:
        _scanner = LineScanner()
    return _scanner.scan(path, line_number, text)
