"""Pattern catalog for Sieve.

The catalog is an immutable, ordered table of high-signal detectors plus the
patterns used by the generic key/value assignment heuristic. Build it once
with :func:`get_default_catalog` and hand the same instance to every
:class:`~sieve.scanner.line.LineScanner`.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple


@dataclass(frozen=True)
class Detector:
    """One high-signal format.

    ``value_group`` selects the capture group holding the secret (0 for the
    whole match). ``fixed_value`` replaces the extracted text when the match
    itself should not feed the fingerprint (private key headers).
    """

    rule_id: str
    pattern: Pattern[str]
    base_score: int
    description: str
    value_group: int = 0
    fixed_value: Optional[str] = None


@dataclass(frozen=True)
class PatternCatalog:
    """Ordered detectors (first match wins) and the assignment heuristics."""

    detectors: Tuple[Detector, ...]
    assignment: Pattern[str]
    suspect_keys: Pattern[str]
    generic_keylike: Pattern[str]
    dummy_values: Pattern[str]
    test_path_markers: Tuple[str, ...]

    def rule_ids(self) -> Tuple[str, ...]:
        """Return the rule ids of the high-signal detectors in priority order."""
        return tuple(d.rule_id for d in self.detectors)


DEFAULT_DETECTORS = (
    Detector(
        rule_id="PRIVATE_KEY_BLOCK",
        pattern=re.compile(r"-----BEGIN (RSA|EC|OPENSSH|PGP) PRIVATE KEY-----"),
        base_score=100,
        description="Found Private Key block",
        fixed_value="PRIVATE KEY CONTENT",
    ),
    Detector(
        rule_id="AWS_ACCESS_KEY",
        pattern=re.compile(r"(?i)(AKIA|ASIA)[0-9A-Z]{16}"),
        base_score=90,
        description="Found AWS Access Key ID",
    ),
    Detector(
        rule_id="BEARER_TOKEN",
        pattern=re.compile(r"(?i)Authorization:\s*Bearer\s+([a-zA-Z0-9_\-\.]+)"),
        base_score=80,
        description="Found Bearer Auth header",
        value_group=1,
    ),
    Detector(
        rule_id="SLACK_TOKEN",
        pattern=re.compile(r"xox[baprs]-[a-zA-Z0-9\-]+"),
        base_score=90,
        description="Found Slack-like token",
    ),
    Detector(
        rule_id="STRIPE_KEY",
        pattern=re.compile(r"(?i)sk_live_[0-9a-zA-Z]+"),
        base_score=90,
        description="Found Stripe Live key",
    ),
)

# key = "value", key: "value", key: 'value'; group 2 is the key, group 4 the value
ASSIGNMENT_PATTERN = re.compile(
    r"""(?i)(const|let|var)?\s*([a-z0-9_]+)\s*[:=]\s*(["'])([^"']+)(["'])"""
)

SUSPECT_KEYS_PATTERN = re.compile(
    r"(?i)(secret|token|apikey|api_key|password|passwd|private_key"
    r"|client_secret|auth_token|access_token)"
)

GENERIC_KEYLIKE_PATTERN = re.compile(r"(?i)(sk-[a-zA-Z0-9]{20,})")

DUMMY_VALUES_PATTERN = re.compile(
    r"(?i)(changeme|xxx|test|placeholder|example|your-token|your_token"
    r"|undefined|null|true|false)"
)

TEST_PATH_MARKERS = ("test", "spec", "mock", "fixture", "example")


def build_default_catalog() -> PatternCatalog:
    """Create a fresh catalog holding the built-in detectors."""
    return PatternCatalog(
        detectors=DEFAULT_DETECTORS,
        assignment=ASSIGNMENT_PATTERN,
        suspect_keys=SUSPECT_KEYS_PATTERN,
        generic_keylike=GENERIC_KEYLIKE_PATTERN,
        dummy_values=DUMMY_VALUES_PATTERN,
        test_path_markers=TEST_PATH_MARKERS,
    )


# Global catalog instance
_catalog = None


def get_default_catalog() -> PatternCatalog:
    """Get the shared default catalog."""
    global _catalog
    if _catalog is None:
        _catalog = build_default_catalog()
    return _catalog
