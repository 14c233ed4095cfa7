# SPDX-License-Identifier: MIT
"""
Central redaction utilities for Sieve.

Every place a matched value is rendered for humans (reports, baseline
metadata, SARIF) goes through :func:`redact_secret`; the raw value is never
persisted.
"""

from __future__ import annotations

REDACTED_MARKER = "<redacted>"
DEFAULT_PLACEHOLDER = "REDACTED_SECRET"


def redact_secret(secret: str) -> str:
    """
    Redact secret showing first 3 + last 3 characters.

    For secrets shorter than 8 characters, returns a fixed marker so that the
    preview carries no information about the value.

    Args:
        secret: The secret string to redact

    Returns:
        Redacted string
    """
    if len(secret) < 8:
        return REDACTED_MARKER
    return secret[:3] + "..." + secret[-3:]


def apply_placeholder(secret: str = "", placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """
    Return the text that replaces a detected secret in place.

    The secret itself is ignored: the placeholder must not be derivable from
    the value it replaces.
    """
    return placeholder
