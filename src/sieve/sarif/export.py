from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

from sieve import __version__
from sieve.core.findings import Finding, Severity

RULE_DESCRIPTIONS = {
    "PRIVATE_KEY_BLOCK": "Private key block committed to source",
    "AWS_ACCESS_KEY": "AWS access key ID",
    "BEARER_TOKEN": "Bearer token in an Authorization header",
    "SLACK_TOKEN": "Slack token",
    "STRIPE_KEY": "Stripe live secret key",
    "SUSPECT_VARIABLE": "Secret-like value assigned to a secret-named variable",
    "UNKNOWN": "High-entropy or key-like assigned value",
}


def _level(severity: Severity) -> str:
    return "error" if severity >= Severity.HIGH else "warning"


def build_sarif(findings: List[Finding], root: str = ".") -> Dict[str, Any]:
    # Collect rules by rule_id
    rule_ids = {}
    rules = []
    for f in findings:
        if f.rule_id not in rule_ids:
            rule_ids[f.rule_id] = len(rules)
            text = RULE_DESCRIPTIONS.get(f.rule_id, f.rule_id)
            rules.append(
                {
                    "id": f.rule_id,
                    "name": f.rule_id,
                    "shortDescription": {"text": text},
                    "fullDescription": {"text": f"Sieve rule {f.rule_id}: {text}"},
                }
            )

    results = []
    for f in findings:
        try:
            p_rel = Path(f.file_path).resolve().relative_to(Path(root).resolve()).as_posix()
        except ValueError:
            p_rel = f.file_path
        message = "; ".join(f.reason) or f.rule_id
        results.append(
            {
                "ruleId": f.rule_id,
                "ruleIndex": rule_ids[f.rule_id],
                "level": _level(f.severity),
                "message": {"text": f"{message} ({f.redacted_preview})"},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": p_rel},
                            "region": {"startLine": max(1, f.line_number)},
                        }
                    }
                ],
                "partialFingerprints": {"sieve/v1": f.fingerprint},
                "properties": {
                    "score": f.score,
                    "severity": f.severity.label,
                },
            }
        )

    # Make this upload unique per job by setting automationDetails.id
    auto_id = "sieve-secrets-{run}-{job}-{attempt}".format(
        run=os.getenv("GITHUB_RUN_ID", "local"),
        job=os.getenv("GITHUB_JOB", "job"),
        attempt=os.getenv("GITHUB_RUN_ATTEMPT", "1"),
    )

    return {
        "version": "2.1.0",
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "runs": [
            {
                "automationDetails": {"id": auto_id},
                "tool": {
                    "driver": {
                        "name": "Sieve",
                        "version": __version__,
                        "rules": rules,
                    }
                },
                "results": results,
            }
        ],
    }
