"""Scanning pipelines: tree walks and diffs through the line scanner."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from sieve.core.findings import Finding
from sieve.git.diff import DiffLine
from sieve.scanner.line import LineScanner
from sieve.scanner.walker import iter_tree_lines


class FingerprintSet(Protocol):
    def contains(self, fingerprint: str) -> bool: ...


def scan_triples(
    triples: Iterable[Tuple[str, int, str]],
    baseline: Optional[FingerprintSet] = None,
    scanner: Optional[LineScanner] = None,
) -> List[Finding]:
    """
    Run every ``(path, line_number, text)`` through the scanner.

    Findings whose fingerprint is in *baseline* are dropped.
    """
    scanner = scanner or LineScanner()
    findings: List[Finding] = []
    for path, line_number, text in triples:
        finding = scanner.scan(path, line_number, text)
        if finding is None:
            continue
        if baseline is not None and baseline.contains(finding.fingerprint):
            continue
        findings.append(finding)
    return findings


def scan_tree(
    root: Path | str,
    config: Optional[Dict[str, Any]] = None,
    baseline: Optional[FingerprintSet] = None,
    scanner: Optional[LineScanner] = None,
) -> List[Finding]:
    """Scan a file or directory recursively."""
    return scan_triples(iter_tree_lines(root, config), baseline, scanner)


def scan_diff(
    diff_lines: Iterable[DiffLine],
    baseline: Optional[FingerprintSet] = None,
    scanner: Optional[LineScanner] = None,
) -> List[Finding]:
    """Scan the added lines of a parsed diff."""
    triples = ((d.path, d.line_num, d.content) for d in diff_lines)
    return scan_triples(triples, baseline, scanner)


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """High first, then Medium; discovery order is kept within a severity."""
    return sorted(findings, key=lambda f: f.severity, reverse=True)
