from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from sieve.autofix.apply import FixResult, Replacement, fix_file
from sieve.core.findings import Finding
from sieve.core.redaction import DEFAULT_PLACEHOLDER, apply_placeholder
from sieve.core.text import byte_to_char_offset, split_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileFix:
    path: str
    result: FixResult
    findings: int


def _read_lines(path: str) -> Optional[List[str]]:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return split_lines(f.read())
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s for planning: %s", path, e)
        return None


def replacement_for(finding: Finding, line_text: str, placeholder: str = DEFAULT_PLACEHOLDER) -> Replacement:
    """
    Build the Replacement that overwrites *finding*'s value on *line_text*.

    Findings carry 0-based byte offsets; replacements use 1-based character
    columns, so the offsets are re-resolved against the current line.
    """
    start = byte_to_char_offset(line_text, finding.start_index)
    end = byte_to_char_offset(line_text, finding.end_index)
    return Replacement(
        line=finding.line_number,
        start_col=start + 1,
        end_col=end + 1,
        new_text=apply_placeholder(placeholder=placeholder),
    )


def plan_replacements(
    findings: Iterable[Finding],
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> Dict[str, List[Replacement]]:
    """Group replacements per file, in the order files first appear."""
    plan: Dict[str, List[Replacement]] = OrderedDict()
    line_cache: Dict[str, Optional[List[str]]] = {}
    for f in findings:
        if f.file_path not in line_cache:
            line_cache[f.file_path] = _read_lines(f.file_path) if Path(f.file_path).is_file() else None
        lines = line_cache[f.file_path]
        if lines is None or not 0 < f.line_number <= len(lines):
            # fix_file reports the missing file; keep the entry so it surfaces
            plan.setdefault(f.file_path, [])
            continue
        if f.end_index > len(lines[f.line_number - 1].encode("utf-8")):
            logger.warning("Line %s:%d changed since it was scanned", f.file_path, f.line_number)
            plan.setdefault(f.file_path, [])
            continue
        plan.setdefault(f.file_path, []).append(
            replacement_for(f, lines[f.line_number - 1], placeholder)
        )
    return plan


def repair_findings(
    findings: Iterable[Finding],
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> List[FileFix]:
    """Redact every finding, one atomic rewrite per file."""
    findings = list(findings)
    plan = plan_replacements(findings, placeholder)
    counts: Dict[str, int] = {}
    for f in findings:
        counts[f.file_path] = counts.get(f.file_path, 0) + 1

    results = []
    for path, replacements in plan.items():
        result = fix_file(path, replacements)
        if not result.success:
            logger.warning("Failed to fix %s: %s", path, result.message)
        results.append(FileFix(path=path, result=result, findings=counts.get(path, 0)))
    return results


def format_plan_for_display(plan: Dict[str, List[Replacement]]) -> str:
    if not plan:
        return "No fix plan items."
    lines = ["Fix Plan:"]
    i = 0
    for path, replacements in plan.items():
        for r in sorted(replacements, key=lambda r: (r.line, r.start_col)):
            i += 1
            lines.append(f"{i}. {path}:{r.line} cols {r.start_col}-{r.end_col} -> {r.new_text}")
    return "\n".join(lines)
