# SPDX-License-Identifier: MIT
"""
In-place file rewriting for detected secrets.

Applies a batch of column-addressed replacements to one file and writes the
result atomically. Replacements are applied bottom-up and right-to-left so
that no edit shifts the columns of an edit still to be applied.
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List

from sieve.core.text import split_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Replacement:
    """Replace columns ``[start_col, end_col)`` of ``line`` (all 1-based, characters)."""

    line: int
    start_col: int
    end_col: int
    new_text: str


@dataclass(frozen=True)
class FixResult:
    success: bool
    message: str
    applied: int = 0


def apply_replacements(lines: List[str], replacements: List[Replacement]) -> int:
    """
    Splice *replacements* into *lines* in place.

    Returns the number of replacements applied. Items whose line or column
    range is out of bounds, or whose start is after its end, are skipped.
    """
    applied = 0
    ordered = sorted(replacements, key=lambda r: (r.line, r.start_col), reverse=True)
    for rep in ordered:
        line_idx = rep.line - 1
        if line_idx < 0 or line_idx >= len(lines):
            logger.debug("Skipping replacement on missing line %d", rep.line)
            continue

        line = lines[line_idx]
        start = max(rep.start_col - 1, 0)
        end = max(rep.end_col - 1, 0)
        if start > len(line) or end > len(line) or start > end:
            logger.debug(
                "Skipping replacement with bad columns %d..%d on line %d",
                rep.start_col, rep.end_col, rep.line,
            )
            continue

        lines[line_idx] = line[:start] + rep.new_text + line[end:]
        applied += 1
    return applied


def _write_atomically(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(content)
        try:
            shutil.copymode(path, tmp_name)
        except OSError:
            pass

        try:
            os.rename(tmp_name, path)
        except OSError:
            # Platforms that refuse to rename over an existing file
            os.remove(path)
            try:
                os.rename(tmp_name, path)
            except OSError as e:
                raise OSError(f"{e}; new content kept in {tmp_name}") from e
    except BaseException:
        # Keep the temp file if it is now the only copy of the content
        if os.path.exists(tmp_name) and path.exists():
            os.remove(tmp_name)
        raise


def fix_file(file_path: str, replacements: List[Replacement]) -> FixResult:
    """
    Apply *replacements* to *file_path*.

    Never raises for I/O problems: a missing file, an unreadable file or a
    failed write come back as ``FixResult(success=False, ...)``.
    """
    path = Path(file_path)
    if not path.is_file():
        return FixResult(False, f"File not found: {file_path}")

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return FixResult(False, f"Failed to read {file_path}: {e}")

    newline = "\r\n" if "\r\n" in content else "\n"
    ends_with_newline = content.endswith("\n")

    lines = split_lines(content)
    applied = apply_replacements(lines, list(replacements))

    new_content = newline.join(lines)
    if ends_with_newline:
        new_content += newline

    try:
        _write_atomically(path, new_content)
    except OSError as e:
        logger.warning("Failed to write %s: %s", file_path, e)
        return FixResult(False, f"Failed to write {file_path}: {e}")

    skipped = len(replacements) - applied
    message = f"File fixed successfully ({applied} applied"
    if skipped:
        message += f", {skipped} skipped"
    message += ")"
    return FixResult(True, message, applied)
