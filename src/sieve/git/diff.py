# SPDX-License-Identifier: MIT
"""
Unified diff parsing.

Turns ``git diff --unified=0`` output into the added lines only, each
addressed by its path and line number in the new version of the file.
Deleted lines can't introduce a leak and are never surfaced.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from sieve.core.text import split_lines

NEW_FILE_PREFIX = "+++ b/"
OLD_FILE_PREFIX = "--- a/"


@dataclass(frozen=True)
class DiffLine:
    """An added line: path, 1-based line number in the new file, content without '+'."""

    path: str
    line_num: int
    content: str


def parse_hunk_start(header: str) -> int:
    """
    Start line of the new-file range of a hunk header.

    ``@@ -14,0 +15,2 @@ context`` -> 15. Returns 0 when the token is missing
    or not a number, which suppresses emission until the next valid header.
    """
    parts = header.split()
    if len(parts) < 3:
        return 0
    start = parts[2].lstrip("+").split(",")[0]
    try:
        return int(start)
    except ValueError:
        return 0


def parse_diff(diff_text: str) -> List[DiffLine]:
    """
    Parse unified diff text into added lines.

    Never raises: lines that can't be attributed to a file and a valid hunk
    position are dropped.
    """
    lines: List[DiffLine] = []
    current_file = ""
    current_line_num = 0

    for line in split_lines(diff_text):
        if line.startswith("diff --git"):
            current_file = ""
        elif line.startswith(NEW_FILE_PREFIX):
            current_file = line[len(NEW_FILE_PREFIX):]
        elif line.startswith(OLD_FILE_PREFIX):
            continue
        elif line.startswith("@@"):
            current_line_num = parse_hunk_start(line)
        elif line.startswith("+") and not line.startswith("+++"):
            if current_file and current_line_num > 0:
                lines.append(DiffLine(current_file, current_line_num, line[1:]))
                current_line_num += 1
        elif line.startswith("-") or line.startswith("\\"):
            # deletion or "\ No newline at end of file"
            continue
        elif line.startswith(" "):
            if current_file and current_line_num > 0:
                current_line_num += 1

    return lines
