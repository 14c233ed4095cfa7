"""Git invocations that supply diff text to the parser."""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from sieve.core.exceptions import SieveGitError
from sieve.git.diff import DiffLine, parse_diff

logger = logging.getLogger(__name__)

DIFF_FLAGS = ["--unified=0", "--no-color", "--no-ext-diff"]


def _run_git(args: List[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(["git", *args], capture_output=True, cwd=cwd)
    except FileNotFoundError:
        raise SieveGitError("Git is not installed or not in PATH", command="git " + " ".join(args))


def check_git_installed() -> None:
    """Raise SieveGitError when the git executable can't be run."""
    result = _run_git(["--version"])
    if result.returncode != 0:
        raise SieveGitError("Git is not installed or not in PATH", command="git --version")


def get_staged_diff_text(cwd: Optional[str] = None) -> str:
    """Raw diff of the index. Outside a repository this is an empty string."""
    result = _run_git(["diff", "--cached", *DIFF_FLAGS], cwd=cwd)
    if result.returncode != 0:
        # Could be not a git repo
        logger.debug("git diff --cached failed: %s", result.stderr.decode("utf-8", errors="replace").strip())
        return ""
    return result.stdout.decode("utf-8", errors="replace")


def get_since_diff_text(ref_spec: str, cwd: Optional[str] = None) -> str:
    """Raw diff of ``<ref_spec>..HEAD``. Raises SieveGitError if git fails."""
    range_spec = f"{ref_spec}..HEAD"
    args = ["diff", range_spec, *DIFF_FLAGS]
    result = _run_git(args, cwd=cwd)
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise SieveGitError(
            f"Git diff command failed for range: {range_spec}: {stderr}",
            command="git " + " ".join(args),
        )
    return result.stdout.decode("utf-8", errors="replace")


def get_staged_diff(cwd: Optional[str] = None) -> List[DiffLine]:
    """Added lines of the staged changes."""
    return parse_diff(get_staged_diff_text(cwd=cwd))


def get_since_diff(ref_spec: str, cwd: Optional[str] = None) -> List[DiffLine]:
    """Added lines between *ref_spec* and HEAD."""
    return parse_diff(get_since_diff_text(ref_spec, cwd=cwd))
