"""File-tree walking: turns a root path into ``(path, line_number, text)`` triples."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sieve.core.text import split_lines
from sieve.scanner.config import get_default_scanner_config

logger = logging.getLogger(__name__)

BINARY_EXTS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".ico",
    ".pdf",
    ".zip",
    ".gz",
    ".tar",
    ".tgz",
    ".7z",
    ".xz",
    ".bz2",
    ".dmg",
    ".exe",
    ".dll",
    ".so",
    ".dylib",
    ".a",
    ".o",
    ".bin",
    ".woff",
    ".woff2",
    ".ttf",
    ".mp3",
    ".mp4",
}

LineTriple = Tuple[str, int, str]


def _likely_text_path(path: Path) -> bool:
    # Unknown suffixes are treated as text; read_text_safely still guards
    return path.suffix.lower() not in BINARY_EXTS


def read_text_safely(path: Path, max_bytes: int = 1_000_000) -> Optional[str]:
    """
    Read small files as UTF-8 text. Returns None for oversized, binary or
    undecodable files.
    """
    try:
        if not path.is_file():
            return None
        if path.stat().st_size > max_bytes:
            logger.debug("Skipping oversized file: %s", path)
            return None
        if not _likely_text_path(path):
            return None

        data = path.read_bytes()
        # Any NUL byte means binary
        if b"\x00" in data:
            return None
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("Skipping non UTF-8 file: %s", path)
        return None
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None


def matches_any(rel_path: str, patterns: List[str]) -> bool:
    """Glob match on a posix relative path; a leading ``**/`` also matches at the root."""
    for pattern in patterns:
        if fnmatch.fnmatch(rel_path, pattern):
            return True
        if pattern.startswith("**/") and fnmatch.fnmatch(rel_path, pattern[3:]):
            return True
    return False


def load_ignore_patterns(root: Path, ignore_files: List[str]) -> List[str]:
    """
    Translate root-level ignore files into globs understood by :func:`matches_any`.

    Supports the common subset: comments, blank lines, trailing ``/`` for
    directories and a leading ``/`` anchoring to the root. Negations are
    not supported and are skipped.
    """
    patterns: List[str] = []
    for name in ignore_files:
        ignore_path = root / name
        if not ignore_path.is_file():
            continue
        try:
            lines = ignore_path.read_text(encoding="utf-8", errors="ignore").splitlines()
        except OSError as e:
            logger.warning("Cannot read ignore file %s: %s", ignore_path, e)
            continue
        for raw in lines:
            entry = raw.strip()
            if not entry or entry.startswith("#") or entry.startswith("!"):
                continue
            entry = entry.rstrip("/")
            if not entry:
                continue
            if entry.startswith("/"):
                entry = entry.lstrip("/")
                patterns.extend([entry, f"{entry}/**"])
            else:
                patterns.extend([f"**/{entry}", f"**/{entry}/**"])
    return patterns


def _is_hidden(rel_parts: Tuple[str, ...]) -> bool:
    return any(part.startswith(".") and part not in (".", "..") for part in rel_parts)


def iter_files(root: Path | str, config: Optional[Dict[str, Any]] = None) -> Iterator[Path]:
    """Yield files under *root* (or *root* itself) that pass the config filters."""
    config = config or get_default_scanner_config()
    include_globs = config.get("include_globs") or ["**/*"]
    exclude_globs = list(config.get("exclude_globs") or [])
    include_hidden = bool(config.get("include_hidden", False))

    root_path = Path(root)
    if root_path.is_file():
        if not matches_any(root_path.name, exclude_globs):
            yield root_path
        return
    if not root_path.is_dir():
        raise FileNotFoundError(f"Path not found: {root_path}")

    if config.get("respect_ignore_files", True):
        exclude_globs.extend(load_ignore_patterns(root_path, config.get("ignore_files") or []))

    for path in sorted(root_path.rglob("*")):
        if not path.is_file():
            continue
        rel = path.relative_to(root_path)
        rel_posix = rel.as_posix()
        if not include_hidden and _is_hidden(rel.parts):
            continue
        if matches_any(rel_posix, exclude_globs):
            continue
        if include_globs and not matches_any(rel_posix, include_globs):
            continue
        yield path


def iter_tree_lines(root: Path | str, config: Optional[Dict[str, Any]] = None) -> Iterator[LineTriple]:
    """Yield ``(path, line_number, text)`` for every line of every scannable file."""
    config = config or get_default_scanner_config()
    max_bytes = int(config.get("max_file_bytes", 1_000_000))
    for path in iter_files(root, config):
        text = read_text_safely(path, max_bytes=max_bytes)
        if text is None:
            continue
        path_str = str(path)
        for i, line in enumerate(split_lines(text), start=1):
            yield path_str, i, line
