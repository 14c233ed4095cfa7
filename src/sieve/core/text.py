"""Line splitting and offset helpers shared by the diff parser and the fixer."""

from __future__ import annotations
from typing import List


def split_lines(content: str) -> List[str]:
    """
    Split text into logical lines independent of the newline convention.

    Splits on ``\\n`` only and drops one trailing ``\\r`` per line, so CRLF and
    LF input give the same lines. A trailing newline does not produce an
    extra empty line. Unlike :meth:`str.splitlines` this leaves form feeds and
    unicode line separators inside a line untouched.
    """
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def char_to_byte_offset(text: str, char_offset: int) -> int:
    """UTF-8 byte offset of the character position *char_offset* in *text*."""
    return len(text[:char_offset].encode("utf-8"))


def byte_to_char_offset(text: str, byte_offset: int) -> int:
    """Character position of the UTF-8 byte offset *byte_offset* in *text*.

    Offsets that fall inside a multi-byte character round down to the start
    of that character.
    """
    prefix = text.encode("utf-8")[:max(0, byte_offset)]
    return len(prefix.decode("utf-8", errors="ignore"))
