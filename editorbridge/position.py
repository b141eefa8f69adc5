"""Cursor to byte offset translation."""

from __future__ import annotations

from .errors import OutOfRange

ENCODING = "utf-8"


def cursor_offset(text: str, line: int, column: int) -> int:
    """Return the byte offset of a zero-based ``(line, column)`` cursor in text.

    Columns count characters, the offset counts encoded bytes, so multi-byte
    characters before the cursor advance the offset by their full width.
    """
    lines = text.split("\n")
    if line < 0 or line >= len(lines):
        raise OutOfRange(f"line {line} outside [0, {len(lines)})")
    current = lines[line]
    if column < 0 or column > len(current):
        raise OutOfRange(f"column {column} outside [0, {len(current)}] on line {line}")

    offset = sum(len(previous.encode(ENCODING)) for previous in lines[:line])
    offset += line  # newline separators
    offset += len(current[:column].encode(ENCODING))
    return offset


__all__ = ["ENCODING", "cursor_offset"]
